"""Unit tests for the messaging gateway client"""

import asyncio
import httpx
import pytest
from debt_ledger.domain.exceptions import MessagingError
from debt_ledger.infrastructure.clients.messaging import MessagingClient


def test_disabled_client_refuses_to_send():
    client = MessagingClient(webhook_url=None)
    client.webhook_url = None

    assert client.enabled is False
    with pytest.raises(MessagingError):
        asyncio.run(client.send_text("0555", "hello"))


def test_phone_without_digits_is_rejected():
    client = MessagingClient(webhook_url="http://gateway.test/send")

    with pytest.raises(MessagingError):
        asyncio.run(client.send_text("n/a", "hello"))


def test_send_text_retries_then_succeeds(monkeypatch):
    calls = []

    async def fake_post(self, url, json=None, **kwargs):
        calls.append(json)
        request = httpx.Request("POST", url)
        status = 503 if len(calls) == 1 else 200
        return httpx.Response(status, request=request)

    monkeypatch.setattr(httpx.AsyncClient, "post", fake_post)
    client = MessagingClient(webhook_url="http://gateway.test/send")
    client.backoff_base = 0

    asyncio.run(client.send_text("+966 50 123", "hello"))

    assert len(calls) == 2
    assert calls[0] == {"phone": "96650123", "text": "hello"}


def test_send_text_gives_up_after_max_retries(monkeypatch):
    async def failing_post(self, url, json=None, **kwargs):
        raise httpx.ConnectError("gateway down")

    monkeypatch.setattr(httpx.AsyncClient, "post", failing_post)
    client = MessagingClient(webhook_url="http://gateway.test/send")
    client.backoff_base = 0
    client.max_retries = 2

    with pytest.raises(MessagingError):
        asyncio.run(client.send_text("0555", "hello"))
