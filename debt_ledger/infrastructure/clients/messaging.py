"""Messaging gateway webhook client with exponential backoff retry logic"""

import httpx
import asyncio
from debt_ledger.config import settings
from debt_ledger.domain.exceptions import MessagingError
from debt_ledger.domain.receipts import messaging_phone
from debt_ledger.infrastructure.observability.metrics import messaging_latency_histogram, messaging_failure_counter


class MessagingClient:
    """Client handing receipt and summary texts to an external messaging gateway"""

    def __init__(self, webhook_url: str | None = None, timeout: float | None = None):
        self.webhook_url = webhook_url or settings.messaging_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_text(self, phone: str, text: str) -> None:
        """
        Send a text message to a client's phone through the gateway.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s, 16s (base^attempt)
        - Retries on error statuses and network failures
        - Tracks latency histogram and failure counter

        Raises:
            MessagingError: gateway not configured, phone has no digits, or
                every attempt failed
        """
        if not self.enabled:
            raise MessagingError("Messaging webhook is not configured")

        recipient = messaging_phone(phone)
        if not recipient:
            raise MessagingError("Client has no phone number to message")

        payload = {"phone": recipient, "text": text}
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with messaging_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    messaging_failure_counter.inc()

                    if attempt >= self.max_retries:
                        # Final failure after all retries
                        raise MessagingError(f"Messaging webhook failed after {attempt} attempts") from e

                    # Exponential backoff: 1s, 2s, 4s, 8s, 16s
                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
