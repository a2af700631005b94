"""Configuration management using Pydantic Settings"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./debt_ledger.db"

    # Service
    service_name: str = "debt-ledger"
    log_level: str = "INFO"

    # Debt form defaults
    default_payment_day: int = 27
    default_month_count: int = 6
    default_profit_percentage: float = 10.0

    # Backups
    backup_label_prefix: str = "debt_backup"

    # Messaging gateway (receipts and summaries); disabled when unset
    messaging_webhook_url: Optional[str] = None

    # HTTP Client
    http_timeout_seconds: float = 5.0
    webhook_max_retries: int = 5
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
