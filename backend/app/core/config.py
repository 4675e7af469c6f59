# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)

_DEFAULT_SECRET_KEY = SecretStr("dev-only-secret-key-change-me")


class Settings(BaseSettings):
    app_name: str = "Tutoring Marketplace API"
    app_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL used to build download links",
    )

    # Auth (tokens are issued by the external identity provider)
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Shared secret used to verify JWT bearer tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720

    database_url: str = Field(
        default="sqlite:///./marketplace.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False

    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Midtrans payment gateway
    midtrans_server_key: SecretStr = Field(default=SecretStr(""))
    midtrans_client_key: str = ""
    midtrans_is_production: bool = False
    midtrans_verify_status: bool = Field(
        default=True,
        description="Re-query the gateway for the authoritative status on every notification",
    )
    midtrans_timeout_seconds: float = 15.0

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Platform settings defaults (overridable at runtime via the admin settings table)
    default_commission_rate: float = 0.1
    default_min_payout_amount: int = 50000
    default_payout_processing_days: int = 3

    slow_operation_threshold_seconds: float = 1.0

    is_testing: bool = False  # Set to True when running tests

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("max_page_size")
    @classmethod
    def _positive_page_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_page_size must be at least 1")
        return value

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def midtrans_snap_base_url(self) -> str:
        if self.midtrans_is_production:
            return "https://app.midtrans.com/snap/v1"
        return "https://app.sandbox.midtrans.com/snap/v1"

    @property
    def midtrans_api_base_url(self) -> str:
        if self.midtrans_is_production:
            return "https://api.midtrans.com/v2"
        return "https://api.sandbox.midtrans.com/v2"


settings = Settings()
if is_running_tests():
    settings.is_testing = True
