"""
Application configuration module.
Loads environment variables and provides application-wide settings.

Provider credentials never leave this object: services receive the
Settings instance at construction instead of reading the environment.
"""
from pathlib import Path
from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Get project root (two levels up from this file)
PROJECT_ROOT = Path(__file__).parent.parent.parent

PLAID_HOSTS = {
    "sandbox": "https://sandbox.plaid.com",
    "development": "https://development.plaid.com",
    "production": "https://production.plaid.com",
    }


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables or .env file.
    (Note: Environment variables take precedence over .env file)
    """
    # API
    API_PREFIX: str = ""
    PROJECT_NAME: str = "Fundbridge"
    VERSION: str = "0.1.0"

    # Server
    PORT: int = 3000
    SSL_KEYFILE: str = str(PROJECT_ROOT / "localhost-key.pem")
    SSL_CERTFILE: str = str(PROJECT_ROOT / "localhost.pem")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True

    # CORS (browser client dev server)
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:5173", "https://localhost:5173"]

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Moov (banking platform)
    MOOV_API_BASE_URL: str = "https://api.moov.io"
    MOOV_PUBLIC_KEY: str = ""
    MOOV_SECRET: str = ""
    MOOV_ACCOUNT_ID: str = ""  # Platform (facilitator) account
    MOOV_API_VERSION: str = "v2025.07.00"
    MOOV_ORIGIN: str = "http://localhost:3000"

    # Plaid (bank-link aggregator)
    PLAID_CLIENT_ID: str = ""
    PLAID_API_KEY: str = ""
    PLAID_ENV: Literal["sandbox", "development", "production"] = "sandbox"
    PLAID_CLIENT_NAME: str = "Personal Finance App"
    PLAID_CLIENT_USER_ID: str = "fundbridge-user"
    PLAID_USER_PHONE: str = "+1 415 555 0123"
    PLAID_PROCESSOR: str = "moov"

    model_config = ConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        case_sensitive=True,
        env_file_encoding='utf-8',
        extra='ignore',
        )

    @property
    def plaid_base_url(self) -> str:
        """Aggregator host for the configured PLAID_ENV."""
        return PLAID_HOSTS[self.PLAID_ENV]

    def missing_credentials(self) -> list[str]:
        """
        List provider credentials that are not configured.

        Returns:
            Names of the empty credential settings (empty list when complete)
        """
        required = ("MOOV_PUBLIC_KEY", "MOOV_SECRET", "MOOV_ACCOUNT_ID", "PLAID_CLIENT_ID", "PLAID_API_KEY")
        return [name for name in required if not getattr(self, name)]


def get_settings() -> Settings:
    """
    Get settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
