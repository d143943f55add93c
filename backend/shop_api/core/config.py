"""
Centralized application configuration
"""
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Development defaults, refused in production
DEVELOPMENT_SECRETS = {"change-me", "change-me-too"}


class Settings(BaseSettings):
    """Application settings, read from the environment and .env"""

    # API Settings
    API_TITLE: str = "Shop API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "E-commerce backend: orders, products, inventory and customers"
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017/shop"
    MONGODB_DATABASE: Optional[str] = None
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGODB_MAX_POOL_SIZE: int = 50

    # Authentication
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRATION_MINUTES: int = 60 * 24
    MASTER_KEY: str = ""
    SESSION_SECRET: str = "change-me-too"

    # Error monitoring
    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @model_validator(mode="after")
    def check_production_secrets(self) -> "Settings":
        """Tokens and session cookies must not be signed with a known secret"""
        if self.is_production:
            for name in ("JWT_SECRET", "SESSION_SECRET"):
                value = getattr(self, name)
                if not value or value in DEVELOPMENT_SECRETS:
                    raise ValueError(f"{name} environment variable must be set in production")
        return self


# Browser origins allowed to call the API with credentials.
# Not read from the environment.
ALLOWED_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://localhost:3002",
    "http://localhost:8080",
    "https://shop.30shine.com",
    "https://shop-app.30shine.com",
    "https://shop-std.30shine.com",
    "https://admin-shop.30shine.com",
    "https://admin-shop-std.30shine.com",
    "https://std-admin-shop.30shine.com",
    "https://customer.30shine.com",
    "https://std-customer.30shine.com",
    "https://30shine.com",
    "https://std.30shine.com",
    "https://inventory.30shine.com",
    "https://std-inventory.30shine.com",
    "https://inventory-test.30shine.org",
    "https://shop.30shine.org",
    "https://store.30shine.org",
    "http://store-dev.30shine.org",
    "https://admin-store.30shine.org",
    "http://customer.30shine.org",
    "http://customer-test-1.30shine.org",
    "http://customer-test-2.30shine.org",
    "https://v3.30shine.org",
    "https://webv3-apibookingv3.30shine.org",
]


settings = Settings()
