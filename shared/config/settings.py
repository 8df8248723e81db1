"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    # Database
    database_url: str = "sqlite:///./cafe.db"

    # Pool settings (ignored for SQLite)
    db_pool_max_size: int = 20
    db_max_overflow: int = 15
    db_pool_timeout: int = 30  # Wait max 30s for connection from pool
    db_pool_recycle: int = 1800  # Recycle connections after 30 minutes
    db_connect_timeout: int = 10
    db_echo: bool = False

    # Per-order serialization: how long a call waits for another call
    # on the same order before failing fast
    order_lock_timeout_seconds: float = 5.0

    # Order queries
    order_history_limit: int = 5
    open_orders_window_hours: int = 24

    # Item entries
    max_comment_length: int = 500

    # Environment
    environment: str = "development"
    debug: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CAFE_"
        case_sensitive = False

    @property
    def is_sqlite(self) -> bool:
        """True when the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    def validate_production_settings(self) -> list[str]:
        """
        Validate that settings are safe for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.is_sqlite:
                errors.append(
                    "DATABASE_URL must point to a server database in production "
                    "(row locks are not enforced by SQLite)"
                )

            if self.order_lock_timeout_seconds <= 0:
                errors.append("ORDER_LOCK_TIMEOUT_SECONDS must be positive")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()
