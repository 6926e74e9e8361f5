from decimal import Decimal
from typing import Literal, Optional
from urllib.parse import quote_plus
import os

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "local"

    # Which entity store backs the engine: "memory" or "sql"
    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    SEED_SAMPLE_DATA: bool = False

    # Database URL - can be provided directly or constructed from components
    DATABASE_URL: Optional[str] = None

    # Individual database components (for constructing DATABASE_URL)
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = ""

    # Money rules
    MAX_AMOUNT: Decimal = Decimal("1000000")
    AUTO_REPAIR_CEILING: Decimal = Decimal("1000")
    BALANCE_TOLERANCE: Decimal = Decimal("0.01")

    # Inventory
    LOW_STOCK_THRESHOLD: Decimal = Decimal("5")
    DEFAULT_UNIT: str = "kg"
    SYSTEM_OWNER_ID: str = "system"

    # Server
    LOCAL_URL: str = "http://127.0.0.1:8000"

    model_config = SettingsConfigDict(
        env_file=".env" if os.getenv("APP_ENV", "local") == "local" else ".env.prod",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode='after')
    def construct_database_url(self):
        """Construct DATABASE_URL from components if not provided directly."""
        if not self.DATABASE_URL:
            if not self.DB_NAME:
                # Local development falls back to a SQLite file
                self.DATABASE_URL = "sqlite:///./shopledger.db"
                return self

            # URL encode password to handle special characters
            password_part = f":{quote_plus(self.DB_PASSWORD)}" if self.DB_PASSWORD else ""
            self.DATABASE_URL = f"postgresql://{self.DB_USER}{password_part}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

        return self

    @property
    def database_url(self) -> str:
        """Get DATABASE_URL as a guaranteed string."""
        assert self.DATABASE_URL is not None, "DATABASE_URL must be set"
        return self.DATABASE_URL


settings = Settings()
