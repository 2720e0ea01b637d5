"""
Stockledger settings.

Every value can be overridden from the environment (or a ``.env`` file);
each section reads its own prefix, e.g. ``STORAGE_DATA_DIR`` or
``INVENTORY_OVERSTOCK_MULTIPLIER``.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the SQLite database lives and how it is pooled."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stockledger.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = []


class InventorySettings(BaseSettings):
    """Inventory policy."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_", env_parse_none_str="none")

    # Stock above reorder_point * multiplier is reported as over-stocked.
    # INVENTORY_OVERSTOCK_MULTIPLIER=none disables the status.
    overstock_multiplier: float | None = Field(default=3.0, gt=0)

    max_reference_length: int = Field(default=50, ge=1)
    max_reason_length: int = Field(default=255, ge=1)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Stockledger Inventory"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
