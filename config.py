"""
BookmarkHub v1 - Shared Configuration Module

This module provides centralized configuration management for the CLI and
the web API. It loads settings from environment variables and provides
typed access.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """Database configuration"""
    url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    pool_min_size: int = Field(default=2, alias="DB_POOL_MIN_SIZE")
    pool_max_size: int = Field(default=10, alias="DB_POOL_MAX_SIZE")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class ImportSettings(BaseSettings):
    """Bookmark import configuration"""
    default_dialect: str = Field(default="chromium", alias="DEFAULT_DIALECT")
    encoding: str = Field(default="utf-8", alias="IMPORT_ENCODING")
    max_bytes: int = Field(default=20 * 1024 * 1024, alias="MAX_IMPORT_BYTES")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class TagSettings(BaseSettings):
    """Tag display configuration"""
    gradient_offset: int = Field(default=20, alias="TAG_GRADIENT_OFFSET")
    default_color: str = Field(default="#1E88E5", alias="DEFAULT_TAG_COLOR")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class AppSettings(BaseSettings):
    """General application settings"""
    env: str = Field(default="development", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    default_user_id: Optional[str] = Field(default=None, alias="DEFAULT_USER_ID")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        alias="LOG_FORMAT",
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class Config:
    """Main configuration class that combines all settings"""

    def __init__(self):
        self.database = DatabaseSettings()
        self.imports = ImportSettings()
        self.tags = TagSettings()
        self.app = AppSettings()

    @property
    def is_development(self) -> bool:
        return self.app.env == "development"

    @property
    def is_production(self) -> bool:
        return self.app.env == "production"


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the configuration instance, loading it on first use"""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration so the next call re-reads the environment"""
    global _config
    _config = None


def configure_logging(cfg: Optional[Config] = None) -> None:
    """Configure root logging from LOG_LEVEL and LOG_FORMAT"""
    cfg = cfg or get_config()
    logging.basicConfig(
        level=getattr(logging, cfg.app.log_level.upper(), logging.INFO),
        format=cfg.app.log_format,
    )


def load_env(env_file: str = ".env") -> None:
    """Load environment variables from file"""
    from dotenv import load_dotenv
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)
        reset_config()
    else:
        logger.debug(f"{env_file} not found, using process environment only")
