"""Configuration for the tar splitter."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from tarsplit.libs.tar_archive.exceptions import ConfigurationError

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "conf"


class SplitLimits(BaseModel):
    """Fixed floors applied when planning chunk sizes."""

    min_archive_size: int = Field(default=1024, ge=1)
    """Minimum size of the source archive, of an explicit and of a calculated chunk size."""

    min_num_chunks: int = Field(default=2, ge=1)
    """A requested number of chunks must be strictly greater than this."""


class ArchiveConfig(BaseModel):
    format: Literal["gnu", "pax", "ustar"] = "pax"
    encoding: str = "utf-8"
    copy_buffer_size: int = Field(default=1024 * 1024, ge=512)
    default_prefix: str = "split"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    limits: SplitLimits = Field(default_factory=SplitLimits)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class Settings(BaseSettings):
    app_name: str = "Tar Split Service"
    environment: str = "default"
    config_dir: Path = DEFAULT_CONFIG_DIR

    model_config = SettingsConfigDict(
        env_prefix="TARSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


_config: Optional[AppConfig] = None


def load_config(
    environment: Optional[str] = None, config_dir: Optional[Path] = None
) -> AppConfig:
    """Load ``{config_dir}/{environment}.yaml`` into an :class:`AppConfig`."""
    global _config

    settings = get_settings()
    environment = environment or settings.environment
    config_path = Path(config_dir or settings.config_dir) / f"{environment}.yaml"

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration {config_path}: {exc}") from exc

    try:
        _config = AppConfig(**config_data)
    except (TypeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {exc}") from exc
    return _config


def get_config() -> AppConfig:
    """Return the loaded configuration, falling back to built-in defaults."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    config = config or get_config().logging
    logging.basicConfig(level=config.level.upper(), format=config.format)
