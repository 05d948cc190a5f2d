"""Configuration management for the news aggregator."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    ConfigModel,
    IngestionConfig,
    LoggingConfig,
    PostgresConfig,
    SourceConfig,
    StoreConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "IngestionConfig",
    "LoggingConfig",
    "PostgresConfig",
    "SourceConfig",
    "StoreConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
