"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel, SourceConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "UDNEWS_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "udnews" / "config.yaml"
SOURCES_FILENAME = "sources.yaml"


class Config:
    """Lazily loaded configuration plus the paths derived from it."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize config manager.

        Args:
            config_path: YAML file to read; falls back to $UDNEWS_CONFIG,
                then ~/.config/udnews/config.yaml
        """
        if config_path is None:
            from_env = os.environ.get(CONFIG_ENV_VAR)
            config_path = Path(from_env) if from_env else DEFAULT_CONFIG_PATH
        self.config_path = Path(config_path)
        self._config: Optional[ConfigModel] = None

    @classmethod
    def from_model(cls, model: ConfigModel, config_path: Optional[Path] = None) -> "Config":
        """Wrap an in-memory model without reading from disk."""
        config = cls(config_path)
        config._config = model
        return config

    @property
    def config(self) -> ConfigModel:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        """Feed list kept beside the config file."""
        return self.config_path.parent / SOURCES_FILENAME

    def get_db_config(self) -> Dict[str, Any]:
        """Postgres settings with the password resolved from the environment."""
        db_config = self.config.postgres.model_dump()

        env_name = db_config.get("password_env")
        if env_name and os.environ.get(env_name):
            db_config["password"] = os.environ[env_name]

        return db_config


def _read_yaml(path: Path, kind: str) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"{kind.capitalize()} file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {kind} file: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML in {kind} file: expected a mapping at the top level")
    return data


def _write_yaml(data: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_config(config_path: Path) -> ConfigModel:
    """
    Load configuration from a YAML file.

    Missing sections take their defaults.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the YAML or its values are invalid
    """
    data = _read_yaml(config_path, "config")
    try:
        return ConfigModel(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """
    Load the feed list, skipping entries that fail validation.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the YAML is invalid
    """
    entries = _read_yaml(sources_path, "sources").get("sources") or []

    sources = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed source entry: %r", entry)
            continue
        try:
            sources.append(SourceConfig(**entry))
        except ValidationError as e:
            logger.warning("Skipping invalid source %s: %s", entry.get("name", "unknown"), e)

    return sources


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Write configuration to a YAML file, creating parent directories."""
    _write_yaml(config.model_dump(), config_path)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    """Write the feed list to a YAML file, creating parent directories."""
    _write_yaml({"sources": [s.model_dump() for s in sources]}, sources_path)
