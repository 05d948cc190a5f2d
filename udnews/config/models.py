"""Configuration models."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 UD-News-Aggregator/1.0"
)


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("udnews", description="Database name")
    user: str = Field("udnews_user", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")


class StoreConfig(BaseModel):
    """Entity store backend selection."""

    backend: Literal["memory", "postgres"] = Field(
        "memory", description="Store backend (memory, postgres)"
    )


class IngestionConfig(BaseModel):
    """Feed ingestion and scheduling parameters."""

    fetch_timeout: float = Field(10.0, description="Hard time budget per feed fetch (seconds)", gt=0)
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent sent to publishers")
    interval_minutes: int = Field(30, description="Minutes between scheduled runs", ge=1, le=1440)
    initial_delay_seconds: float = Field(5.0, description="Delay before the first run", ge=0)
    max_concurrent: int = Field(1, description="Sources fetched in parallel", ge=1, le=32)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    console: bool = Field(True, description="Log to the console")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and check the level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class ConfigModel(BaseModel):
    """Main configuration model."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class SourceConfig(BaseModel):
    """Source configuration from sources.yaml."""

    name: str = Field(..., description="Source name", min_length=1)
    url: str = Field(..., description="RSS feed URL", min_length=1)
    is_active: bool = Field(True, description="Whether source is ingested")
