from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    LOG_LEVEL: str = Field("INFO", description="Root log level for diagnostics")
    REGISTRY_DB_URL: str = Field(
        "sqlite:///data/commands.db",
        description="SQLModel URL of the persisted command registry"
    )
    DEFAULT_PARAMETER_SET_INDEX: int = Field(
        0,
        ge=0,
        description="Parameter set ordinal used when the caller does not pick one"
    )
    COMPRESS_OUTPUT: bool = Field(
        True,
        description="CLI default for compact (minified) JSON output"
    )
    JSON_MAX_DEPTH: int = Field(
        10,
        ge=8,
        description="Maximum nesting depth allowed in the serialized manifest"
    )

# Singleton instance
settings = Settings()
