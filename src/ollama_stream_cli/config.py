"""Application configuration using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Frozen so a single instance can be passed around by value; CLI flags
    produce a new instance via ``model_copy(update=...)``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # Inference server
    host: str = Field(
        "localhost", alias="OLLAMA_HOST",
        description="Host name of the inference server.",
    )
    port: int = Field(
        11434, alias="OLLAMA_PORT",
        description="Port of the inference server.",
    )
    model: str = Field(
        "llama2", alias="OLLAMA_MODEL",
        description="Model name sent with every generate/chat request.",
    )
    timeout: float = Field(
        300.0, alias="OLLAMA_TIMEOUT",
        description="HTTP timeout in seconds. Applies to connect and to each read of the stream.",
    )

    # Stream handling
    max_decode_errors: int = Field(
        1, alias="MAX_DECODE_ERRORS",
        description="Malformed frames tolerated per response. One more than this fails the request.",
    )
    translate_target_language: str = Field(
        "English", alias="TRANSLATE_TARGET_LANGUAGE",
        description="Language the translation mode asks the model to translate into.",
    )

    # Logging
    log_level: str = Field(
        "WARNING", alias="LOG_LEVEL",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL.",
    )
    log_file: str = Field(
        "", alias="LOG_FILE",
        description="Path to log file for file-based logging with rotation. Empty = console only.",
    )
    log_file_max_bytes: int = Field(
        10_485_760, alias="LOG_FILE_MAX_BYTES",
        description="Max size in bytes per log file before rotation. Default: 10 MB.",
    )
    log_file_backup_count: int = Field(
        5, alias="LOG_FILE_BACKUP_COUNT",
        description="Number of rotated backup log files to keep.",
    )

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
