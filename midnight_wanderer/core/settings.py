import logging
from typing import Literal

from pydantic import Field, HttpUrl, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    gemini_api_key: str
    text_backend: Literal["gemini", "ollama"] = "gemini"
    text_model: str = "gemini-2.5-flash"
    image_model: str = "imagen-4.0-generate-001"
    image_mime_type: Literal["image/jpeg", "image/png"] = "image/jpeg"
    image_aspect_ratio: Literal["1:1", "3:4", "4:3", "9:16", "16:9"] = "16:9"
    enable_images: bool = True
    ollama_host: HttpUrl = "http://localhost:11434"
    ollama_model: str = "gemma3:4b"
    request_timeout_ms: int = Field(default=120_000, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("gemini_api_key")
    @classmethod
    def _key_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value!r}")
        return value


def load_settings(**overrides) -> Settings:
    """
    Read settings from the environment (and .env), failing fast with a
    ConfigurationError that names every offending variable.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        names = sorted({str(err["loc"][0]).upper() for err in e.errors() if err["loc"]})
        logger.error("Invalid configuration: %s", e)
        raise ConfigurationError(
            f"Invalid or missing configuration: {', '.join(names)}. "
            "Set them in the environment or in a .env file."
        ) from e
