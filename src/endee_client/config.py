from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from endee_client.codec.metadata import HEX_KEY_PATTERN

DEFAULT_BASE_URL = "http://127.0.0.1:8080/api/v1"


class Settings(BaseSettings):
    """Client configuration loaded from environment variables or .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ENDEE_",
        "extra": "ignore",
    }

    # Service
    token: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = Field(default=30.0, gt=0)

    # Metadata encryption
    encryption_key: str | None = None

    @field_validator("encryption_key")
    @classmethod
    def _check_encryption_key(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if HEX_KEY_PATTERN.fullmatch(value) is None:
            raise ValueError("must be 64 hex characters (256 bits)")
        return value
