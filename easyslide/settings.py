"""Runtime settings for the slide service.

Values come from environment variables prefixed with ``EASYSLIDE_``, e.g.
``EASYSLIDE_MODE=proxy`` or ``EASYSLIDE_STATIC_DIR=/srv/slides``.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeliveryMode(str, Enum):
    """How the uploaded deck reaches the browser."""

    STATIC = "static"  # render server-side, serve static files
    PROXY = "proxy"  # delegate to an external presentation server


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EASYSLIDE_")

    mode: DeliveryMode = DeliveryMode.STATIC
    host: str = "0.0.0.0"
    port: int = 8081
    log_level: str = "INFO"

    static_dir: Path = Path("./static")
    slides_dir: Path = Path("./slides")
    max_upload_bytes: int = 10 << 20

    renderer_command: str = "reveal-md"
    renderer_host: str = "0.0.0.0"
    renderer_port: int = 1948
    restart_settle_seconds: float = 1.0
    stop_timeout_seconds: float = 5.0

    @field_validator("port", "renderer_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("max_upload_bytes")
    @classmethod
    def validate_max_upload_bytes(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_upload_bytes must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
