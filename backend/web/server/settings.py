"""Web server configuration via environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from shared.storage import MAX_STILL_BYTES
from shared.validators import StringListEnvSettingsSource, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class WebServerSettings(BaseSettings):
    model_config = {"env_prefix": "DAYDLE_"}

    log_dir: str = "backend/logs/web"
    cors_origins: list[str] = []
    # Unset serves the built-in demo dataset instead of a database.
    database_path: Path | None = None
    # Unset disables every admin route (503).
    admin_api_key: str | None = Field(default=None, min_length=16)
    stills_dir: str = Field(default="backend/data/stills", min_length=1)
    stills_url_prefix: str = "/stills"
    max_upload_bytes: int = Field(default=MAX_STILL_BYTES, ge=1)

    @property
    def demo_mode(self) -> bool:
        return self.database_path is None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v)

    @field_validator("stills_url_prefix")
    @classmethod
    def validate_stills_url_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("stills_url_prefix must start with '/'")
        return v.rstrip("/") or "/stills"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings)
