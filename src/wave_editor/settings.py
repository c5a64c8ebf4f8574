"""Application settings loaded from the environment or .env via Pydantic."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

SESSION_FILE_NAME = "waveform_state.json"


class EditorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    state_dir: Path = Field(
        default=Path("~/.wave_editor"),
        validation_alias="WAVE_EDITOR_STATE_DIR",
        validate_default=True,
    )
    fallback_wave: Optional[Path] = Field(default=None, validation_alias="WAVE_EDITOR_FALLBACK_WAVE")
    config_file: Optional[Path] = Field(default=None, validation_alias="WAVE_EDITOR_CONFIG")

    @field_validator("state_dir", mode="before")
    @classmethod
    def _expand_state_dir(cls, value: Path) -> Path:
        return Path(value).expanduser().resolve()

    @field_validator("fallback_wave", "config_file", mode="before")
    @classmethod
    def _expand_optional(cls, value: Optional[Path]) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser().resolve()


_settings: Optional[EditorSettings] = None


def get_settings() -> EditorSettings:
    global _settings
    if _settings is None:
        _settings = EditorSettings()
        logger.debug("Session state directory: %s", _settings.state_dir)
    return _settings


def state_dir() -> Path:
    return get_settings().state_dir


def session_state_path() -> Path:
    return state_dir() / SESSION_FILE_NAME


def fallback_wave_path() -> Optional[Path]:
    return get_settings().fallback_wave


def reset_settings_cache() -> None:
    global _settings
    _settings = None
