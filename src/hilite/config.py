"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hilite.dom.styles import default_display

logger = logging.getLogger(__name__)

# src/hilite/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_TAG_NAME = re.compile(r"^[a-zA-Z][a-zA-Z0-9-]*$")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class MarkerConfig(BaseModel):
    """Marker elements wrapped around highlighted text."""

    tag: str = "span"
    # Attribute carrying the owning highlight's id. Empty string disables it.
    id_attribute: str = "data-highlight"

    @field_validator("tag")
    @classmethod
    def _valid_tag(cls, value: str) -> str:
        if not _TAG_NAME.match(value):
            msg = f"MARKER__TAG must be a plain element name, got {value!r}"
            raise ValueError(msg)
        tag = value.lower()
        # Markers stay inline-level
        if default_display(tag) != "inline":
            msg = f"MARKER__TAG must be an inline element, got {value!r}"
            raise ValueError(msg)
        return tag


class ParserConfig(BaseModel):
    """BeautifulSoup tree builder used when parsing HTML."""

    features: str = "html.parser"


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    to_file: bool = False
    dir: Path = Path("logs")

    @field_validator("level")
    @classmethod
    def _valid_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            msg = f"LOG__LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return level


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``MARKER__TAG``, ``PARSER__FEATURES``, ``LOG__LEVEL``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    marker: MarkerConfig = MarkerConfig()
    parser: ParserConfig = ParserConfig()
    log: LogConfig = LogConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
