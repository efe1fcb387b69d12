"""
Application settings and configuration.

This module provides a centralized configuration management system using Pydantic.
It loads settings from environment variables, .env files, or falls back to defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, validator
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


def _root_dir() -> Path:
    """Base directory for runtime files (``db/``, ``logs/``): the working directory."""
    return Path.cwd()


DEFAULT_INTENT_MAP = {
    "AMAZON.HelpIntent": "HelpIntent",
    "AMAZON.FallbackIntent": "Unhandled",
    "AMAZON.StopIntent": "END",
    "AMAZON.CancelIntent": "END",
    "Default Fallback Intent": "Unhandled",
}


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )

    file_enabled: bool = Field(
        default=False,
        description="Whether to write logs to a file"
    )

    console_enabled: bool = Field(
        default=True,
        description="Whether to write logs to console"
    )

    @validator("level")
    def validate_log_level(cls, v):
        """Validate that log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class DatabaseSettings(BaseModel):
    """User data persistence settings."""

    persistence: str = Field(
        default="file",
        description="Where user data is kept ('file' or 'memory')"
    )

    db_path: Path = Field(
        default_factory=lambda: _root_dir() / "db" / "db.json",
        description="Path of the JSON document holding user data"
    )

    @validator("persistence")
    def validate_persistence(cls, v):
        """Validate the persistence backend name."""
        if v.lower() not in ("file", "memory"):
            raise ValueError("Persistence must be 'file' or 'memory'")
        return v.lower()


class SkillSettings(BaseModel):
    """Conversation runtime settings."""

    locale: str = Field(
        default="en-US",
        description="Locale used when a request does not carry one"
    )

    intent_map: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_INTENT_MAP),
        description="Maps platform intent names to handler names"
    )

    save_user_data: bool = Field(
        default=True,
        description="Persist user data after every request"
    )

    max_redirects: int = Field(
        default=10,
        description="Maximum number of intent redirects within one request"
    )

    @validator("max_redirects")
    def max_redirects_must_be_positive(cls, v):
        """Validate the redirect limit."""
        if v < 1:
            raise ValueError("max_redirects must be at least 1")
        return v


class ServerSettings(BaseModel):
    """Webhook server settings."""

    host: str = Field(default="0.0.0.0", description="Interface the webhook binds to")
    port: int = Field(default=3000, description="Port the webhook listens on")


class Settings(BaseModel):
    """Main application settings."""

    # Application info
    app_name: str = Field(
        default="Hello World Voice Skill",
        description="Application name"
    )

    app_version: str = Field(
        default="0.1.0",
        description="Application version"
    )

    # Sub-configurations
    logging: LoggingSettings = Field(default_factory=lambda: LoggingSettings(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format=os.environ.get("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        file_enabled=_parse_bool(os.environ.get("LOG_FILE_ENABLED", "False")),
        console_enabled=_parse_bool(os.environ.get("LOG_CONSOLE_ENABLED", "True"))
    ))

    database: DatabaseSettings = Field(default_factory=lambda: DatabaseSettings(
        persistence=os.environ.get("SKILL_PERSISTENCE", "file"),
        db_path=Path(os.environ.get("SKILL_DB_PATH") or _root_dir() / "db" / "db.json")
    ))

    skill: SkillSettings = Field(default_factory=lambda: SkillSettings(
        locale=os.environ.get("SKILL_LOCALE", "en-US"),
        intent_map=_parse_intent_map(os.environ.get("SKILL_INTENT_MAP")),
        save_user_data=_parse_bool(os.environ.get("SKILL_SAVE_USER_DATA", "True")),
        max_redirects=int(os.environ.get("SKILL_MAX_REDIRECTS", "10"))
    ))

    server: ServerSettings = Field(default_factory=lambda: ServerSettings(
        host=os.environ.get("SERVER_HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000"))
    ))

    # Paths
    root_dir: Path = Field(default_factory=_root_dir)
    logs_dir: Path = Field(default_factory=lambda: _root_dir() / "logs")

    # Runtime configs
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    def __init__(self, **data: Any):
        """Initialize settings, allowing a debug mode override from the environment."""
        super().__init__(**data)
        self.debug_mode = _parse_bool(os.environ.get("DEBUG_MODE", str(self.debug_mode)))

    def get_log_path(self, name: str) -> Path:
        """Get path for a named log file."""
        return self.logs_dir / f"{name}.log"


def _parse_intent_map(value: Optional[str]) -> Dict[str, str]:
    """Parse a JSON object of intent name overrides on top of the defaults."""
    intent_map = dict(DEFAULT_INTENT_MAP)
    if not value:
        return intent_map
    try:
        overrides = json.loads(value)
    except json.JSONDecodeError as e:
        logging.warning(f"Ignoring invalid SKILL_INTENT_MAP: {e}")
        return intent_map
    if not isinstance(overrides, dict):
        logging.warning("Ignoring SKILL_INTENT_MAP, expected a JSON object")
        return intent_map
    intent_map.update({str(k): str(v) for k, v in overrides.items()})
    return intent_map


def _parse_bool(value: str) -> bool:
    """Parse string to boolean."""
    return value.lower() in ("true", "1", "t", "yes", "y")
