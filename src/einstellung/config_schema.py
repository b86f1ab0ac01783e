"""Settings schema for einstellung.

Defines Pydantic models for the settings file with dedicated sections for
synchronization behaviour and logging.

Usage:
    from einstellung.config_schema import build_settings

    raw = load_hierarchical_config()
    settings = build_settings(raw)
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="WARNING", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


class Settings(BaseModel):
    """Top-level settings.

    Every field has a default, so ``Settings()`` (zero-config) is always
    valid.
    """

    manifest: str = Field(
        default=".einstellung", description="Manifest file path"
    )
    skip_missing: bool = Field(
        default=False,
        description="Ignore search locations that do not exist",
    )
    diff_context: int = Field(
        default=3,
        ge=0,
        le=20,
        description="Context lines shown in previews (0-20)",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_settings(raw_data: dict) -> Settings:
    """Construct ``Settings`` from the dict returned by
    ``load_hierarchical_config()``.

    Missing keys get defaults.

    Raises:
        pydantic.ValidationError: If a value has the wrong type or range.
    """
    if not raw_data:
        return Settings()

    return Settings(**raw_data)
