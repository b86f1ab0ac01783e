"""Runtime configuration for einstellung.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > settings file > defaults

Environment variables:
    EINSTELLUNG_MANIFEST: Manifest path (optional, default: .einstellung)
    EINSTELLUNG_SKIP_MISSING: Ignore missing search locations
        (optional, default: false)
    EINSTELLUNG_DIFF_CONTEXT: Preview context lines (optional, default: 3)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from einstellung.config_schema import Settings

logger = logging.getLogger(__name__)


@dataclass
class Config:
    manifest: Path
    skip_missing: bool = False
    diff_context: int = 3
    debug: bool = False
    log_file: str | None = None


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Raises:
        ValueError: If the manifest path is a directory, or the diff
            context is out of range.
    """
    if config.manifest.is_dir():
        raise ValueError(
            f"Manifest path '{config.manifest}' is a directory"
        )

    if not (0 <= config.diff_context <= 20):
        raise ValueError(
            f"Invalid diff context '{config.diff_context}': "
            "must be a number between 0 and 20"
        )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def load_config(
    manifest: str | None = None,
    skip_missing: bool = False,
    debug: bool = False,
    log_file: str | None = None,
    settings: Settings | None = None,
) -> Config:
    """Load configuration with unified precedence.

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        manifest: Override manifest path (CLI).
        skip_missing: Skip missing locations (CLI flag).
        debug: Enable debug logging (CLI flag).
        log_file: Log file path (CLI).
        settings: Values from the settings file, used as fallbacks.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If a value is invalid.
    """
    fb = settings or Settings()

    manifest_path = (
        manifest or os.getenv("EINSTELLUNG_MANIFEST") or fb.manifest
    ).strip()
    if not manifest_path:
        raise ValueError(
            "Manifest path cannot be empty. Set EINSTELLUNG_MANIFEST "
            "or pass --manifest."
        )

    if skip_missing:
        final_skip = True
    else:
        env_skip = _get_bool_env("EINSTELLUNG_SKIP_MISSING")
        final_skip = env_skip if env_skip is not None else fb.skip_missing

    context_raw = os.getenv("EINSTELLUNG_DIFF_CONTEXT")
    if context_raw is not None:
        try:
            final_context = int(context_raw)
        except ValueError:
            raise ValueError(
                f"Invalid EINSTELLUNG_DIFF_CONTEXT '{context_raw}': "
                "must be a number between 0 and 20"
            ) from None
    else:
        final_context = fb.diff_context

    config = Config(
        manifest=Path(manifest_path).expanduser(),
        skip_missing=final_skip,
        diff_context=final_context,
        debug=debug,
        log_file=log_file or fb.logging.file,
    )

    validate_config(config)

    return config
