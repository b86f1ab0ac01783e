"""
Hierarchical settings loader for einstellung.

Provides convention-based settings file discovery, env var interpolation,
and a shallow merge with "project wins" semantics.

Usage:
    from einstellung.config_loader import load_hierarchical_config

    raw = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` patterns with env values.

    * ``${VAR}`` is replaced with ``os.environ.get(VAR, "")``.
    * ``${VAR:-default}`` uses *default* when VAR is unset or empty.
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        return match.group(2) or ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Walk a nested dict/list and interpolate env vars in all strings."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate_recursive(item) for item in obj]
    return obj


def discover_config_files() -> list[Path]:
    """Return existing settings files in precedence order (highest first).

    Search order:
        1. ``EINSTELLUNG_CONFIG`` env var (explicit single path)
        2. ``.einstellung.yml`` in CWD (project-level)
        3. ``~/.config/einstellung/config.yml`` (XDG global)

    Only paths that exist on disk are returned.
    """
    candidates: list[Path] = []

    env_path = os.environ.get("EINSTELLUNG_CONFIG")
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())

    candidates.append(Path.cwd() / ".einstellung.yml")

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    config_home = (
        Path(xdg_home) if xdg_home else Path.home() / ".config"
    )
    candidates.append(config_home / "einstellung" / "config.yml")

    return [p for p in candidates if p.is_file()]


def load_hierarchical_config() -> dict[str, Any]:
    """Load and merge all discovered settings files.

    Files are loaded from lowest precedence to highest; each file's
    top-level keys replace those from earlier files.  Env var interpolation
    is applied after merging.

    Returns an empty dict when no settings files exist (zero-config).

    Raises:
        yaml.YAMLError: If a settings file is not valid YAML.
    """
    paths = discover_config_files()

    if not paths:
        logger.debug("No settings files found, using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading settings: %s", path)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except Exception:
            logger.exception("Failed to load settings file %s", path)
            raise

        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Settings file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
