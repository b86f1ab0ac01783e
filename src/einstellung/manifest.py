"""
Manifest parsing for einstellung.

The manifest lists one entry per line::

    # canonical file          search locations...
    dotfiles/gitconfig        ~/.gitconfig  $WORK_HOME/.gitconfig

Blank lines and lines starting with ``#`` are ignored.  Paths are expanded
like a shell would (``~``, ``$VAR``, ``${VAR}``); an undefined variable is
an error rather than being left in place.  Relative paths are relative to
the directory holding the manifest.

Usage:
    from einstellung.manifest import load_manifest

    entries = load_manifest(Path(".einstellung"))
"""

import logging
import os
import re
from pathlib import Path

from einstellung.exceptions import (
    InvalidPathError,
    ManifestError,
    ManifestNotFoundError,
)
from einstellung.sync.models import Entry

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = ".einstellung"

# Matches $VAR and ${VAR}
_VAR_PATTERN = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z_][A-Za-z0-9_]*))")
_UNTERMINATED = re.compile(r"\$\{[^}]*$")


def expand_path(value: str) -> str:
    """Expand ``~`` and environment variables in *value*.

    Raises:
        InvalidPathError: If a referenced variable is unset, a ``${`` is
            not closed, or the home directory cannot be determined.
    """

    def _replace(match: re.Match) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        if not name:
            raise InvalidPathError(value, "empty variable name")
        env_val = os.environ.get(name)
        if env_val is None:
            raise InvalidPathError(
                value, f"environment variable {name} not found"
            )
        return env_val

    if _UNTERMINATED.search(value):
        raise InvalidPathError(value, "unterminated variable reference")

    expanded = _VAR_PATTERN.sub(_replace, value)
    if expanded.startswith("~"):
        home = os.path.expanduser(expanded)
        if home.startswith("~"):
            raise InvalidPathError(value, "home directory not found")
        expanded = home
    return expanded


def _anchor(path: str, base_dir: Path | None) -> str:
    if base_dir is None or os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(base_dir, path))


def parse_manifest(text: str, base_dir: Path | None = None) -> list[Entry]:
    """Parse manifest *text* into entries.

    Args:
        text: Manifest file contents.
        base_dir: Directory that relative paths are joined to; relative
            paths are kept as they are when omitted.

    Returns:
        Entries in file order.

    Raises:
        InvalidPathError: If a path cannot be expanded.  The message is
            prefixed with the manifest line number.
    """
    entries: list[Entry] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        try:
            paths = [_anchor(expand_path(p), base_dir) for p in parts]
        except InvalidPathError as exc:
            raise InvalidPathError(
                exc.path, f"line {lineno}: {exc.reason}"
            ) from None
        entries.append(Entry(canonical=paths[0], locations=tuple(paths[1:])))
        if len(paths) == 1:
            logger.warning(
                "Manifest line %d names no search locations: %s",
                lineno,
                paths[0],
            )
    return entries


def load_manifest(path: Path) -> list[Entry]:
    """Read and parse the manifest at *path*.

    Raises:
        ManifestNotFoundError: If *path* does not exist.
        ManifestError: If the manifest cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestNotFoundError(
            f"The configuration file is missing ({path})"
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Could not read manifest {path}: {exc}") from exc

    entries = parse_manifest(text, base_dir=path.parent)
    logger.debug("Loaded %d entries from %s", len(entries), path)
    return entries


# ---------------------------------------------------------------------------
# Bootstrapping
# ---------------------------------------------------------------------------

_STARTER_MANIFEST = """\
# einstellung manifest
#
# One entry per line: the canonical file first, then every location that
# holds a copy of it.  Paths may use ~, $VAR and ${VAR}; relative paths
# are relative to the directory of this file.
#
#   einstellung read    pull edits from the copies into the canonical file
#   einstellung write   push the canonical file out to every copy
#
# dotfiles/gitconfig  ~/.gitconfig
# dotfiles/vimrc      ~/.vimrc  ${XDG_CONFIG_HOME}/nvim/init.vim
"""


def ensure_manifest(path: Path) -> tuple[Path, bool]:
    """Create a commented starter manifest at *path* if none exists.

    Returns:
        ``(path, created)`` where *created* is ``False`` when the file was
        already there.
    """
    if path.exists():
        logger.debug("Manifest already exists: %s", path)
        return path, False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_STARTER_MANIFEST, encoding="utf-8")
    logger.info("Created starter manifest: %s", path)
    return path, True
