"""File handler module: encoding-aware reads and atomic writes.

Missing files are not errors here: ``read_text_or_none`` returns ``None``
and the engine treats that as empty content.  Writes go to a temporary
file in the target directory which then replaces the target, so an
interrupted write never leaves a half-written file behind.
"""

import logging
import os
import tempfile
from pathlib import Path

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

# =============================================================================
# Read
# =============================================================================


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Reads raw bytes first, then uses charset-normalizer to detect encoding.
    Defaults to UTF-8 for empty files or when detection fails.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).

    Raises:
        FileNotFoundError: If *path* does not exist.
        OSError: If the file cannot be read.
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    result = from_bytes(raw).best()
    if result is None:
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        # ascii is a strict subset of utf-8
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def read_text_or_none(path: Path) -> tuple[str, str] | None:
    """Read *path*, returning ``None`` when it does not exist.

    Returns:
        ``(content, encoding)`` or ``None``.

    Raises:
        OSError: For failures other than a missing file (e.g. permissions,
            or *path* being a directory).
    """
    try:
        return read_file_with_encoding(path)
    except FileNotFoundError:
        logger.debug("Not found: %s", path)
        return None


# =============================================================================
# Write
# =============================================================================


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0o022)
    os.umask(mask)
    return mask


def write_file_atomic(
    path: Path, content: str, encoding: str = "utf-8"
) -> int:
    """Write content to *path* atomically, creating parent directories.

    The content goes to a temporary file next to *path* which then
    replaces it with ``os.replace()``.  A symlink is followed so the file
    it points to is updated and the link stays in place.  File permissions
    of an existing target are preserved; a new file gets the permissions
    the current umask allows.

    Args:
        path: Path to the output file.
        content: String content to write.
        encoding: Encoding to use (default: utf-8).

    Returns:
        Number of bytes written.

    Raises:
        OSError: If the directory cannot be created or the write fails.
            The target is left untouched in that case.
    """
    if path.is_symlink():
        path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content.encode(encoding)

    if path.exists():
        mode = path.stat().st_mode & 0o7777
    else:
        mode = 0o666 & ~_current_umask()

    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(encoded)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)
