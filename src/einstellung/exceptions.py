"""
Exceptions for einstellung.
"""


class EinstellungError(Exception):
    """Base exception for einstellung operations."""


class ManifestError(EinstellungError, ValueError):
    """Raised when the manifest cannot be read or parsed."""


class ManifestNotFoundError(ManifestError):
    """Raised when the manifest file does not exist."""


class InvalidPathError(ManifestError):
    """Raised when a manifest path cannot be expanded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not expand {path} ({reason})")
        self.path = path
        self.reason = reason


class SyncAborted(EinstellungError):
    """Raised when the user abandons an interactive session."""
