"""Error taxonomy for manifest generation."""
from typing import Optional


class ManifestError(Exception):
    """Base class for every failure that aborts manifest generation."""


class ConfigurationError(ManifestError, ValueError):
    """The configuration uses a retired or structurally invalid option."""

    def __init__(self, message: str, group_name: Optional[str] = None):
        super().__init__(message)
        self.group_name = group_name


class HashRetrievalError(ManifestError):
    """The hashing collaborator failed for a matched file."""

    def __init__(self, path: str, reason: str = ""):
        message = f"Failed to hash '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.path = path
