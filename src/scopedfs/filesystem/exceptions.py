"""
Exceptions for scoped filesystem operations.

Only conditions specific to this package are modelled here. Native
``OSError`` subclasses (permission denied, missing parent directory, ...)
are propagated to callers unchanged.
"""


class FileSystemError(Exception):
    """Base exception for scoped filesystem operations."""

    pass


class InvalidPathError(FileSystemError, ValueError):
    """Raised when a path or glob pattern cannot be used inside the root."""

    def __init__(self, path: str, reason: str = "Invalid path"):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class ConfigurationError(FileSystemError):
    """Raised when a configuration source cannot be parsed."""

    def __init__(self, source: str, reason: str = "Invalid configuration"):
        self.source = source
        self.reason = reason
        super().__init__(f"{reason}: {source}")
