"""
scopedfs - directory-scoped file access for repository checks.

This package lets compliance rules discover files by glob, read and
write their contents, detect binary files and read the first lines of a
file, while keeping every path inside a target directory.
"""

__version__ = "0.1.0"

from scopedfs.filesystem import (
    ConfigurationError,
    FileSystemConfig,
    FileSystemError,
    InvalidPathError,
    PathNormalizer,
    ScopedFileSystem,
)

__all__ = [
    # Version
    "__version__",
    # Accessor
    "ScopedFileSystem",
    "PathNormalizer",
    # Config
    "FileSystemConfig",
    # Errors
    "FileSystemError",
    "InvalidPathError",
    "ConfigurationError",
]
