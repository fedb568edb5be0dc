"""
Directory-scoped filesystem access.

This module provides an accessor that confines file discovery and
content access to a root directory and an optional whitelist of
sub-path prefixes, returning ``/`` separated paths relative to the root.
"""

from scopedfs.filesystem.accessor import ScopedFileSystem
from scopedfs.filesystem.binary import is_binary_bytes, is_binary_file
from scopedfs.filesystem.config import FileSystemConfig
from scopedfs.filesystem.exceptions import (
    ConfigurationError,
    FileSystemError,
    InvalidPathError,
)
from scopedfs.filesystem.paths import PathNormalizer, should_include

__all__ = [
    "ScopedFileSystem",
    "FileSystemConfig",
    "PathNormalizer",
    "should_include",
    "is_binary_bytes",
    "is_binary_file",
    "ConfigurationError",
    "FileSystemError",
    "InvalidPathError",
]
