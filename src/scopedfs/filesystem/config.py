"""
Configuration for scoped filesystem access.
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from scopedfs.filesystem.exceptions import ConfigurationError
from scopedfs.filesystem.paths import PathNormalizer


class FileSystemConfig(BaseModel):
    """
    Configuration for a scoped filesystem accessor.

    Defines the root directory operations are confined to and the
    optional whitelist of sub-path prefixes that stay visible.

    Example:
        ```python
        config = FileSystemConfig(
            target_dir="/tmp/checkout",
            filter_paths=["docs", "src/app"],
        )

        # Load from file
        config = FileSystemConfig.from_file("~/.scopedfs/config.yaml")
        ```
    """

    model_config = {"extra": "forbid"}

    target_dir: Path = Field(
        default=Path("."),
        description="Root directory all relative paths are resolved against",
    )

    filter_paths: list[str] = Field(
        default_factory=list,
        description="Visible path prefixes relative to target_dir (empty = no restriction)",
    )

    chunk_size: int = Field(
        default=1024,
        ge=1,
        le=1_048_576,
        description="Number of bytes read per chunk by the line reader",
    )

    path_separator: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=1,
        description="Host path separator override (None = platform separator)",
    )

    @field_validator("target_dir", mode="before")
    @classmethod
    def expand_target_dir(cls, v):
        """Expand a leading ~ in the root directory."""
        if v is None or v == "":
            return Path(".")
        return Path(v).expanduser()

    @field_validator("filter_paths", mode="before")
    @classmethod
    def clean_filter_paths(cls, v):
        """Accept a comma separated string and drop empty entries."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [str(p).strip() for p in v if str(p).strip()]

    def get_normalizer(self) -> PathNormalizer:
        """Build the separator policy described by this configuration."""
        if self.path_separator:
            return PathNormalizer(separator=self.path_separator)
        return PathNormalizer.for_host()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FileSystemConfig":
        """
        Load configuration from a YAML or JSON file.

        File format (YAML):
            ```yaml
            target_dir: /tmp/checkout
            filter_paths:
              - docs
              - src/app
            chunk_size: 4096
            ```

        Args:
            path: Path to configuration file

        Returns:
            Loaded FileSystemConfig instance

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ConfigurationError: If the file can't be parsed
        """
        path = Path(path).expanduser().resolve()

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix == ".json":
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(str(path), f"Cannot parse configuration ({e})")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "Configuration must be a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "FileSystemConfig":
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            FileSystemConfig instance
        """
        return cls(**data)

    @classmethod
    def from_env(cls, prefix: str = "SCOPEDFS_") -> "FileSystemConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            SCOPEDFS_TARGET_DIR - Root directory
            SCOPEDFS_FILTER_PATHS - Comma separated visible prefixes
            SCOPEDFS_CHUNK_SIZE - Line reader chunk size in bytes
            SCOPEDFS_PATH_SEPARATOR - Host separator override

        Args:
            prefix: Environment variable prefix

        Returns:
            FileSystemConfig instance
        """
        data = {}

        target_dir = os.environ.get(f"{prefix}TARGET_DIR")
        if target_dir:
            data["target_dir"] = target_dir

        filter_paths = os.environ.get(f"{prefix}FILTER_PATHS")
        if filter_paths:
            data["filter_paths"] = filter_paths

        chunk_size = os.environ.get(f"{prefix}CHUNK_SIZE")
        if chunk_size:
            data["chunk_size"] = int(chunk_size)

        separator = os.environ.get(f"{prefix}PATH_SEPARATOR")
        if separator:
            data["path_separator"] = separator

        return cls(**data)

    def __repr__(self) -> str:
        return (
            f"FileSystemConfig("
            f"target_dir={str(self.target_dir)!r}, "
            f"filters={len(self.filter_paths)}, "
            f"chunk_size={self.chunk_size})"
        )
