"""Tests for scoped filesystem configuration."""

import json
import os
import tempfile
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from scopedfs.filesystem import (
    ConfigurationError,
    FileSystemConfig,
    PathNormalizer,
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestFileSystemConfig:
    """Tests for FileSystemConfig model."""

    def test_default_config(self):
        """Test default configuration."""
        config = FileSystemConfig()
        assert config.target_dir == Path(".")
        assert config.filter_paths == []
        assert config.chunk_size == 1024
        assert config.path_separator is None

    def test_filter_paths_from_string(self):
        """Test that a comma separated string is split into prefixes."""
        config = FileSystemConfig(filter_paths=" docs, src/app ,,")
        assert config.filter_paths == ["docs", "src/app"]

    def test_filter_paths_drop_empty_entries(self):
        """Test that blank prefixes are dropped."""
        config = FileSystemConfig(filter_paths=["docs", "", "  "])
        assert config.filter_paths == ["docs"]

    def test_target_dir_expands_user(self):
        """Test that ~ is expanded in the root directory."""
        config = FileSystemConfig(target_dir="~/checkout")
        assert config.target_dir == Path("~/checkout").expanduser()

    def test_chunk_size_bounds(self):
        """Test that the chunk size is validated."""
        with pytest.raises(ValidationError):
            FileSystemConfig(chunk_size=0)
        with pytest.raises(ValidationError):
            FileSystemConfig(chunk_size=2_000_000)

    def test_path_separator_length(self):
        """Test that the separator override is a single character."""
        with pytest.raises(ValidationError):
            FileSystemConfig(path_separator="::")

    def test_extra_fields_forbidden(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ValidationError):
            FileSystemConfig(target="oops")

    def test_get_normalizer(self):
        """Test building the separator policy."""
        assert FileSystemConfig().get_normalizer() == PathNormalizer.for_host()
        custom = FileSystemConfig(path_separator="\\").get_normalizer()
        assert custom.separator == "\\"

    def test_repr(self):
        """Test the short representation."""
        config = FileSystemConfig(target_dir="/tmp/repo", filter_paths=["docs"])
        assert "filters=1" in repr(config)
        assert "chunk_size=1024" in repr(config)


class TestFileSystemConfigFile:
    """Tests for file-based configuration."""

    def test_from_yaml_file(self, temp_dir):
        """Test loading from a YAML file."""
        path = temp_dir / "config.yaml"
        path.write_text(
            yaml.dump(
                {
                    "target_dir": str(temp_dir),
                    "filter_paths": ["docs", "src"],
                    "chunk_size": 4096,
                }
            )
        )

        config = FileSystemConfig.from_file(path)
        assert config.target_dir == temp_dir
        assert config.filter_paths == ["docs", "src"]
        assert config.chunk_size == 4096

    def test_from_json_file(self, temp_dir):
        """Test loading from a JSON file."""
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"filter_paths": ["docs"]}))

        config = FileSystemConfig.from_file(str(path))
        assert config.filter_paths == ["docs"]

    def test_utf8_file(self, temp_dir):
        """Test that config files are read as UTF-8."""
        path = temp_dir / "config.yaml"
        path.write_bytes("filter_paths:\n  - dokumentation/übersicht\n  - 文档\n".encode("utf-8"))

        config = FileSystemConfig.from_file(path)
        assert config.filter_paths == ["dokumentation/übersicht", "文档"]

    def test_empty_file(self, temp_dir):
        """Test that an empty YAML file gives the defaults."""
        path = temp_dir / "config.yaml"
        path.write_text("")

        config = FileSystemConfig.from_file(path)
        assert config.filter_paths == []

    def test_missing_file(self, temp_dir):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            FileSystemConfig.from_file(temp_dir / "missing.yaml")

    def test_unparsable_file(self, temp_dir):
        """Test that malformed content raises ConfigurationError."""
        path = temp_dir / "config.yaml"
        path.write_text("filter_paths: [docs\n")

        with pytest.raises(ConfigurationError):
            FileSystemConfig.from_file(path)

    def test_non_mapping_file(self, temp_dir):
        """Test that a top-level list is rejected."""
        path = temp_dir / "config.yaml"
        path.write_text("- docs\n- src\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            FileSystemConfig.from_file(path)


class TestFileSystemConfigEnv:
    """Tests for environment-based configuration."""

    def test_from_env(self):
        """Test loading config from environment variables."""
        os.environ["SCOPEDFS_TARGET_DIR"] = "/srv/checkout"
        os.environ["SCOPEDFS_FILTER_PATHS"] = "docs,src"
        os.environ["SCOPEDFS_CHUNK_SIZE"] = "2048"
        os.environ["SCOPEDFS_PATH_SEPARATOR"] = "\\"

        try:
            config = FileSystemConfig.from_env()
            assert config.target_dir == Path("/srv/checkout")
            assert config.filter_paths == ["docs", "src"]
            assert config.chunk_size == 2048
            assert config.path_separator == "\\"
        finally:
            for key in list(os.environ.keys()):
                if key.startswith("SCOPEDFS_"):
                    del os.environ[key]

    def test_from_env_empty(self):
        """Test that no variables give the defaults."""
        for key in list(os.environ.keys()):
            if key.startswith("SCOPEDFS_"):
                del os.environ[key]

        config = FileSystemConfig.from_env()
        assert config == FileSystemConfig()

    def test_from_env_custom_prefix(self):
        """Test loading with custom prefix."""
        os.environ["MY_FS_FILTER_PATHS"] = "docs"

        try:
            config = FileSystemConfig.from_env(prefix="MY_FS_")
            assert config.filter_paths == ["docs"]
        finally:
            del os.environ["MY_FS_FILTER_PATHS"]
