"""
Scoped file accessor used by repository compliance rules.

All discovery and content operations are resolved against a single root
directory and, optionally, restricted to a whitelist of sub-path
prefixes. Blocking syscalls are pushed off the event loop with
``asyncio.to_thread``; the accessor keeps no mutable state, so one
instance can serve many concurrent tasks.
"""

import asyncio
import codecs
import logging
import os
from pathlib import Path
from typing import IO, Iterable, Optional, Union

from wcmatch import glob as wcglob

from scopedfs.filesystem import binary, paths
from scopedfs.filesystem.config import FileSystemConfig
from scopedfs.filesystem.exceptions import InvalidPathError
from scopedfs.filesystem.paths import PathLike, PathNormalizer

logger = logging.getLogger(__name__)

Globs = Union[str, Iterable[str]]

DEFAULT_CHUNK_SIZE = 1024

# Brace sets, globstars and "!" exclusions; dotfiles only match an explicit dot
GLOB_FLAGS = wcglob.GLOBSTAR | wcglob.BRACE | wcglob.NEGATE


class ScopedFileSystem:
    """
    Filesystem view confined to a root directory and optional sub-paths.

    Paths given to the accessor are relative to ``target_dir`` and paths
    returned by it are *canonical relative* paths (``/`` separated).
    Missing files are reported as ``None``/``False`` by the lookup and
    read methods; writes, deletes and unexpected read failures raise the
    underlying ``OSError``.

    Usage:
        fs = ScopedFileSystem("/tmp/checkout", filter_paths=["docs"])

        license_file = await fs.find_first_file(["LICENSE*", "COPYING*"], nocase=True)
        if license_file is not None:
            header = await fs.get_file_lines(license_file, 5)
    """

    def __init__(
        self,
        target_dir: PathLike = ".",
        filter_paths: Optional[Iterable[str]] = None,
        normalizer: Optional[PathNormalizer] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """
        Initialize the accessor.

        Args:
            target_dir: Root directory (default: current directory)
            filter_paths: Visible path prefixes (default: no restriction)
            normalizer: Separator policy (default: the host's)
            chunk_size: Bytes read per chunk by get_file_lines
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self._target_dir = os.fspath(target_dir)
        self._root = os.path.abspath(self._target_dir)
        self._filter_paths = tuple(filter_paths or ())
        self._normalizer = normalizer or PathNormalizer.for_host()
        self._chunk_size = chunk_size

    @classmethod
    def from_config(cls, config: FileSystemConfig) -> "ScopedFileSystem":
        """Create an accessor from a FileSystemConfig."""
        return cls(
            target_dir=config.target_dir,
            filter_paths=config.filter_paths,
            normalizer=config.get_normalizer(),
            chunk_size=config.chunk_size,
        )

    @property
    def target_dir(self) -> str:
        return self._target_dir

    @property
    def filter_paths(self) -> tuple[str, ...]:
        return self._filter_paths

    @property
    def normalizer(self) -> PathNormalizer:
        return self._normalizer

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def normalize_path(self, path: PathLike) -> str:
        """Convert a host path to its ``/`` separated form."""
        return self._normalizer.normalize(path)

    def should_include(self, file_path: PathLike) -> bool:
        """Check whether a path relative to the root passes the prefix filter."""
        return paths.should_include(
            file_path, self._root, self._filter_paths, self._normalizer
        )

    def _resolve(self, relative_file: PathLike) -> str:
        return os.path.abspath(os.path.join(self._root, os.fspath(relative_file)))

    # ------------------------------------------------------------------
    # Existence
    # ------------------------------------------------------------------

    @staticmethod
    async def file_exists(file: PathLike) -> bool:
        """
        Check whether an absolute path exists.

        Args:
            file: Absolute path to probe

        Returns:
            True if the path exists; any probe failure counts as missing
        """
        try:
            return await asyncio.to_thread(os.access, file, os.F_OK)
        except (OSError, ValueError) as e:
            logger.debug(f"Existence probe failed for {file}: {e}")
            return False

    async def relative_file_exists(self, relative_file: PathLike) -> bool:
        """Check whether a path relative to the root exists."""
        return await ScopedFileSystem.file_exists(self._resolve(relative_file))

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def find_first(self, globs: Globs, nocase: bool = False) -> Optional[str]:
        """
        Find the first file or directory matching a list of globs.

        Globs are searched from first to last.

        Returns:
            A canonical relative path, or None if nothing matched
        """
        matches = await self.find_all(globs, nocase)
        if matches:
            return matches[0]
        return None

    async def find_first_file(
        self, globs: Globs, nocase: bool = False
    ) -> Optional[str]:
        """
        Find the first file (never a directory or symlink) matching a list of globs.

        Returns:
            A canonical relative path, or None if nothing matched
        """
        matches = await self.find_all_files(globs, nocase)
        if matches:
            return matches[0]
        return None

    async def find_all(self, globs: Globs, nocase: bool = False) -> list[str]:
        """
        Find all files and directories matching a list of globs.

        Symbolic links are not removed from the result.

        Args:
            globs: A glob or list of globs, searched from first to last
            nocase: Ignore case differences between pattern and path

        Returns:
            Canonical relative paths
        """
        return await self.glob(globs, nocase=nocase)

    async def find_all_files(self, globs: Globs, nocase: bool = False) -> list[str]:
        """
        Find all files matching a list of globs.

        Directories and symbolic links (to files or directories) are
        removed from the result.

        Args:
            globs: A glob or list of globs, searched from first to last
            nocase: Ignore case differences between pattern and path

        Returns:
            Canonical relative paths
        """
        symlinks: dict[str, bool] = {}
        file_paths = await self.glob(globs, nocase=nocase, nodir=True, symlinks=symlinks)

        only_symlinks = {
            self.normalize_path(os.path.relpath(full_path, self._root))
            for full_path, is_link in symlinks.items()
            if is_link
        }

        result = [p for p in file_paths if self.normalize_path(p) not in only_symlinks]
        if len(result) != len(file_paths):
            logger.debug(f"Dropped {len(file_paths) - len(result)} symlinks from results")
        return result

    async def glob(
        self,
        globs: Globs,
        nocase: bool = False,
        nodir: bool = False,
        symlinks: Optional[dict[str, bool]] = None,
    ) -> list[str]:
        """
        Expand globs against the root and apply the prefix filter.

        Args:
            globs: A glob or list of globs, searched from first to last
            nocase: Ignore case differences between pattern and path
            nodir: Only match files
            symlinks: If given, filled with absolute path -> is symlink
                for every matched entry

        Returns:
            Canonical relative paths, de-duplicated, in pattern order

        Raises:
            InvalidPathError: If a pattern is absolute
        """
        patterns = [globs] if isinstance(globs, str) else list(globs)
        fixed = [self.normalize_path(g) for g in patterns]

        matches = await asyncio.to_thread(self._expand, fixed, nocase, nodir, symlinks)
        result = [p for p in matches if self.should_include(p)]

        logger.debug(
            f"Glob {fixed} matched {len(matches)} paths, {len(result)} visible"
        )
        return result

    def _expand(
        self,
        patterns: list[str],
        nocase: bool,
        nodir: bool,
        symlinks: Optional[dict[str, bool]],
    ) -> list[str]:
        """Expand patterns on the calling thread. Blocking."""
        for pattern in patterns:
            if os.path.isabs(pattern.lstrip("!")) or pattern.startswith("/"):
                raise InvalidPathError(pattern, "Glob patterns must be relative to the root")

        # "!" patterns exclude their matches from every other pattern
        negations = [p for p in patterns if p.startswith("!")]
        flags = GLOB_FLAGS | (wcglob.IGNORECASE if nocase else 0)
        found: dict[str, None] = {}

        for pattern in patterns:
            if not pattern or pattern.startswith("!"):
                continue

            matched = []
            for entry in wcglob.glob([pattern, *negations], flags=flags, root_dir=self._root):
                full_path = os.path.join(self._root, entry)
                relative = os.path.relpath(full_path, self._root)
                if relative == ".":
                    continue
                if nodir and not os.path.isfile(full_path):
                    continue
                if symlinks is not None:
                    symlinks[full_path] = os.path.islink(full_path)
                matched.append(self.normalize_path(relative))

            for path in sorted(matched):
                found.setdefault(path, None)

        return list(found)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def is_binary_file(self, relative_file: PathLike) -> bool:
        """
        Check whether a file looks binary.

        Returns:
            False for a missing file

        Raises:
            OSError: For any failure other than a missing file
        """
        file = self._resolve(relative_file)
        try:
            return await asyncio.to_thread(binary.is_binary_file, file)
        except FileNotFoundError:
            return False

    async def get_file_contents(self, relative_file: PathLike) -> Optional[str]:
        """
        Get the contents of a file as UTF-8 text.

        Args:
            relative_file: Path relative to the root

        Returns:
            The file contents, or None if the file can't be read
        """
        file = Path(self._resolve(relative_file))
        try:
            data = await asyncio.to_thread(file.read_bytes)
        except OSError as e:
            logger.debug(f"Failed to read file {file}: {e}")
            return None
        return data.decode("utf-8", errors="replace")

    async def set_file_contents(self, relative_file: PathLike, contents: str) -> None:
        """
        Create or overwrite a file with UTF-8 text.

        Raises:
            OSError: If the file can't be written (missing parent, permissions)
        """
        file = Path(self._resolve(relative_file))
        try:
            await asyncio.to_thread(
                file.write_text, contents, encoding="utf-8", newline=""
            )
        except Exception as e:
            logger.error(f"Failed to write file {file}: {e}")
            raise
        logger.debug(f"Wrote file: {file} ({len(contents)} characters)")

    async def remove_file(self, relative_file: PathLike) -> None:
        """
        Remove the file at a path relative to the root.

        Raises:
            OSError: If the file can't be removed
        """
        file = Path(self._resolve(relative_file))
        try:
            await asyncio.to_thread(file.unlink)
        except Exception as e:
            logger.error(f"Failed to remove file {file}: {e}")
            raise
        logger.debug(f"Removed file: {file}")

    async def get_file_lines(
        self, relative_file: PathLike, line_count: int
    ) -> Optional[str]:
        """
        Read the first lines of a file without reading all of it.

        Each returned line keeps its trailing newline. A trailing fragment
        without a newline is not a line and is not returned.

        Args:
            relative_file: Path relative to the root
            line_count: Number of lines to return (at least 1)

        Returns:
            Up to line_count lines joined into one string, or None if the
            file doesn't exist

        Raises:
            ValueError: If line_count is smaller than 1
            OSError: For any failure other than a missing file
        """
        if line_count < 1:
            raise ValueError(f"line_count must be at least 1, got {line_count}")

        file = self._resolve(relative_file)
        try:
            handle = await asyncio.to_thread(open, file, "rb")
        except FileNotFoundError:
            logger.debug(f"File not found: {file}")
            return None
        except OSError as e:
            logger.error(f"Failed to open file {file}: {e}")
            raise

        try:
            return await self._collect_lines(handle, line_count)
        finally:
            handle.close()

    async def _collect_lines(self, handle: IO[bytes], line_count: int) -> str:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        lines: list[str] = []
        left_over = ""

        while True:
            chunk = await asyncio.to_thread(handle.read, self._chunk_size)
            if not chunk:
                break

            left_over += decoder.decode(chunk)
            start = 0
            idx = left_over.find("\n", start)
            while idx != -1:
                lines.append(left_over[start : idx + 1])
                if len(lines) >= line_count:
                    return "".join(lines)
                start = idx + 1
                idx = left_over.find("\n", start)
            left_over = left_over[start:]

        return "".join(lines)

    def __repr__(self) -> str:
        return (
            f"ScopedFileSystem(target_dir={self._target_dir!r}, "
            f"filter_paths={list(self._filter_paths)!r})"
        )
