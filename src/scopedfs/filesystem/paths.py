"""
Path normalization and prefix filtering for scoped filesystem access.

Paths handed back to callers are always *canonical relative* paths:
relative to the accessor root and separated by ``/`` whatever the host
convention is.
"""

import os
from dataclasses import dataclass
from typing import Iterable, Union

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class PathNormalizer:
    r"""
    Separator policy used to turn host paths into canonical paths.

    The policy is fixed when the normalizer is built instead of being read
    from the platform on every call, so a Windows-style policy can be
    exercised on any host:

        normalizer = PathNormalizer(separator="\\")
        normalizer.normalize("docs\\LICENSE.md")  # "docs/LICENSE.md"
    """

    separator: str = os.sep

    def __post_init__(self) -> None:
        if len(self.separator) != 1:
            raise ValueError(
                f"Path separator must be a single character, got {self.separator!r}"
            )

    @classmethod
    def for_host(cls) -> "PathNormalizer":
        """Return the policy of the running platform."""
        return cls(separator=os.sep)

    @property
    def is_posix(self) -> bool:
        return self.separator == "/"

    def normalize(self, path: PathLike) -> str:
        """Return ``path`` with the policy separator replaced by ``/``."""
        path = os.fspath(path)
        if self.is_posix:
            return path
        return "/".join(path.split(self.separator))


def should_include(
    file_path: PathLike,
    target_dir: PathLike,
    filter_paths: Iterable[str],
    normalizer: PathNormalizer,
) -> bool:
    """
    Check whether ``file_path`` is visible through a list of prefixes.

    Args:
        file_path: Path relative to ``target_dir``
        target_dir: Root directory the accessor is scoped to
        filter_paths: Allowed path prefixes (empty means no restriction)
        normalizer: Separator policy applied to both sides of the match

    Returns:
        True if no filter is set or the canonical path starts with one
        of the normalized prefixes
    """
    prefixes = [normalizer.normalize(p) for p in filter_paths]
    if not prefixes:
        return True

    root = os.path.abspath(target_dir)
    resolved = os.path.relpath(os.path.join(root, os.fspath(file_path)), root)
    canonical = normalizer.normalize(resolved)

    return any(canonical.startswith(prefix) for prefix in prefixes)
