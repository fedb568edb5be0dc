"""
CLI module for scopedfs.

Provides a command-line interface over the scoped file accessor.
"""

from scopedfs.cli.main import cli

__all__ = ["cli"]
