"""
Example: Repository compliance checks with ScopedFileSystem

This example shows how rule code can use the scoped accessor to look for
a license file, a contributing guide and binary files checked into the
documentation, without ever seeing paths outside the repository root.

Usage:
    python examples/repository_checks.py /path/to/checkout
"""

import asyncio
import sys

from scopedfs import ScopedFileSystem

LICENSE_GLOBS = ["LICENSE*", "COPYING*"]
CONTRIBUTING_GLOBS = "{docs/,.github/,}CONTRIBUTING*"


async def check_license(fs: ScopedFileSystem) -> bool:
    """Example 1: License file present and non-empty."""
    path = await fs.find_first_file(LICENSE_GLOBS, nocase=True)
    if path is None:
        print("✗ No license file found")
        return False

    header = await fs.get_file_lines(path, 1)
    print(f"✓ License file: {path} ({(header or '').strip() or 'empty first line'})")
    return True


async def check_contributing(fs: ScopedFileSystem) -> bool:
    """Example 2: Contributing guide present."""
    path = await fs.find_first_file(CONTRIBUTING_GLOBS, nocase=True)
    if path is None:
        print("✗ No contributing guide found")
        return False

    print(f"✓ Contributing guide: {path}")
    return True


async def check_docs_are_text(fs: ScopedFileSystem) -> bool:
    """Example 3: No binary files among markdown docs."""
    docs = await fs.find_all_files("**/*.md")
    flags = await asyncio.gather(*(fs.is_binary_file(p) for p in docs))
    binary_docs = [p for p, is_binary in zip(docs, flags) if is_binary]

    if binary_docs:
        print(f"✗ Binary markdown files: {', '.join(binary_docs)}")
        return False

    print(f"✓ {len(docs)} markdown files, all text")
    return True


async def main(target_dir: str) -> int:
    fs = ScopedFileSystem(target_dir)

    print("=" * 60)
    print(f"Checking {target_dir}")
    print("=" * 60)

    results = [
        await check_license(fs),
        await check_contributing(fs),
        await check_docs_are_text(fs),
    ]

    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else ".")))
