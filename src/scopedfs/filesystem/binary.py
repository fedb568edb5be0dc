"""
Heuristic binary-content detection.

Looks at the leading bytes of a file only. Byte-order marks mark text,
a PDF signature or a NUL byte marks binary, and otherwise the share of
control bytes that are not part of a UTF-8 sequence decides.
"""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

MAX_BYTES = 512

# Ratio (percent) of suspicious bytes above which content counts as binary
SUSPICIOUS_THRESHOLD = 10

_TEXT_BOMS = (
    b"\xef\xbb\xbf",  # UTF-8
    b"\x00\x00\xfe\xff",  # UTF-32 BE
    b"\xff\xfe\x00\x00",  # UTF-32 LE
    b"\x84\x31\x95\x33",  # GB 18030
)

_UTF16_BOMS = (
    b"\xfe\xff",
    b"\xff\xfe",
)


def _is_continuation(byte: int) -> bool:
    return 0x80 <= byte < 0xC0


def _is_suspicious(byte: int) -> bool:
    # Printable ASCII and the usual whitespace controls (BEL..SO) are fine
    return (byte < 7 or byte > 14) and (byte < 32 or byte > 127)


def is_binary_bytes(data: bytes) -> bool:
    """
    Decide whether a leading chunk of content looks binary.

    Args:
        data: Leading bytes of a file (only the first 512 are inspected)

    Returns:
        True if the content appears to be binary
    """
    if not data:
        return False

    if data.startswith(_TEXT_BOMS):
        return False

    sample = data[:MAX_BYTES]
    total = len(sample)

    if sample.startswith(b"%PDF-"):
        return True

    if data.startswith(_UTF16_BOMS):
        return False

    suspicious = 0
    i = 0
    while i < total:
        byte = sample[i]
        if byte == 0:
            return True

        if _is_suspicious(byte):
            if 0xC1 < byte < 0xE0 and i + 1 < total:
                i += 1
                if _is_continuation(sample[i]):
                    i += 1
                    continue
            elif 0xDF < byte < 0xF0 and i + 2 < total:
                i += 1
                if _is_continuation(sample[i]) and _is_continuation(sample[i + 1]):
                    i += 2
                    continue

            suspicious += 1
            if i > 32 and suspicious * 100 / total > SUSPICIOUS_THRESHOLD:
                return True
        i += 1

    return suspicious * 100 / total > SUSPICIOUS_THRESHOLD


def is_binary_file(path: Union[str, Path]) -> bool:
    """
    Read the head of a file and run the binary heuristic on it.

    Args:
        path: Path of the file to inspect

    Returns:
        True if the file appears to be binary

    Raises:
        FileNotFoundError: If the file doesn't exist
        IsADirectoryError: If the path is a directory
        PermissionError: If the file can't be opened
    """
    with open(path, "rb") as f:
        head = f.read(MAX_BYTES)

    result = is_binary_bytes(head)
    logger.debug(f"Binary check for {path}: {result} ({len(head)} bytes inspected)")
    return result
