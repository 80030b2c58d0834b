"""Compare a host file image against downloaded memory."""

from __future__ import annotations

from typing import Optional

from .errors import ContentMismatch, SizeMismatch
from .files import FileImage
from .memory import MemoryImage


def first_mismatch(expected: bytes, actual: bytes) -> Optional[int]:
    """Lowest offset where the buffers differ, or ``None`` if they match."""
    for offset, (left, right) in enumerate(zip(expected, actual)):
        if left != right:
            return offset
    if len(expected) != len(actual):
        return min(len(expected), len(actual))
    return None


def verify(file_image: FileImage, memory_image: MemoryImage, expected: Optional[int] = None) -> None:
    """Raise unless both images hold the same non-empty content.

    Unequal lengths are a :class:`SizeMismatch`, never a content mismatch.
    """
    file_length = file_image.length
    memory_length = memory_image.length
    sizes_ok = file_length == memory_length and file_length > 0
    if expected is not None:
        sizes_ok = sizes_ok and file_length == expected
    if not sizes_ok:
        raise SizeMismatch(
            f"Verify memory at ${memory_image.address:x} size mismatch "
            f"(file {file_length} bytes, memory {memory_length} bytes)",
            file_length=file_length,
            memory_length=memory_length,
        )
    offset = first_mismatch(file_image.data, memory_image.data)
    if offset is not None:
        raise ContentMismatch(offset)


__all__ = ["first_mismatch", "verify"]
