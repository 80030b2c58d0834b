"""Error taxonomy for the sam9boot protocol engine."""

from __future__ import annotations

from typing import Optional


class Sam9BootError(RuntimeError):
    """Base class for every failure raised by the protocol engine."""


class TransportError(Sam9BootError):
    """Raised when the serial device or console cannot complete an operation."""


class TargetUnresponsive(Sam9BootError):
    """Raised when a required exchange captured no bytes within the poll window."""

    def __init__(
        self,
        message: str,
        *,
        address: Optional[int] = None,
        received: int = 0,
        expected: int = 0,
    ) -> None:
        super().__init__(message)
        self.address = address
        self.received = received
        self.expected = expected


class ProtocolAnomaly(Sam9BootError):
    """Raised when the target answered but the transferred length is wrong."""

    def __init__(self, message: str, *, received: int, expected: int) -> None:
        super().__init__(message)
        self.received = received
        self.expected = expected


class SizeMismatch(Sam9BootError):
    """Raised when verify is attempted on buffers of unequal or zero length."""

    def __init__(self, message: str, *, file_length: int, memory_length: int) -> None:
        super().__init__(message)
        self.file_length = file_length
        self.memory_length = memory_length


class ContentMismatch(Sam9BootError):
    """Raised when verify finds a differing byte."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"mismatch at offset {offset}")
        self.offset = offset


class FileStoreError(Sam9BootError):
    """Raised when a host file cannot be opened, read or written."""


class EmptyFile(FileStoreError):
    """Raised when a host file has zero length."""


__all__ = [
    "Sam9BootError",
    "TransportError",
    "TargetUnresponsive",
    "ProtocolAnomaly",
    "SizeMismatch",
    "ContentMismatch",
    "FileStoreError",
    "EmptyFile",
]
