"""Chunked memory download and upload.

Memory moves in 4 byte words while at least 4 bytes remain and in single
bytes for the 0-3 byte tail.  Words are packed little-endian in both
directions: the first byte of a chunk is the lowest-order byte of the
register value on the wire.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import commands
from .errors import ProtocolAnomaly, TargetUnresponsive
from .monitor import MonitorClient
from .output import Reporter

logger = logging.getLogger("sam9boot.memory")

PROGRESS_INTERVAL = 256


@dataclass(frozen=True)
class MemoryImage:
    address: int
    data: bytes = b""

    @property
    def length(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)


def chunk_width(remaining: int) -> int:
    return commands.WORD if remaining >= commands.WORD else commands.BYTE


def pack_le(chunk: bytes) -> int:
    return int.from_bytes(chunk, "little")


def unpack_le(value: int, width: int) -> bytes:
    return (value & ((1 << (8 * width)) - 1)).to_bytes(width, "little")


@dataclass
class MemoryTransfer:
    client: MonitorClient
    reporter: Reporter = field(default_factory=Reporter)

    def download(self, start: int, count: int) -> MemoryImage:
        """Read ``count`` bytes starting at ``start``."""
        buffer = bytearray()
        address = start
        while len(buffer) < count:
            width = chunk_width(count - len(buffer))
            text = commands.read_command(address, width)
            self.client.send(text)
            self.reporter.trace_command(text)
            response = self.client.capture(echo=self.reporter.trace)
            if not response.responsive:
                raise TargetUnresponsive(
                    f"Failed to download memory from ${start:x} "
                    f"({len(buffer)} bytes, {count} expected, target unresponsive)",
                    address=address,
                    received=len(buffer),
                    expected=count,
                )
            if len(buffer) % PROGRESS_INTERVAL == 0:
                self.reporter.progress(f"Downloading memory from ${start:x} ({len(buffer)} bytes)...")
            buffer += unpack_le(response.value or 0, width)
            address += width
        if len(buffer) != count:
            raise ProtocolAnomaly(
                f"Failed to download memory from ${start:x} ({len(buffer)} bytes, {count} expected)",
                received=len(buffer),
                expected=count,
            )
        logger.debug("downloaded %d bytes from 0x%x", count, start)
        return MemoryImage(address=start, data=bytes(buffer))

    def upload(self, start: int, data: bytes, *, label: str = "data") -> int:
        """Write ``data`` starting at ``start``; returns the number of bytes sent.

        The monitor confirms nothing beyond its echo, so any reply is only
        traced.
        """
        address = start
        sent = 0
        total = len(data)
        while sent < total:
            width = chunk_width(total - sent)
            value = pack_le(data[sent : sent + width])
            text = commands.write_command(address, width, value)
            self.client.send(text)
            self.reporter.trace_command(text)
            self.client.capture(echo=self.reporter.trace)
            sent += width
            address += width
            if sent % PROGRESS_INTERVAL == 0:
                self.reporter.progress(f"Uploading {label} ({sent} bytes) to memory at ${start:x}...")
        logger.debug("uploaded %d bytes to 0x%x", sent, start)
        return sent


__all__ = ["MemoryImage", "MemoryTransfer", "chunk_width", "pack_le", "unpack_le"]
