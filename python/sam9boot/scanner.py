"""Response capture and ``0x<hex>`` extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .transport import Stream, Transport

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_BLANKS = frozenset(b" \t\r\n\v\f")


@dataclass(frozen=True)
class Response:
    """One burst captured from the target plus the value found in it, if any."""

    raw: bytes = b""
    value: Optional[int] = None

    @property
    def count(self) -> int:
        return len(self.raw)

    @property
    def responsive(self) -> bool:
        return self.count > 0

    @property
    def has_value(self) -> bool:
        return self.value is not None

    @classmethod
    def from_burst(cls, burst: bytes) -> "Response":
        return cls(raw=bytes(burst), value=scan_hex(burst))


def scan_hex(burst: bytes) -> Optional[int]:
    """Return the value of the first ``0x`` token in ``burst``.

    Returns ``None`` when there is no marker or the marker is not followed by
    hex digits.  Values wider than 32 bits keep their low 32 bits.
    """
    state = 0
    for index, char in enumerate(burst):
        if state == 0:
            if char == 0x30:  # '0'
                state = 1
        elif state == 1:
            if char == 0x78:  # 'x'
                return _parse_hex(burst, index + 1)
            state = 1 if char == 0x30 else 0
    return None


def _parse_hex(burst: bytes, start: int) -> Optional[int]:
    pos = start
    while pos < len(burst) and burst[pos] in _BLANKS:
        pos += 1
    end = pos
    while end < len(burst) and burst[end] in _HEX_DIGITS:
        end += 1
    if end == pos:
        return None
    return int(burst[pos:end], 16) & 0xFFFFFFFF


def capture_response(transport: Transport, limit: Optional[int] = None) -> Response:
    """Drain one burst from the target stream and scan it."""
    return Response.from_burst(transport.read_burst(Stream.TARGET, limit))


__all__ = ["Response", "scan_hex", "capture_response"]
