"""ASCII command encoding for the RomBOOT monitor.

Every command is a single opcode character followed by comma separated
hexadecimal fields and the monitor's end-of-line marker ``#``.  Encoding is
pure string formatting; the transport appends its own line suffix when the
text goes out on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

EOL = "#"

OP_IDENTIFY = ""
OP_VERSION = "V"
OP_READ_WORD = "w"
OP_READ_BYTE = "o"
OP_WRITE_WORD = "W"
OP_WRITE_BYTE = "O"
OP_GO = "G"

WORD = 4
BYTE = 1

# Debug unit chip id register.
CHIP_ID_ADDRESS = 0xFFFFF240


@dataclass(frozen=True)
class Command:
    opcode: str
    address: Optional[int] = None
    width: Optional[int] = None
    value: Optional[int] = None
    terminated: bool = True

    def encode(self) -> str:
        return encode(self)


def encode(command: Command) -> str:
    """Render ``command`` as monitor text."""
    op = command.opcode
    if op in (OP_IDENTIFY, OP_VERSION):
        return op + EOL
    if command.address is None:
        raise ValueError(f"command {op!r} requires an address")
    address = command.address & 0xFFFFFFFF
    if op == OP_GO:
        text = f"G{address:X}"
        return text + EOL if command.terminated else text
    if op == OP_READ_WORD:
        return f"w{address:05X},{WORD}{EOL}"
    if op == OP_READ_BYTE:
        return f"o{address:05X},{BYTE}{EOL}"
    if command.value is None:
        raise ValueError(f"command {op!r} requires a value")
    if op == OP_WRITE_WORD:
        return f"W{address:05X},{command.value & 0xFFFFFFFF:08X}{EOL}"
    if op == OP_WRITE_BYTE:
        return f"O{address:05X},{command.value & 0xFF:02X}{EOL}"
    raise ValueError(f"unknown opcode {op!r}")


def identify() -> str:
    return encode(Command(OP_IDENTIFY))


def version() -> str:
    return encode(Command(OP_VERSION))


def read_command(address: int, width: int) -> str:
    """Read ``width`` bytes (4 or 1) at ``address``."""
    if width == WORD:
        return encode(Command(OP_READ_WORD, address, WORD))
    if width == BYTE:
        return encode(Command(OP_READ_BYTE, address, BYTE))
    raise ValueError(f"unsupported chunk width {width}")


def write_command(address: int, width: int, value: int) -> str:
    """Write ``value`` packed into ``width`` bytes (4 or 1) at ``address``."""
    if width == WORD:
        return encode(Command(OP_WRITE_WORD, address, WORD, value))
    if width == BYTE:
        return encode(Command(OP_WRITE_BYTE, address, BYTE, value))
    raise ValueError(f"unsupported chunk width {width}")


def go(address: int, *, terminated: bool = True) -> str:
    return encode(Command(OP_GO, address, terminated=terminated))


def chip_id() -> str:
    return read_command(CHIP_ID_ADDRESS, WORD)


__all__ = [
    "Command",
    "EOL",
    "WORD",
    "BYTE",
    "CHIP_ID_ADDRESS",
    "encode",
    "identify",
    "version",
    "read_command",
    "write_command",
    "go",
    "chip_id",
]
