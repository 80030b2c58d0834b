"""Address-annotated hex + ASCII rendering of memory images."""

from __future__ import annotations

from typing import Iterator, List

from .memory import MemoryImage

ROW_BYTES = 16


def printable(value: int) -> str:
    return chr(value) if 0x1F < value < 0x7F else "."


def format_row(address: int, chunk: bytes) -> str:
    cells = [f"{value:02x}" for value in chunk]
    cells += ["  "] * (ROW_BYTES - len(cells))
    hex_text = " ".join(cells[:8]) + "  " + " ".join(cells[8:])
    gutter = "".join(printable(value) for value in chunk).ljust(ROW_BYTES)
    return f"${address:06x}  {hex_text}  {gutter}"


def iter_rows(image: MemoryImage) -> Iterator[str]:
    for offset in range(0, image.length, ROW_BYTES):
        yield format_row(image.address + offset, image.data[offset : offset + ROW_BYTES])


def dump_rows(image: MemoryImage) -> List[str]:
    return list(iter_rows(image))


__all__ = ["ROW_BYTES", "format_row", "iter_rows", "dump_rows", "printable"]
