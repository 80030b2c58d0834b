"""Tests for monitor command encoding."""

from __future__ import annotations

import pytest

from sam9boot import commands
from sam9boot.commands import Command


def test_identify_and_version() -> None:
    assert commands.identify() == "#"
    assert commands.version() == "V#"


def test_reads_pad_address_to_five_digits() -> None:
    assert commands.read_command(0x300, 4) == "w00300,4#"
    assert commands.read_command(0x300003, 1) == "o300003,1#"


def test_writes_pad_values() -> None:
    assert commands.write_command(0x300000, 4, 0x12) == "W300000,00000012#"
    assert commands.write_command(0x300004, 1, 0xAB) == "O300004,AB#"


def test_wide_address_is_not_truncated() -> None:
    assert commands.chip_id() == "wFFFFF240,4#"


def test_go_terminated_and_staged() -> None:
    assert commands.go(0x300000) == "G300000#"
    assert commands.go(0x300000, terminated=False) == "G300000"


def test_command_object_encodes() -> None:
    assert Command("W", 0x20, 4, 0xCAFEBABE).encode() == "W00020,CAFEBABE#"


@pytest.mark.parametrize("width", [0, 2, 3, 8])
def test_unsupported_width_rejected(width: int) -> None:
    with pytest.raises(ValueError):
        commands.read_command(0, width)
    with pytest.raises(ValueError):
        commands.write_command(0, width, 0)


def test_write_without_value_rejected() -> None:
    with pytest.raises(ValueError):
        commands.encode(Command("W", 0x10))
