"""Tests for the serial and console channels."""

from __future__ import annotations

import io
import os

import pytest
import serial

from sam9boot.errors import TransportError
from sam9boot.transport import ConsoleChannel, SerialChannel, Stream, Transport, TransportConfig

from monitor_sim import SimulatedMonitor


@pytest.fixture
def loop_channel():
    channel = SerialChannel.open("loop://", timeout=0.01)
    yield channel
    channel.close()


def test_poll_times_out_without_data(loop_channel) -> None:
    assert loop_channel.poll(0.01) is False


def test_poll_holds_byte_for_read(loop_channel) -> None:
    loop_channel.write(b"0x")
    assert loop_channel.poll(0.01) is True
    assert loop_channel.poll(0.01) is True
    assert loop_channel.read_byte() == ord("0")
    assert loop_channel.read_byte() == ord("x")
    assert loop_channel.poll(0.01) is False


def test_read_without_data_raises(loop_channel) -> None:
    with pytest.raises(TransportError):
        loop_channel.read_byte()


def test_transport_sends_line_suffix_and_reads_burst(loop_channel) -> None:
    transport = Transport(target=loop_channel, config=TransportConfig(poll_timeout=0.01))
    transport.send_line("w300000,4#")
    assert transport.read_burst(Stream.TARGET) == b"w300000,4#\n"
    assert transport.read_burst(Stream.TARGET) == b""


def test_open_failure_is_transport_error() -> None:
    with pytest.raises(TransportError, match="unable to open device"):
        SerialChannel.open("/dev/does-not-exist-sam9boot")


def test_serial_write_failure_is_transport_error() -> None:
    class BrokenPort:
        timeout = 0.0

        def write(self, data: bytes) -> int:
            raise serial.SerialException("device gone")

    channel = SerialChannel(BrokenPort())  # type: ignore[arg-type]
    with pytest.raises(TransportError, match="device gone"):
        channel.write(b"#")


def test_console_stream_requires_console() -> None:
    transport = Transport(target=SimulatedMonitor())
    with pytest.raises(TransportError, match="no console"):
        transport.poll(Stream.CONSOLE)


def test_console_channel_reads_and_writes_bytes() -> None:
    read_fd, write_fd = os.pipe()
    stdin = os.fdopen(read_fd, "rb", buffering=0)
    stdout = io.TextIOWrapper(io.BytesIO(), encoding="latin-1")
    try:
        console = ConsoleChannel(stdin=stdin, stdout=stdout)  # type: ignore[arg-type]
        assert console.poll(0.0) is False
        os.write(write_fd, b"a")
        assert console.poll(0.1) is True
        assert console.read_byte() == ord("a")
        console.write(b"\x1b[0m>")
        assert stdout.buffer.getvalue() == b"\x1b[0m>"
        os.close(write_fd)
        write_fd = -1
        with pytest.raises(TransportError, match="closed"):
            console.read_byte()
    finally:
        if write_fd >= 0:
            os.close(write_fd)
        stdin.close()
