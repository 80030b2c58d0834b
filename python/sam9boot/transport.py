"""
Byte-stream transport for sam9boot.

Responsibilities:
    * Own the serial link to the RomBOOT monitor (pyserial).
    * Own the console streams used by the pass-through terminal.
    * Offer bounded ``poll`` plus single byte reads so that no caller ever
      blocks longer than one poll timeout.
"""

from __future__ import annotations

import logging
import os
import select
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Iterator, Optional, TextIO

import serial
from prompt_toolkit.input.vt100 import raw_mode

from .errors import TransportError

logger = logging.getLogger("sam9boot.transport")


class Stream(Enum):
    TARGET = "target"
    CONSOLE = "console"


@dataclass
class TransportConfig:
    port: str = "/dev/ttyUSB0"
    baudrate: int = 115200
    # Long enough to batch a multi-character reply, short enough to spot a dead target.
    poll_timeout: float = 0.004
    burst_limit: int = 256
    line_suffix: bytes = b"\n"


class Channel:
    """One direction pair of a byte stream."""

    def poll(self, timeout: float) -> bool:
        raise NotImplementedError("Channel must implement poll()")

    def read_byte(self) -> int:
        raise NotImplementedError("Channel must implement read_byte()")

    def write(self, data: bytes) -> None:
        raise NotImplementedError("Channel must implement write()")

    def close(self) -> None:
        pass


class SerialChannel(Channel):
    """pyserial port with a one byte look-ahead used to implement ``poll``."""

    def __init__(self, port: serial.SerialBase) -> None:
        self._port = port
        self._pending: Optional[int] = None

    @classmethod
    def open(cls, url: str, baudrate: int = 115200, *, timeout: float = 0.004) -> "SerialChannel":
        try:
            port = serial.serial_for_url(url, baudrate=baudrate, timeout=timeout, write_timeout=1.0)
        except (serial.SerialException, ValueError) as exc:
            raise TransportError(f"unable to open device '{url}' for i/o: {exc}") from exc
        logger.debug("opened %s at %d baud", url, baudrate)
        return cls(port)

    @property
    def port(self) -> serial.SerialBase:
        return self._port

    def poll(self, timeout: float) -> bool:
        if self._pending is not None:
            return True
        if self._port.timeout != timeout:
            self._port.timeout = timeout
        try:
            data = self._port.read(1)
        except serial.SerialException as exc:
            raise TransportError(f"serial read failed: {exc}") from exc
        if not data:
            return False
        self._pending = data[0]
        return True

    def read_byte(self) -> int:
        if self._pending is None and not self.poll(0):
            raise TransportError("serial read failed: no data available")
        value = self._pending
        self._pending = None
        assert value is not None
        return value

    def write(self, data: bytes) -> None:
        try:
            self._port.write(data)
            self._port.flush()
        except serial.SerialException as exc:
            raise TransportError(f"serial write failed: {exc}") from exc

    def close(self) -> None:
        try:
            self._port.close()
        except serial.SerialException as exc:
            logger.debug("serial close failed: %s", exc)


class ConsoleChannel(Channel):
    """Process console: stdin polled with select, stdout written unbuffered."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def _fileno(self) -> int:
        try:
            return self._stdin.fileno()
        except (OSError, ValueError) as exc:
            raise TransportError(f"console input unavailable: {exc}") from exc

    def poll(self, timeout: float) -> bool:
        try:
            ready, _, _ = select.select([self._fileno()], [], [], timeout)
        except (OSError, ValueError) as exc:
            raise TransportError(f"console poll failed: {exc}") from exc
        return bool(ready)

    def read_byte(self) -> int:
        try:
            data = os.read(self._fileno(), 1)
        except OSError as exc:
            raise TransportError(f"console read failed: {exc}") from exc
        if not data:
            raise TransportError("console input closed")
        return data[0]

    def write(self, data: bytes) -> None:
        out: BinaryIO = getattr(self._stdout, "buffer", self._stdout)
        try:
            self._stdout.flush()
            out.write(data)
            out.flush()
        except (OSError, ValueError) as exc:
            raise TransportError(f"console write failed: {exc}") from exc

    @contextmanager
    def raw(self) -> Iterator[None]:
        """Put the console in raw mode; the previous mode is restored on any exit."""
        with raw_mode(self._fileno()):
            yield


@dataclass
class Transport:
    """The target link plus the optional console, addressed by :class:`Stream`."""

    target: Channel
    console: Optional[Channel] = None
    config: TransportConfig = field(default_factory=TransportConfig)

    @classmethod
    def open(cls, config: Optional[TransportConfig] = None, *, console: Optional[Channel] = None) -> "Transport":
        config = config or TransportConfig()
        target = SerialChannel.open(config.port, config.baudrate, timeout=config.poll_timeout)
        return cls(target=target, console=console, config=config)

    def channel(self, stream: Stream) -> Channel:
        if stream is Stream.TARGET:
            return self.target
        if self.console is None:
            raise TransportError("no console attached")
        return self.console

    def poll(self, stream: Stream, timeout: Optional[float] = None) -> bool:
        if timeout is None:
            timeout = self.config.poll_timeout
        return self.channel(stream).poll(timeout)

    def read_byte(self, stream: Stream) -> int:
        return self.channel(stream).read_byte()

    def write(self, stream: Stream, data: bytes) -> None:
        self.channel(stream).write(data)

    def send_line(self, text: str) -> None:
        """Send command text to the target followed by the line suffix."""
        logger.debug("tx %r", text)
        self.write(Stream.TARGET, text.encode("ascii") + self.config.line_suffix)

    def read_burst(self, stream: Stream, limit: Optional[int] = None) -> bytes:
        """Read bytes until a poll times out or ``limit`` bytes were taken."""
        if limit is None:
            limit = self.config.burst_limit
        burst = bytearray()
        while len(burst) < limit and self.poll(stream):
            burst.append(self.read_byte(stream))
        if stream is Stream.TARGET:
            logger.debug("rx %r", bytes(burst))
        return bytes(burst)

    def close(self) -> None:
        self.target.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "Stream",
    "TransportConfig",
    "Channel",
    "SerialChannel",
    "ConsoleChannel",
    "Transport",
]
