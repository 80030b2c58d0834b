"""Simulated RomBOOT monitor and console channels for sam9boot tests."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from sam9boot.errors import TransportError
from sam9boot.transport import Channel, Transport, TransportConfig

PROMPT = "\n\r>"


class SimulatedMonitor(Channel):
    """Answers monitor commands from an in-memory address space."""

    def __init__(
        self,
        memory: Optional[Dict[int, int]] = None,
        *,
        responsive: bool = True,
        version: str = "v1.4 Nov 10 2004 11:26:22",
    ) -> None:
        self.memory: Dict[int, int] = dict(memory or {})
        self.responsive = responsive
        self.version = version
        self.commands: List[str] = []
        self.received = bytearray()
        self.outbox = bytearray()
        self.poll_count = 0
        self.jumped_to: Optional[int] = None
        self.closed = False
        self._line = bytearray()

    def load(self, address: int, data: bytes) -> None:
        for offset, value in enumerate(data):
            self.memory[address + offset] = value

    def read(self, address: int, count: int) -> bytes:
        return bytes(self.memory.get(address + offset, 0) for offset in range(count))

    def push(self, data: bytes) -> None:
        self.outbox += data

    # Channel -----------------------------------------------------------
    def poll(self, timeout: float) -> bool:
        self.poll_count += 1
        return bool(self.outbox)

    def read_byte(self) -> int:
        if not self.outbox:
            raise TransportError("no data")
        return self.outbox.pop(0)

    def write(self, data: bytes) -> None:
        self.received += data
        for value in data:
            if value == ord("#"):
                text = self._line.decode("ascii")
                self._line.clear()
                self._handle(text)
            elif value in (0x0A, 0x0D):
                continue
            else:
                self._line.append(value)

    def close(self) -> None:
        self.closed = True

    # Monitor -----------------------------------------------------------
    def _handle(self, text: str) -> None:
        self.commands.append(text + "#")
        if not self.responsive:
            return
        self.outbox += self._reply(text).encode("ascii")

    def _reply(self, text: str) -> str:
        if not text:
            return PROMPT
        op, body = text[0], text[1:]
        if op == "V":
            return f"\n\r{self.version}{PROMPT}"
        if op in ("w", "o"):
            addr_text, width_text = body.split(",")
            address = int(addr_text, 16)
            width = int(width_text)
            value = int.from_bytes(self.read(address, width), "little")
            return f"\n\r0x{value:0{width * 2}X}{PROMPT}"
        if op in ("W", "O"):
            addr_text, value_text = body.split(",")
            width = 4 if op == "W" else 1
            self.load(int(addr_text, 16), int(value_text, 16).to_bytes(width, "little"))
            return PROMPT
        if op == "G":
            self.jumped_to = int(body, 16)
            return ""
        return PROMPT


class FakeConsole(Channel):
    def __init__(self, keys: Iterable[int] = ()) -> None:
        self.inbox = bytearray(keys)
        self.output = bytearray()
        self.raw_entered = 0
        self.raw_exited = 0

    def type(self, data: bytes) -> None:
        self.inbox += data

    def poll(self, timeout: float) -> bool:
        return bool(self.inbox)

    def read_byte(self) -> int:
        if not self.inbox:
            raise TransportError("console input closed")
        return self.inbox.pop(0)

    def write(self, data: bytes) -> None:
        self.output += data

    @contextmanager
    def raw(self) -> Iterator[None]:
        self.raw_entered += 1
        try:
            yield
        finally:
            self.raw_exited += 1


def make_transport(monitor: Channel, console: Optional[Channel] = None) -> Transport:
    return Transport(target=monitor, console=console, config=TransportConfig(poll_timeout=0.0))
