"""Run the operations requested for one sam9boot invocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from . import files, hexdump, verify as verify_engine
from .errors import ContentMismatch, Sam9BootError, SizeMismatch
from .files import FileImage
from .memory import MemoryImage, MemoryTransfer
from .monitor import MonitorClient
from .output import Reporter
from .terminal import TerminalEmulator
from .transport import Transport

logger = logging.getLogger("sam9boot.session")

DEFAULT_PORT = "/dev/ttyUSB0"
DEFAULT_START = 0x300000


@dataclass(frozen=True)
class SessionOptions:
    port: str = DEFAULT_PORT
    baudrate: int = 115200
    filename: Optional[str] = None
    start: int = DEFAULT_START
    go: Optional[int] = None
    count: Optional[int] = None
    send: bool = False
    receive: bool = False
    dump: bool = False
    cpu: bool = False
    verify: bool = False
    quiet: bool = False
    trace: bool = False
    interactive: bool = False


@dataclass
class BootSession:
    """Sequences handshake, transfers, verify, dump and terminal.

    A failing operation reports one diagnostic and marks the run failed;
    later operations still run whenever their own inputs are available.
    """

    options: SessionOptions
    transport: Transport
    reporter: Reporter = field(default_factory=Reporter)
    success: bool = field(init=False, default=True)
    file_image: Optional[FileImage] = field(init=False, default=None)
    memory_image: Optional[MemoryImage] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.client = MonitorClient(self.transport, self.reporter)
        self.memory = MemoryTransfer(self.client, self.reporter)

    def _fail(self, message: str) -> None:
        logger.debug("operation failed: %s", message)
        self.reporter.error(message)
        self.success = False

    def run(self) -> bool:
        opts = self.options
        self.handshake()
        if opts.cpu:
            self.query_cpu()
        self.settle()
        if opts.send or opts.verify:
            self.load_file()
        if opts.send and self.file_image is not None:
            self.send_file()
        if opts.verify or opts.receive or opts.dump:
            self.download()
        if opts.verify and self.file_image is not None and self.memory_image is not None:
            self.verify_memory()
        if opts.receive and self.memory_image is not None:
            self.write_file()
        if opts.dump and self.memory_image is not None:
            self.dump_memory()
        if opts.interactive:
            self.terminal()
        elif opts.go is not None and self.success:
            self.go()
        return self.success

    @property
    def transfer_count(self) -> Optional[int]:
        """Bytes to move: the file length when sending, else ``-n``."""
        if self.file_image is not None and (self.options.send or self.options.count is None):
            return self.file_image.length
        return self.options.count

    def handshake(self) -> None:
        try:
            self.client.handshake()
        except Sam9BootError as exc:
            self._fail(f"Handshake failed ({exc})")

    def settle(self) -> None:
        """Collect any trailing monitor output before the transfer phase."""
        try:
            self.client.capture()
        except Sam9BootError as exc:
            self._fail(f"Failed to read from target ({exc})")
        self.reporter.info()

    def query_cpu(self) -> None:
        try:
            part_id = self.client.read_part_id()
        except Sam9BootError as exc:
            self.reporter.info()
            self._fail(f"Failed to get cpu type ({exc})")
            return
        self.reporter.info(f"PartId = ${part_id:08X}")

    def load_file(self) -> None:
        opts = self.options
        if not opts.filename:
            self._fail("Parameters '-s' and '-v' require '-f'")
            return
        count = None if opts.send else opts.count
        try:
            self.file_image = files.load(opts.filename, count)
        except Sam9BootError as exc:
            self._fail(str(exc))
            return
        self.reporter.info(f"Loaded file '{opts.filename}' ({self.file_image.length} bytes) from disk.")

    def send_file(self) -> None:
        assert self.file_image is not None
        start = self.options.start
        name = self.file_image.path
        try:
            sent = self.memory.upload(start, self.file_image.data, label=f"file '{name}'")
        except Sam9BootError as exc:
            self._fail(f"Failed to upload file '{name}' to memory at ${start:x} ({exc})")
            return
        self.reporter.info(f"Uploaded file '{name}' ({sent} bytes) to memory at ${start:x}.    ")

    def download(self) -> None:
        count = self.transfer_count
        start = self.options.start
        if not count:
            self._fail("Parameters '-r', '-d' and '-v' require '-n'")
            return
        try:
            self.memory_image = self.memory.download(start, count)
        except Sam9BootError as exc:
            self.reporter.info()
            self._fail(str(exc))
            return
        self.reporter.info(f"Downloaded memory from ${start:x} ({count} bytes).")

    def verify_memory(self) -> None:
        assert self.file_image is not None and self.memory_image is not None
        start = self.options.start
        count = self.transfer_count
        try:
            verify_engine.verify(self.file_image, self.memory_image, count)
        except ContentMismatch as exc:
            self._fail(f"Verify memory at ${start:x} ({count} bytes) error at offset {exc.offset}")
            return
        except SizeMismatch as exc:
            self._fail(str(exc))
            return
        self.reporter.info(f"Verified memory at ${start:x} ({count} bytes).")

    def write_file(self) -> None:
        assert self.memory_image is not None
        name = self.options.filename
        if not name:
            self._fail("Parameter '-r' requires '-f'")
            return
        try:
            written = files.save(name, self.memory_image.data)
        except Sam9BootError as exc:
            self._fail(str(exc))
            return
        self.reporter.info(f"Wrote {written} bytes to file '{name}'.")

    def dump_memory(self) -> None:
        assert self.memory_image is not None
        self.reporter.info()
        for row in hexdump.iter_rows(self.memory_image):
            self.reporter.info(row)

    def terminal(self) -> None:
        emulator = TerminalEmulator(self.transport, reporter=self.reporter, go_address=self.options.go)
        try:
            emulator.run()
        except Sam9BootError as exc:
            self._fail(f"Terminal mode failed ({exc})")

    def go(self) -> None:
        assert self.options.go is not None
        try:
            self.client.go(self.options.go)
        except Sam9BootError as exc:
            self._fail(f"Failed to go to ${self.options.go:x} ({exc})")
            return
        self.reporter.info()


__all__ = ["SessionOptions", "BootSession", "DEFAULT_PORT", "DEFAULT_START"]
