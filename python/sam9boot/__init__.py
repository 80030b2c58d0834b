"""
sam9boot - host-side client for the SAM9 RomBOOT monitor.

The package speaks the monitor's ASCII command protocol over a serial link.
Each module keeps to one concern:

    transport.py  → serial link and console byte streams
    commands.py   → command text encoding
    scanner.py    → response capture and ``0x`` value extraction
    monitor.py    → command/response exchanges, handshake, cpu id, go
    memory.py     → chunked download/upload of target memory
    files.py      → host file images
    verify.py     → file vs. memory comparison
    hexdump.py    → hex + ASCII memory rendering
    terminal.py   → pass-through terminal loop
    session.py    → sequencing of one run's requested operations
    cli.py        → command-line front end
"""

from __future__ import annotations

__version__ = "1.01"

from .errors import (  # noqa: F401,E402
    ContentMismatch,
    EmptyFile,
    FileStoreError,
    ProtocolAnomaly,
    Sam9BootError,
    SizeMismatch,
    TargetUnresponsive,
    TransportError,
)
from .files import FileImage  # noqa: F401,E402
from .memory import MemoryImage, MemoryTransfer  # noqa: F401,E402
from .monitor import MonitorClient  # noqa: F401,E402
from .output import Reporter  # noqa: F401,E402
from .scanner import Response, scan_hex  # noqa: F401,E402
from .session import BootSession, SessionOptions  # noqa: F401,E402
from .terminal import TerminalEmulator, TerminalState  # noqa: F401,E402
from .transport import ConsoleChannel, SerialChannel, Stream, Transport, TransportConfig  # noqa: F401,E402

__all__ = [
    "Sam9BootError",
    "TransportError",
    "TargetUnresponsive",
    "ProtocolAnomaly",
    "SizeMismatch",
    "ContentMismatch",
    "FileStoreError",
    "EmptyFile",
    "FileImage",
    "MemoryImage",
    "MemoryTransfer",
    "MonitorClient",
    "Reporter",
    "Response",
    "scan_hex",
    "BootSession",
    "SessionOptions",
    "TerminalEmulator",
    "TerminalState",
    "ConsoleChannel",
    "SerialChannel",
    "Stream",
    "Transport",
    "TransportConfig",
]
