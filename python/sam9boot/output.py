"""Output helpers for sam9boot.

The :class:`Reporter` is handed to every component that talks to the user, so
that trace echo and the quiet handshake are explicit options rather than
globals.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional, TextIO


@dataclass
class Reporter:
    trace: bool = False
    quiet: bool = False
    out: Optional[TextIO] = None
    err: Optional[TextIO] = None

    @property
    def stdout(self) -> TextIO:
        return self.out or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self.err or sys.stderr

    def echo(self, text: str) -> None:
        """Write protocol text exactly as sent or received."""
        self.stdout.write(text)
        self.stdout.flush()

    def echo_bytes(self, raw: bytes) -> None:
        if raw:
            self.echo(raw.decode("latin-1"))

    def trace_command(self, text: str) -> None:
        if self.trace:
            self.echo(text)

    def trace_bytes(self, raw: bytes) -> None:
        if self.trace:
            self.echo_bytes(raw)

    def info(self, message: str = "") -> None:
        print(message, file=self.stdout, flush=True)

    def progress(self, message: str) -> None:
        """Overwrite the current line with ``message``."""
        print(message, end="\r", file=self.stdout, flush=True)

    def error(self, message: str) -> None:
        """Emit a single diagnostic line for a failed operation."""
        self.stdout.flush()
        print(f"*** {message}!", file=self.stderr, flush=True)


__all__ = ["Reporter"]
