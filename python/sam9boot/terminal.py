"""Pass-through terminal between the console and the monitor.

A single cooperative loop: each cycle forwards at most one console byte to the
target, then drains whatever the target has sent back to the console.  Escape
or Ctrl-C typed on the console ends the session.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from enum import Enum
from typing import ContextManager, Optional

from . import commands
from .output import Reporter
from .scanner import capture_response
from .transport import Stream, Transport

logger = logging.getLogger("sam9boot.terminal")

CR = 0x0D
ESC = 0x1B
CTRL_C = 0x03
EXIT_KEYS = frozenset((ESC, CTRL_C))
# The monitor ends commands with '#', not carriage return.
MONITOR_EOL = ord(commands.EOL)


class TerminalState(Enum):
    RUNNING = "running"
    EXITING = "exiting"


def is_printable(value: int) -> bool:
    return 0x1F < value < 0x7F


class TerminalEmulator:
    def __init__(
        self,
        transport: Transport,
        *,
        reporter: Optional[Reporter] = None,
        go_address: Optional[int] = None,
    ) -> None:
        self.transport = transport
        self.reporter = reporter or Reporter()
        self.go_address = go_address
        self.state = TerminalState.RUNNING
        self.last_key: Optional[int] = None

    def banner(self) -> str:
        go_hint = ", <enter> or # to GO" if self.go_address is not None else ""
        return f"[[ interactive terminal mode - <esc> or <ctrl-c> to exit{go_hint} ]]"

    def run(self) -> TerminalState:
        self.reporter.info()
        self.reporter.info(self.banner())
        try:
            with self._raw_console():
                self.stage_go()
                while self.state is TerminalState.RUNNING:
                    self.step()
        finally:
            self.reporter.info()
            self.reporter.info("[[ exit terminal mode ]]")
        return self.state

    def _raw_console(self) -> ContextManager[None]:
        raw = getattr(self.transport.console, "raw", None)
        if callable(raw):
            return raw()
        return nullcontext()

    def stage_go(self) -> None:
        """Sync with the monitor and type ``G<addr>`` without its terminator.

        The operator releases it with Enter or ``#``.
        """
        if self.go_address is None:
            return
        self.transport.send_line(commands.identify())
        capture_response(self.transport)
        staged = commands.go(self.go_address, terminated=False)
        self.transport.write(Stream.TARGET, staged.encode("ascii"))
        capture_response(self.transport)
        self.transport.write(Stream.CONSOLE, staged.encode("ascii"))
        logger.debug("staged %s", staged)

    def step(self) -> TerminalState:
        """Run one console-then-target cycle."""
        key: Optional[int] = None
        if self.transport.poll(Stream.CONSOLE):
            key = self.transport.read_byte(Stream.CONSOLE)
            outgoing = MONITOR_EOL if key == CR else key
            self.transport.write(Stream.TARGET, bytes((outgoing,)))
            if is_printable(key):
                self.transport.write(Stream.CONSOLE, bytes((key,)))
            self.last_key = key
        while self.transport.poll(Stream.TARGET):
            self.transport.write(Stream.CONSOLE, bytes((self.transport.read_byte(Stream.TARGET),)))
        if key is not None and key in EXIT_KEYS:
            self.state = TerminalState.EXITING
        return self.state


__all__ = ["TerminalEmulator", "TerminalState", "is_printable", "EXIT_KEYS", "MONITOR_EOL"]
