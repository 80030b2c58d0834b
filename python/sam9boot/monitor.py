"""Command/response exchanges with the RomBOOT monitor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import commands
from .errors import TargetUnresponsive
from .output import Reporter
from .scanner import Response, capture_response
from .transport import Transport

logger = logging.getLogger("sam9boot.monitor")


@dataclass
class MonitorClient:
    """Sends one command at a time and captures the burst that answers it."""

    transport: Transport
    reporter: Reporter = field(default_factory=Reporter)

    def send(self, text: str) -> None:
        self.transport.send_line(text)

    def capture(self, *, echo: bool = True) -> Response:
        response = capture_response(self.transport)
        if echo:
            self.reporter.echo_bytes(response.raw)
        logger.debug("response count=%d value=%s", response.count, response.value)
        return response

    def exchange(self, text: str, *, echo: bool = True, show: bool = False) -> Response:
        """Send ``text`` and capture its response.

        ``show`` prints the command the way an operator would have typed it.
        """
        self.send(text)
        if show:
            self.reporter.echo(text)
        return self.capture(echo=echo)

    def handshake(self) -> None:
        """Sync with the monitor; also ask for its version unless quiet."""
        quiet = self.reporter.quiet
        self.exchange(commands.identify(), echo=not quiet, show=not quiet)
        if not quiet:
            self.exchange(commands.version(), show=True)

    def read_part_id(self) -> int:
        response = self.exchange(commands.chip_id(), show=True)
        if not response.responsive:
            raise TargetUnresponsive(
                "failed to get cpu type (target unresponsive)",
                address=commands.CHIP_ID_ADDRESS,
                expected=commands.WORD,
            )
        return response.value or 0

    def go(self, address: int) -> Response:
        return self.exchange(commands.go(address), show=True)


__all__ = ["MonitorClient"]
