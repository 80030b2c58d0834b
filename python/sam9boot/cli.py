"""sam9boot CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from typing import List, Optional

from . import __version__
from .errors import TransportError
from .output import Reporter
from .session import DEFAULT_PORT, DEFAULT_START, BootSession, SessionOptions
from .transport import ConsoleChannel, Transport, TransportConfig

LOG = logging.getLogger("sam9boot.cli")

_START = object()

EPILOG = """\
All parameters are additive.  Relative order only matters for -a and -g.  Numeric
values may be entered as decimal (no prefix) or as hex with either 0x or $ prefix.
Parameters -r and -s are mutually exclusive.  If -s is specified, the actual send
file size overrides -n.  Options taking a value accept both -x=value and -x value.
"""


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_number(text: str) -> int:
    """Parse ``$hex``, ``0xhex`` or decimal into an unsigned 32-bit value."""
    value = text.strip()
    try:
        if value.startswith("$"):
            number = int(value[1:], 16)
        elif value[:2] in ("0x", "0X"):
            number = int(value[2:], 16)
        else:
            number = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid numeric value: '{text}'") from None
    if not 0 <= number <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"numeric value out of range: '{text}'")
    return number


def _port(text: str) -> str:
    if text.startswith("/dev/") or "://" in text:
        return text
    raise argparse.ArgumentTypeError(f"invalid port: '{text}'")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sam9boot",
        description="Utility to simplify dealing with the SAM9 RomBOOT facility via a serial interface.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-p", dest="port", type=_port, default=DEFAULT_PORT, help="port to communicate with RomBOOT (default /dev/ttyUSB0)")
    parser.add_argument("-f", dest="filename", help="filename (needed by -r and -s)")
    parser.add_argument("-a", dest="start", type=parse_number, default=DEFAULT_START, help="address (default 0x300000, used by -r, -d and -s)")
    parser.add_argument("-n", dest="count", type=parse_number, help="number of bytes (defaults to filesize for -s)")
    parser.add_argument("-r", dest="receive", action="store_true", help="receive file (also specify -f, -a and -n)")
    parser.add_argument("-d", dest="dump", action="store_true", help="dump memory (also specify -a and -n or -s)")
    parser.add_argument("-s", dest="send", action="store_true", help="send file (also specify -f and -a)")
    parser.add_argument("-g", dest="go", nargs="?", const=_START, type=parse_number, help="address to jump to (default -a)")
    parser.add_argument("-c", dest="cpu", action="store_true", help="query cpu part id")
    parser.add_argument("-v", dest="verify", action="store_true", help="verify memory against file (also specify -f)")
    parser.add_argument("-q", dest="quiet", action="store_true", help="quiet (no non-essential i/o or messages)")
    parser.add_argument("-t", dest="trace", action="store_true", help="trace details of upload/verify activity")
    parser.add_argument("-i", dest="interactive", action="store_true", help="interactive (terminal) mode")
    parser.add_argument("--baud", type=int, default=115200, help="serial baud rate (default 115200)")
    parser.add_argument("--log-level", default=os.environ.get("SAM9BOOT_LOG", "WARNING"), help="Logging level (default WARNING)")
    return parser


def options_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> SessionOptions:
    if (args.receive or args.send) and not args.filename:
        parser.error("parameters '-r' and '-s' require '-f'")
    if args.receive and args.send:
        parser.error("parameters '-r' and '-s' may not both be specified")
    if args.count == 0:
        parser.error("invalid parameter: '-n' must be non-zero")
    if (args.receive or args.dump) and args.count is None and not args.send:
        parser.error("parameters '-r' and '-d' require '-n'")
    go = args.start if args.go is _START else args.go
    return SessionOptions(
        port=args.port,
        baudrate=args.baud,
        filename=args.filename,
        start=args.start,
        go=go,
        count=args.count,
        send=args.send,
        receive=args.receive,
        dump=args.dump,
        cpu=args.cpu,
        verify=args.verify,
        quiet=args.quiet,
        trace=args.trace,
        interactive=args.interactive,
    )


def _terminate(signum: int, _frame: object) -> None:
    # Unwinds through the terminal's raw-mode context so the console is restored.
    raise SystemExit(128 + signum)


def run(options: SessionOptions, *, reporter: Optional[Reporter] = None, transport: Optional[Transport] = None) -> bool:
    reporter = reporter or Reporter(trace=options.trace, quiet=options.quiet)
    if transport is None:
        config = TransportConfig(port=options.port, baudrate=options.baudrate)
        try:
            transport = Transport.open(config, console=ConsoleChannel())
        except TransportError as exc:
            LOG.debug("open failed: %s", exc)
            reporter.error(f"Unable to open device '{options.port}' for i/o")
            return False
    with transport:
        success = BootSession(options, transport, reporter).run()
    reporter.info()
    return success


def main(argv: List[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_arg_parser()
    print(f"\nSAM9 Boot Utility Version {__version__}")
    if not argv:
        print()
        parser.print_help()
        success = True
    else:
        args = parser.parse_args(argv)
        _configure_logging(args.log_level)
        options = options_from_args(parser, args)
        signal.signal(signal.SIGTERM, _terminate)
        print()
        try:
            success = run(options)
        except KeyboardInterrupt:
            print()
            success = False
    if success:
        print("Exit code 0 - success.\n")
        return 0
    print("*** Exit code 1 - failure!\n")
    return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
