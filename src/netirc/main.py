#!/usr/bin/env python3
"""
Console entry point: connect to a server and forward typed lines as raw
commands until ``!quit``.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence

from .config import ConnectionOptions
from .constants import DEFAULT_PORT, DISCONNECT_EVENT
from .errors import ReadDisconnected
from .irc import IRCConnection
from .logging_config import LoggerConfigurator
from .logs import logger

QUIT_COMMAND = "!quit"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="netirc", description=__doc__)
    parser.add_argument("--server", required=True)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--nick", required=True)
    parser.add_argument("--realname", default=None, help="defaults to the nick")
    parser.add_argument("--identd", default=None, help="defaults to the nick")
    parser.add_argument("--host", default=None, help="defaults to the server")
    parser.add_argument(
        "--log-types",
        default="0,1,2,3",
        help="comma separated severities to show (0 fatal .. 5 verbose trace)",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> ConnectionOptions:
    log_types = [int(code) for code in args.log_types.split(",") if code.strip()]
    return ConnectionOptions(
        server=args.server,
        port=args.port,
        nick=args.nick,
        realname=args.realname or args.nick,
        identd=args.identd or args.nick,
        host=args.host or args.server,
        log_types=log_types,
    )


def print_event(*args: str | None) -> None:
    """Fallback handler: show whatever the server sent."""
    origin, _, target, params = (list(args) + [None] * 4)[:4]
    parts = [p for p in (origin, target, params) if p]
    print(" ".join(parts))


def drain_events(connection: IRCConnection) -> None:
    while connection.read_event() is not None:
        pass


def run_console(
    connection: IRCConnection, read_line: Callable[[str], str] = input
) -> None:
    """Forward operator lines until ``!quit`` or the server hangs up."""
    while connection.is_connected():
        try:
            drain_events(connection)
        except ReadDisconnected:
            break
        line = read_line("> ")
        if line.strip() == QUIT_COMMAND:
            logger.log_event("app", "quit", level=3)
            connection.disconnect()
            break
        connection.write(line)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    LoggerConfigurator().configure()
    options = options_from_args(args)
    logger.set_log_types(options.log_types or ())

    connection = IRCConnection(fallback=print_event)
    connection.register(DISCONNECT_EVENT, lambda: print("*** disconnected"))
    logger.log_event("app", "start", level=3)
    if not connection.connect(options):
        logger.log_event(
            "app", "connect_aborted", level=0, server=options.server, port=options.port
        )
        return 1
    try:
        run_console(connection)
    except (KeyboardInterrupt, EOFError):
        connection.disconnect()
    finally:
        logger.log_event("app", "shutdown", level=3)
    return 0


if __name__ == "__main__":
    sys.exit(main())
