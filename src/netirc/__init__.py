"""netirc: a small IRC protocol client engine."""

from .config import ConnectionOptions
from .errors import ConnectFailure, ReadDisconnected, WriteFailure
from .irc import ConnectionState, IRCConnection, parse_irc_message, resolve_event

__version__ = "0.1.0"

__all__ = [
    "ConnectFailure",
    "ConnectionOptions",
    "ConnectionState",
    "IRCConnection",
    "ReadDisconnected",
    "WriteFailure",
    "parse_irc_message",
    "resolve_event",
]
