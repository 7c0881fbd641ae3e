"""IRC subsystem package.

Contains the line codec, numeric event resolution, statistics, handler
dispatch and the connection state machine.
"""

from .connection import IRCConnection  # noqa: F401
from .dispatcher import EventDispatcher, Handler  # noqa: F401
from .events import NUMERIC_EVENTS, event_codes, resolve_event  # noqa: F401
from .models import ConnectionState, Event  # noqa: F401
from .parser import ParsedMessage, parse_irc_message, serialize_command  # noqa: F401
from .stats import ConnectionStats, EventStat, StatsTracker  # noqa: F401

__all__ = [
    "ConnectionState",
    "ConnectionStats",
    "Event",
    "EventDispatcher",
    "EventStat",
    "Handler",
    "IRCConnection",
    "NUMERIC_EVENTS",
    "ParsedMessage",
    "StatsTracker",
    "event_codes",
    "parse_irc_message",
    "resolve_event",
    "serialize_command",
]
