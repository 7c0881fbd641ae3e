"""Numeric reply to event name mapping."""

from __future__ import annotations

from types import MappingProxyType

NUMERIC_EVENTS = MappingProxyType(
    {
        "376": "MOTD",  # RPL_ENDOFMOTD
        "422": "MOTD",  # ERR_NOMOTD
        "366": "NAMES",  # RPL_ENDOFNAMES
        "318": "WHOIS",  # RPL_ENDOFWHOIS
        "433": "ERR_NICKNAMEINUSE",
    }
)


def resolve_event(command: str) -> str:
    """Return the event name for a command.

    Known numerics map to their name; unknown numerics and textual commands
    (PING, PRIVMSG, JOIN, ...) are returned unchanged.
    """
    if command.isdigit():
        return NUMERIC_EVENTS.get(command, command)
    return command


def event_codes(name: str) -> tuple[str, ...]:
    """Reverse lookup: every numeric that resolves to ``name``."""
    return tuple(code for code, event in NUMERIC_EVENTS.items() if event == name)
