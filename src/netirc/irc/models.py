"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .parser import EventArgs


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    HANDSHAKING = auto()
    AWAITING_WELCOME = auto()
    READY = auto()
    CLOSED = auto()


@dataclass(slots=True)
class Event:
    name: str
    args: EventArgs
