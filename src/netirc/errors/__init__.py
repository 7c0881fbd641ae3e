"""Error hierarchy for the netirc engine."""

from .internal import (  # noqa: F401
    ConnectFailure,
    InternalError,
    NetworkError,
    ReadDisconnected,
    WriteFailure,
)

__all__ = [
    "InternalError",
    "NetworkError",
    "ConnectFailure",
    "WriteFailure",
    "ReadDisconnected",
]
