"""Centralized internal error hierarchy.

These exceptions give semantic categories to transport failures. Only raise
these inside the connection boundary; never surface raw ``OSError`` /
``socket.timeout`` values to callers, wrap them instead.

Classes:
  InternalError        – Base for all internal errors.
  NetworkError         – Transport level issues.
  ConnectFailure       – The server could not be reached within the timeout.
  WriteFailure         – A write to an open transport failed.
  ReadDisconnected     – End-of-stream observed on read or write.

Malformed protocol lines are deliberately not represented here: the parser
returns a degenerate message instead of raising.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors."""


class ConnectFailure(NetworkError):
    """Raised when the transport could not be established.

    Never retried internally; the connection reports ``False`` to its caller.
    """


class WriteFailure(NetworkError):
    """Raised when sending a line on an open transport fails.

    The connection should be presumed unusable afterwards.
    """


class ReadDisconnected(NetworkError):
    """Raised when end-of-stream is detected on the read path."""


__all__ = [
    "InternalError",
    "NetworkError",
    "ConnectFailure",
    "WriteFailure",
    "ReadDisconnected",
]
