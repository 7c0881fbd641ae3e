"""
Configuration constants for the netirc client engine

Tunable policy values used by the connection, dispatch and statistics layers.
Each numeric constant can be overridden by an environment variable with the
same name; values that do not parse, or are not positive, fall back to the
default with a warning.
"""

import os


def _env_number(name: str, default: int | float) -> int | float:
    """Read a positive number of the same type as ``default`` from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    cast = type(default)
    try:
        parsed = cast(value)
    except ValueError:
        parsed = None
    if parsed is None or parsed <= 0:
        print(
            f"Warning: Invalid {cast.__name__} value for {name}='{value}', using default {default}"
        )
        return default
    return parsed


# Transport
DEFAULT_PORT = _env_number("DEFAULT_PORT", 6667)  # Standard plaintext IRC port
CONNECT_TIMEOUT = _env_number(
    "CONNECT_TIMEOUT", 5.0
)  # Seconds allowed for the TCP connection to be established
SEND_TIMEOUT = _env_number(
    "SEND_TIMEOUT", 5.0
)  # Seconds a line may wait for the socket to accept more bytes
BLOCKING_POLL_INTERVAL = _env_number(
    "BLOCKING_POLL_INTERVAL", 0.5
)  # Seconds waited per slice while a blocking read has no line yet
READ_CHUNK_SIZE = _env_number(
    "READ_CHUNK_SIZE", 1024
)  # Bytes requested from the socket per receive call

# Event statistics
BURST_WINDOW_SECONDS = _env_number(
    "BURST_WINDOW_SECONDS", 60.0
)  # Successive events closer than this keep growing the burst interval
FREQUENCY_TABLE_CAP = _env_number(
    "FREQUENCY_TABLE_CAP", 30
)  # Distinct keys kept per origin/host/target frequency table

# Protocol
LINE_TERMINATOR = "\r\n"
PING_EVENT = "PING"
PONG_COMMAND = "PONG"
WELCOME_EVENT = "MOTD"
CONNECT_EVENT = "CONNECT"
DISCONNECT_EVENT = "DISCONNECT"
