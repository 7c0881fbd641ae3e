"""Project logging package.

Contains the severity-filtered logging sink used by the engine and the event
template catalog. Avoid importing stdlib logging through this package name
externally.
"""

from .event_catalog import EventCatalog, EventTemplate, catalog  # noqa: F401
from .logger import (  # noqa: F401
    DEFAULT_LOG_TYPES,
    NOTICE,
    SEVERITY_LEVELS,
    TRACE,
    IRCLogger,
    logger,
)

__all__ = [
    "IRCLogger",
    "logger",
    "DEFAULT_LOG_TYPES",
    "SEVERITY_LEVELS",
    "NOTICE",
    "TRACE",
    "EventCatalog",
    "EventTemplate",
    "catalog",
]
