"""Severity-filtered logging sink.

The engine reports through six severities (0 fatal, 1 warning, 2 notice,
3 informative, 4 protocol trace, 5 verbose trace). Each enabled severity is
forwarded to a stdlib logger at a matching level; output formatting is left to
whatever handlers the application installs (see ``logging_config``).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from ..config.model import normalize_log_types
from .event_catalog import catalog

NOTICE = 25
TRACE = 5
logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(TRACE, "TRACE")

SEVERITY_LEVELS: dict[int, int] = {
    0: logging.CRITICAL,
    1: logging.WARNING,
    2: NOTICE,
    3: logging.INFO,
    4: logging.DEBUG,
    5: TRACE,
}

DEFAULT_LOG_TYPES = frozenset({0, 1, 2, 3, 4})


class IRCLogger:
    def __init__(
        self,
        name: str = "netirc",
        log_types: int | Iterable[int] = DEFAULT_LOG_TYPES,
    ) -> None:
        self.logger = logging.getLogger(name)
        self.log_types = normalize_log_types(log_types)

    def set_log_types(self, codes: int | Iterable[int]) -> None:
        """Select which severities are forwarded. Accepts one code or many."""
        self.log_types = normalize_log_types(codes)

    def enabled(self, level: int) -> bool:
        return level in self.log_types

    def log(self, level: int, message: str) -> None:
        if not self.enabled(level):
            return
        self.logger.log(SEVERITY_LEVELS[level], message.strip())

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = 3,
        human: str | None = None,
        **kwargs: object,
    ) -> None:
        """Log a catalogued event.

        The message comes from ``human`` when given, else from the template
        registered for ``(domain, action)`` formatted with ``kwargs``, else a
        "domain: action" fallback. With DEBUG set the event name and context
        are appended.
        """
        if not self.enabled(level):
            return
        human_text = human
        if human_text is None:
            human_text = catalog.render(domain, action, kwargs)
            if human_text is None:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        if self._is_debug_enabled():
            event_name = f"{domain}_{action}".lower()
            context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            human_text = f"{event_name.ljust(24)} {human_text}"
            if context:
                human_text = f"{human_text} ({context})"
        self.log(level, human_text)

    @staticmethod
    def _is_debug_enabled() -> bool:
        return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


logger = IRCLogger()
