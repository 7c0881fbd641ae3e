"""
Logging configuration for the netirc console.

Installs a colorlog formatter on the root logger so the engine's severity
sink (``netirc.logs``) prints with per-level colors and timestamps.
"""

import logging
import os
import sys

import colorlog

from .logs.logger import TRACE

LOG_COLORS = {
    "TRACE": "white",
    "DEBUG": "cyan",
    "INFO": "green",
    "NOTICE": "blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


class LoggerConfigurator:
    """Handles logging configuration using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional dict. ``level`` forces a stdlib level, ``stream``
                replaces stderr.
        """
        self.config = config or {}
        self.handler: logging.Handler | None = None

    def resolve_level(self) -> int:
        """DEBUG env var ('true', '1', 'yes') selects TRACE, else INFO."""
        if "level" in self.config:
            return self.config["level"]
        debug_env = os.environ.get("DEBUG", "").lower()
        return TRACE if debug_env in ("true", "1", "yes") else logging.INFO

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self) -> int:
        """Configure the root logger and return the level applied."""
        log_level = self.resolve_level()

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        handler.setFormatter(self.build_formatter())

        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        self.handler = handler
        root_logger.setLevel(log_level)
        return log_level


__all__ = ["LoggerConfigurator", "LOG_COLORS"]
