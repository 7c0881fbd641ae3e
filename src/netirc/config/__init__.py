"""Configuration package exports."""

from .model import ConnectionOptions, normalize_log_types

__all__ = ["ConnectionOptions", "normalize_log_types"]
