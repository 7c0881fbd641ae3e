from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_PORT

MIN_SEVERITY = 0
MAX_SEVERITY = 5


def normalize_log_types(codes: int | Iterable[int] | None) -> frozenset[int]:
    """Normalize a severity selection into a frozen set.

    Args:
        codes: One severity code, an iterable of codes, or None.

    Returns:
        Frozen set of codes. None yields an empty set.

    Raises:
        ValueError: If a code falls outside 0..5.
    """
    if codes is None:
        return frozenset()
    if isinstance(codes, bool):
        raise ValueError("log_types must be an int or an iterable of ints")
    if isinstance(codes, int):
        codes = (codes,)
    normalized = frozenset(int(c) for c in codes)
    bad = sorted(c for c in normalized if not MIN_SEVERITY <= c <= MAX_SEVERITY)
    if bad:
        raise ValueError(f"log severities must be within 0..5, got {bad}")
    return normalized


class ConnectionOptions(BaseModel):
    """Parameters of one IRC connection, supplied once at connect time.

    Attributes:
        server: Host name or address of the IRC server.
        port: TCP port of the server.
        nick: Nickname to register.
        realname: Free-text real name sent with USER.
        identd: User name sent with USER.
        host: Client host string sent with USER.
        log_types: Enabled log severities, or None to keep the logger's set.
    """

    model_config = ConfigDict(frozen=True)

    server: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    nick: str = Field(min_length=1)
    realname: str = ""
    identd: str = Field(min_length=1)
    host: str = Field(min_length=1)
    log_types: frozenset[int] | None = None

    @field_validator("nick", "identd", "host", mode="before")
    @classmethod
    def validate_word(cls, v: Any) -> Any:
        """Strip whitespace; these fields are sent as single protocol words."""
        if isinstance(v, str):
            v = v.strip()
            if " " in v:
                raise ValueError("must not contain spaces")
        return v

    @field_validator("log_types", mode="before")
    @classmethod
    def validate_log_types(cls, v: Any) -> frozenset[int] | None:
        """Accept a single severity or any iterable of severities."""
        if v is None:
            return None
        return normalize_log_types(v)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionOptions:
        """Create ConnectionOptions from a dictionary, ignoring unknown keys.

        Args:
            data: Dictionary containing connection parameters.

        Returns:
            ConnectionOptions instance.
        """
        known = {k: v for k, v in data.items() if k in cls.model_fields}
        return cls(**known)

    def get(self, name: str) -> Any:
        """Return the named option or None when it does not exist."""
        if name not in type(self).model_fields:
            return None
        return getattr(self, name)
