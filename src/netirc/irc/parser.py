"""IRC line parsing and serialization."""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import LINE_TERMINATOR

EventArgs = tuple[str | None, str | None, str | None, str | None]


@dataclass
class ParsedMessage:
    command: str
    origin: str | None = None
    origin_host: str | None = None
    target: str | None = None
    params: str | None = None

    @property
    def args(self) -> EventArgs:
        """Handler arguments: (origin, origin_host, target, params)."""
        return (self.origin, self.origin_host, self.target, self.params)

    @property
    def is_degenerate(self) -> bool:
        return not self.command


def parse_irc_message(raw_line: str) -> ParsedMessage:
    """Parse one protocol line.

    ``:nick!user@host COMMAND target :trailing`` yields origin ``nick``,
    origin_host ``user@host``, target ``target`` and params ``trailing``.
    Lines without a prefix keep only the command and the remainder (minus a
    leading colon) as params. Blank input yields an empty-command message
    instead of raising.
    """
    line = raw_line.rstrip("\r\n")
    if not line.strip():
        return ParsedMessage(command="")

    if not line.startswith(":"):
        command, _, rest = line.partition(" ")
        params = rest[1:] if rest.startswith(":") else rest
        return ParsedMessage(command=command, params=params or None)

    prefix, _, remainder = line[1:].partition(" ")
    origin: str | None
    origin_host: str | None
    if "!" in prefix:
        origin, origin_host = prefix.split("!", 1)
    else:
        origin, origin_host = prefix, None

    command, _, rest = remainder.partition(" ")
    if not command:
        return ParsedMessage(command="")
    target: str | None
    params: str | None
    # foo :bar
    if " :" in rest:
        target, params = rest.split(" :", 1)
    # :bar
    elif rest.startswith(":"):
        target, params = None, rest[1:]
    # foo
    else:
        target, params = rest or None, None

    return ParsedMessage(
        command=command,
        origin=origin,
        origin_host=origin_host,
        target=target,
        params=params,
    )


def serialize_command(command: str) -> bytes:
    """Trim a raw command and terminate it for the wire.

    Embedded CR/LF are not escaped; callers must not put them in a command.
    """
    return (command.strip() + LINE_TERMINATOR).encode("utf-8")
