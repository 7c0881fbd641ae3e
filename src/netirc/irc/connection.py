"""Connection lifecycle for one IRC server session."""

from __future__ import annotations

import select
import socket
import time
from collections.abc import Callable, Mapping
from typing import Any

from ..config.model import ConnectionOptions
from ..constants import (
    BLOCKING_POLL_INTERVAL,
    CONNECT_EVENT,
    CONNECT_TIMEOUT,
    DISCONNECT_EVENT,
    PING_EVENT,
    READ_CHUNK_SIZE,
    SEND_TIMEOUT,
    WELCOME_EVENT,
)
from ..errors.internal import ConnectFailure, ReadDisconnected, WriteFailure
from ..logs.logger import IRCLogger
from .dispatcher import EventDispatcher, Handler
from .events import resolve_event
from .models import ConnectionState, Event
from .parser import parse_irc_message, serialize_command
from .stats import StatsTracker


class IRCConnection:
    """Single-threaded IRC client connection.

    ``connect`` registers with the server and blocks until the message of the
    day has been received, then switches the socket to non-blocking mode.
    Afterwards ``read_event`` / ``loop_read`` feed incoming lines through the
    parser, the stats tracker and the handler registry. PINGs are answered
    automatically.
    """

    def __init__(
        self,
        fallback: Handler,
        logger: IRCLogger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.logger = logger or IRCLogger("netirc.irc")
        self.state = ConnectionState.DISCONNECTED
        self.options: ConnectionOptions | None = None
        self.sock: socket.socket | None = None
        self.extra: dict[str, Any] = {}
        self.stats = StatsTracker(logger=self.logger, clock=clock)
        self.dispatcher = EventDispatcher(
            fallback, reply=self.write, logger=self.logger
        )
        self._buffer = bytearray()
        self._eof = False

    # Handler registry -------------------------------------------------
    def register(self, event: str, handler: Handler) -> None:
        self.dispatcher.register(event, handler)

    def on(self, event: str) -> Callable[[Handler], Handler]:
        return self.dispatcher.on(event)

    # Lifecycle --------------------------------------------------------
    def connect(self, options: ConnectionOptions | Mapping[str, Any]) -> bool:
        """Open the socket, register and wait for the message of the day.

        Returns True once registered, False if the server could not be
        reached or closed the connection during registration.
        """
        if not isinstance(options, ConnectionOptions):
            options = ConnectionOptions.from_dict(options)
        if self.sock is not None:
            # Reconnect: the previous session's socket is released first
            self.close()
        if options.log_types is not None:
            self.logger.set_log_types(options.log_types)

        self._set_state(ConnectionState.CONNECTING)
        self.logger.log_event(
            "irc", "connecting", level=3, server=options.server, port=options.port
        )
        try:
            self.sock = self._open_transport(options)
        except ConnectFailure as e:
            self.logger.log_event("irc", "connect_failed", level=0, error=str(e))
            self._set_state(ConnectionState.DISCONNECTED)
            return False
        self.logger.log_event("irc", "connected", level=3)

        self._buffer.clear()
        self._eof = False
        self._set_state(ConnectionState.HANDSHAKING)
        self.stats.reset()
        self.write(
            f"USER {options.identd} {options.host} {options.server} "
            f":{options.realname}"
        )
        self.write(f"NICK {options.nick}")

        self._set_state(ConnectionState.AWAITING_WELCOME)
        try:
            while self.read_event(blocking=True) != WELCOME_EVENT:
                pass
        except ReadDisconnected:
            self.logger.log_event("irc", "handshake_disconnected", level=0)
            self.close()
            return False

        self.sock.setblocking(False)
        self.options = options
        self._set_state(ConnectionState.READY)
        self.logger.log_event("irc", "registered", level=3, nick=options.nick)
        self.dispatcher.dispatch(CONNECT_EVENT)
        return True

    def disconnect(self) -> None:
        """Send QUIT and let the server close the socket.

        The local socket stays open so that the final lines sent by the
        server can still be read; ``is_connected`` turns False once it has
        closed its side.
        """
        self.logger.log_event("irc", "quit", level=3)
        self.write("QUIT")

    def close(self) -> None:
        """Release the local socket."""
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None
                self.logger.log_event("irc", "closed", level=3)
        if self.state is not ConnectionState.DISCONNECTED:
            self._set_state(ConnectionState.CLOSED)

    def is_connected(self) -> bool:
        return not self._at_eof()

    # Output -----------------------------------------------------------
    def write(self, command: str) -> bool:
        """Send one raw command. Returns False when it could not be sent."""
        if self._at_eof():
            self._report_disconnect("write")
            return False
        line = command.strip() if command else ""
        if line:
            try:
                self._send(serialize_command(line))
            except WriteFailure as e:
                self.logger.log_event("irc", "write_failed", level=1, error=str(e))
                return False
        self.logger.log_event("irc", "sent", level=4, line=line)
        self.stats.record_transmit()
        return True

    # Input ------------------------------------------------------------
    def read(self, blocking: bool = False) -> str | None:
        """Return the next line without terminators.

        Non-blocking reads return None when no complete line is available.
        Blocking reads wait in ``BLOCKING_POLL_INTERVAL`` slices until one
        arrives.

        Raises:
            ReadDisconnected: The server closed the connection.
        """
        if self._at_eof():
            self._report_disconnect("read")
            raise ReadDisconnected("Read Disconnected")
        while True:
            line = self._next_line()
            if line is not None:
                self.stats.record_receive()
                self.logger.log_event("irc", "received", level=4, line=line)
                return line
            if self._eof:
                self._at_eof()
                self._report_disconnect("read")
                raise ReadDisconnected("Read Disconnected")
            timeout = BLOCKING_POLL_INTERVAL if blocking else 0.0
            if not self._fill_buffer(timeout) and not blocking and not self._eof:
                return None

    def read_event(self, blocking: bool = False) -> str | None:
        """Read, parse, record and dispatch the next event.

        PINGs are answered and skipped. Returns the resolved event name, or
        None when non-blocking and nothing was pending.

        Raises:
            ReadDisconnected: The server closed the connection.
        """
        while True:
            line = self.read(blocking)
            if line is None:
                return None
            message = parse_irc_message(line)
            if message.is_degenerate:
                continue
            event = Event(resolve_event(message.command), message.args)
            self.stats.record_event(event.name, event.args)
            self.dispatcher.dispatch(event.name, event.args)
            if event.name != PING_EVENT:
                return event.name

    def loop_read(self) -> None:
        """Dispatch events until the server closes the connection."""
        try:
            while True:
                self.read_event(blocking=True)
        except ReadDisconnected:
            return

    # Collaborator accessors -------------------------------------------
    def get_stats(self, label: str | None = None) -> Any:
        return self.stats.snapshot(label)

    def get_option(self, name: str) -> Any:
        if self.options is None:
            return None
        return self.options.get(name)

    def set_extra(self, extra: Mapping[str, Any]) -> None:
        """Attach application data to this connection."""
        self.extra = dict(extra)

    def get_extra(self, label: str | None = None) -> Any:
        if label:
            return self.extra.get(label)
        return self.extra

    # Internals --------------------------------------------------------
    def _set_state(self, state: ConnectionState) -> None:
        self.state = state

    @staticmethod
    def _open_transport(options: ConnectionOptions) -> socket.socket:
        try:
            return socket.create_connection(
                (options.server, options.port), timeout=CONNECT_TIMEOUT
            )
        except OSError as e:
            raise ConnectFailure(
                f"{e} ({options.server}:{options.port})",
                data={"server": options.server, "port": options.port},
            ) from e

    def _send(self, data: bytes) -> None:
        if self.sock is None:
            raise WriteFailure("socket is not open")
        view = memoryview(data)
        try:
            while view:
                try:
                    sent = self.sock.send(view)
                except BlockingIOError:
                    sent = 0
                view = view[sent:]
                if view and not self._wait_writable():
                    raise WriteFailure(
                        f"socket not writable after {SEND_TIMEOUT}s, "
                        f"{len(view)} of {len(data)} bytes unsent"
                    )
        except OSError as e:
            raise WriteFailure(str(e)) from e

    def _wait_writable(self) -> bool:
        """Wait up to ``SEND_TIMEOUT`` for room in the send buffer.

        The socket is non-blocking once registered, so a long line can be
        accepted only partly; the remainder is sent when space frees up.
        """
        try:
            _, writable, _ = select.select([], [self.sock], [], SEND_TIMEOUT)
        except ValueError:
            return False
        return bool(writable)

    def _fill_buffer(self, timeout: float) -> bool:
        """Receive pending bytes into the line buffer.

        Waits up to ``timeout`` seconds for the socket to become readable.
        Returns True when bytes were added; marks end-of-stream on an empty
        read or a socket error.
        """
        if self.sock is None or self._eof:
            return False
        try:
            readable, _, _ = select.select([self.sock], [], [], timeout)
            if not readable:
                return False
            data = self.sock.recv(READ_CHUNK_SIZE)
        except (BlockingIOError, InterruptedError):
            return False
        except (OSError, ValueError):
            # ValueError: select() on a socket closed underneath us
            self._eof = True
            return False
        if not data:
            self._eof = True
            return False
        self._buffer += data
        return True

    def _next_line(self) -> str | None:
        while True:
            end = self._buffer.find(b"\n")
            if end >= 0:
                raw = bytes(self._buffer[: end + 1])
                del self._buffer[: end + 1]
            elif self._eof and self._buffer:
                # Unterminated trailing line before the server hung up
                raw = bytes(self._buffer)
                self._buffer.clear()
            else:
                return None
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            if line.strip():
                return line

    def _at_eof(self) -> bool:
        """True once the server has closed and every buffered line was read."""
        if self.sock is None:
            return True
        if not self._eof:
            self._fill_buffer(0.0)
        at_eof = self._eof and not self._buffer
        if at_eof and self.state is not ConnectionState.CLOSED:
            self._set_state(ConnectionState.CLOSED)
        return at_eof

    def _report_disconnect(self, path: str) -> None:
        self.logger.log_event("irc", f"{path}_disconnected", level=0)
        self.dispatcher.dispatch(DISCONNECT_EVENT)
