"""Tests for IRCConnection using a local socket pair as the server."""

import logging
import socket
from unittest.mock import Mock

import pytest

from netirc.config import ConnectionOptions
from netirc.errors import ReadDisconnected
from netirc.irc.connection import IRCConnection
from netirc.irc.models import ConnectionState

OPTIONS = ConnectionOptions(
    server="irc.test",
    port=6667,
    nick="bot",
    realname="Net IRC Bot",
    identd="ident",
    host="client.host",
    log_types=[0, 1, 2, 3, 4, 5],
)
WELCOME = b":irc.test 001 bot :Welcome\r\n:irc.test 376 bot :End of /MOTD command.\r\n"


def read_sent(server: socket.socket, timeout: float = 1.0) -> str:
    """Collect everything the client has written so far."""
    server.settimeout(timeout)
    received = b""
    try:
        while True:
            chunk = server.recv(4096)
            if not chunk:
                break
            received += chunk
            server.settimeout(0.05)
    except socket.timeout:
        pass
    return received.decode()


@pytest.fixture
def socket_pair(monkeypatch):
    client, server = socket.socketpair()
    opened = []

    def fake_create_connection(address, timeout=None):
        opened.append((address, timeout))
        return client

    monkeypatch.setattr(
        "netirc.irc.connection.socket.create_connection", fake_create_connection
    )
    yield client, server, opened
    client.close()
    server.close()


@pytest.fixture
def fallback():
    return Mock(name="fallback")


@pytest.fixture
def connection(fallback):
    return IRCConnection(fallback=fallback)


@pytest.fixture
def ready(connection, socket_pair):
    """A connection that completed registration; server output drained."""
    client, server, _ = socket_pair
    server.sendall(WELCOME)
    assert connection.connect(OPTIONS) is True
    read_sent(server)
    return connection, server


class TestConnect:
    def test_handshake_and_ready(self, connection, socket_pair):
        client, server, opened = socket_pair
        on_connect = Mock()
        connection.register("CONNECT", on_connect)
        server.sendall(WELCOME)

        assert connection.connect(OPTIONS) is True

        assert opened == [(("irc.test", 6667), 5.0)]
        assert read_sent(server) == (
            "USER ident client.host irc.test :Net IRC Bot\r\nNICK bot\r\n"
        )
        assert connection.state is ConnectionState.READY
        assert client.getblocking() is False
        on_connect.assert_called_once_with()

    def test_waits_through_other_numerics(self, connection, socket_pair):
        _, server, _ = socket_pair
        seen = []
        connection.dispatcher.fallback = lambda *args: seen.append(args)
        lines = b"".join(
            f":irc.test {code} bot :info\r\n".encode()
            for code in ("001", "002", "003", "004", "005", "251", "375", "372")
        )
        server.sendall(lines + b":irc.test 422 bot :MOTD File is missing\r\n")

        assert connection.connect(OPTIONS) is True
        assert len(seen) == 9
        assert connection.get_stats("events")["MOTD"]["times"] == 1

    def test_ping_during_handshake_is_answered(self, connection, socket_pair, fallback):
        _, server, _ = socket_pair
        server.sendall(b"PING :abc123\r\n" + WELCOME)

        assert connection.connect(OPTIONS) is True

        sent = read_sent(server)
        assert sent.count("PONG :abc123\r\n") == 1
        for call in fallback.call_args_list:
            assert "abc123" not in call.args

    def test_connect_failure(self, connection, monkeypatch):
        def refuse(address, timeout=None):
            raise ConnectionRefusedError("refused")

        monkeypatch.setattr("netirc.irc.connection.socket.create_connection", refuse)
        assert connection.connect(OPTIONS) is False
        assert connection.state is ConnectionState.DISCONNECTED

    def test_server_hangs_up_during_registration(self, connection, socket_pair):
        client, server, _ = socket_pair
        on_disconnect = Mock()
        connection.register("DISCONNECT", on_disconnect)
        server.sendall(b":irc.test 001 bot :Welcome\r\n")
        server.shutdown(socket.SHUT_WR)

        assert connection.connect(OPTIONS) is False
        assert connection.state is ConnectionState.CLOSED
        on_disconnect.assert_called_once_with()
        assert connection.sock is None
        assert client.fileno() == -1

    def test_reconnect_releases_previous_socket(self, connection, monkeypatch):
        pairs = [socket.socketpair(), socket.socketpair()]
        clients = iter([client for client, _ in pairs])
        monkeypatch.setattr(
            "netirc.irc.connection.socket.create_connection",
            lambda address, timeout=None: next(clients),
        )
        for _, server in pairs:
            server.sendall(WELCOME)
        try:
            assert connection.connect(OPTIONS) is True
            first = connection.sock

            assert connection.connect(OPTIONS) is True

            assert first.fileno() == -1
            assert connection.sock is pairs[1][0]
            assert connection.state is ConnectionState.READY
        finally:
            for client, server in pairs:
                client.close()
                server.close()

    def test_accepts_mapping_options(self, connection, socket_pair):
        _, server, _ = socket_pair
        server.sendall(WELCOME)
        assert connection.connect(OPTIONS.model_dump()) is True
        assert connection.get_option("nick") == "bot"

    def test_log_types_applied(self, connection, socket_pair):
        _, server, _ = socket_pair
        server.sendall(WELCOME)
        connection.connect(OPTIONS.model_copy(update={"log_types": frozenset({0})}))
        assert connection.logger.log_types == frozenset({0})


class TestReadWrite:
    def test_non_blocking_read_without_data(self, ready):
        connection, _ = ready
        assert connection.read() is None
        assert connection.read_event() is None

    def test_read_returns_trimmed_line(self, ready):
        connection, server = ready
        server.sendall(b":a!b@c PRIVMSG #x :hi\r\n")
        assert connection.read(blocking=True) == ":a!b@c PRIVMSG #x :hi"

    def test_partial_line_waits_for_terminator(self, ready):
        connection, server = ready
        server.sendall(b":a!b@c PRIVMSG #x :par")
        assert connection.read() is None
        server.sendall(b"tial\r\n")
        assert connection.read(blocking=True) == ":a!b@c PRIVMSG #x :partial"

    def test_read_event_dispatches_and_returns_name(self, ready):
        connection, server = ready
        handler = Mock()
        connection.register("NAMES", handler)
        server.sendall(b":irc.test 366 bot #chan :End of /NAMES list.\r\n")

        assert connection.read_event(blocking=True) == "NAMES"
        handler.assert_called_once_with("irc.test", None, "bot #chan", "End of /NAMES list.")

    def test_read_event_skips_ping(self, ready, fallback):
        connection, server = ready
        fallback.reset_mock()
        server.sendall(b"PING :abc123\r\n:n!u@h JOIN :#chan\r\n")

        assert connection.read_event(blocking=True) == "JOIN"
        assert read_sent(server) == "PONG :abc123\r\n"
        fallback.assert_called_once_with("n", "u@h", None, "#chan")
        assert connection.get_stats("events")["PING"]["times"] == 1

    def test_prefixed_ping_without_colon_is_answered(self, ready):
        connection, server = ready
        server.sendall(b":irc.test PING irc.test\r\n:n!u@h JOIN :#chan\r\n")

        assert connection.read_event(blocking=True) == "JOIN"
        assert read_sent(server) == "PONG :irc.test\r\n"

    def test_write_sends_terminated_line(self, ready):
        connection, server = ready
        assert connection.write("  JOIN #chan  ") is True
        assert read_sent(server) == "JOIN #chan\r\n"

    def test_empty_write_sends_nothing(self, ready):
        connection, server = ready
        assert connection.write("") is True
        assert read_sent(server, timeout=0.1) == ""

    def test_socket_error_fails_write(self, ready, caplog):
        connection, _ = ready
        before = connection.get_stats("tx_idle_since")
        connection.stats.clock = Mock(return_value=before + 100.0)
        connection.sock = Mock(wraps=connection.sock)
        connection.sock.send.side_effect = BrokenPipeError("Broken pipe")
        caplog.set_level(logging.WARNING)

        assert connection.write("PRIVMSG #c :hi") is False

        assert connection.get_stats("tx_idle_since") == before
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any(
            "could not write to socket: Broken pipe" in r.getMessage() for r in warnings
        )

    def test_partial_send_is_completed(self, ready):
        connection, server = ready
        real = connection.sock
        attempts = []

        def send_in_pieces(view):
            attempts.append(len(view))
            if len(attempts) == 2:
                raise BlockingIOError
            return real.send(bytes(view[:4]))

        connection.sock = Mock(wraps=real)
        connection.sock.send.side_effect = send_in_pieces

        assert connection.write("PRIVMSG #c :hello") is True
        assert read_sent(server) == "PRIVMSG #c :hello\r\n"
        assert len(attempts) > 2

    def test_full_send_buffer_fails_write(self, ready, monkeypatch):
        connection, _ = ready
        monkeypatch.setattr("netirc.irc.connection.SEND_TIMEOUT", 0.05)
        # The server never reads, so the client's send buffer fills up
        filler = b"x" * 65536
        while True:
            try:
                connection.sock.send(filler)
            except BlockingIOError:
                break

        assert connection.write("PRIVMSG #c :hi") is False

    def test_receive_and_transmit_stamp_stats(self, connection, socket_pair):
        _, server, _ = socket_pair
        clock = Mock(return_value=100.0)
        connection.stats.clock = clock
        server.sendall(WELCOME)
        connection.connect(OPTIONS)
        clock.return_value = 130.0
        connection.write("PRIVMSG #c :hi")
        clock.return_value = 150.0
        assert connection.get_stats("tx_idle") == 20.0
        assert connection.get_stats("rx_idle") == 50.0
        assert connection.get_stats("running") == 50.0


class TestDisconnect:
    def test_disconnect_sends_quit_without_closing(self, ready):
        connection, server = ready
        connection.disconnect()
        assert read_sent(server) == "QUIT\r\n"
        assert connection.sock is not None
        assert connection.sock.fileno() != -1
        assert connection.is_connected() is True

    def test_end_of_stream_fails_each_call(self, ready):
        connection, server = ready
        on_disconnect = Mock()
        connection.register("DISCONNECT", on_disconnect)
        server.close()

        assert connection.is_connected() is False
        assert connection.state is ConnectionState.CLOSED
        assert connection.write("PRIVMSG #c :hi") is False
        assert on_disconnect.call_count == 1
        with pytest.raises(ReadDisconnected):
            connection.read()
        assert on_disconnect.call_count == 2
        assert connection.write("PRIVMSG #c :again") is False
        assert on_disconnect.call_count == 3

    def test_buffered_lines_survive_hangup(self, ready):
        connection, server = ready
        server.sendall(b":irc.test NOTICE bot :bye\r\nERROR :Closing link")
        server.close()

        assert connection.read_event(blocking=True) == "NOTICE"
        assert connection.read_event(blocking=True) == "ERROR"
        assert connection.is_connected() is False
        with pytest.raises(ReadDisconnected):
            connection.read_event(blocking=True)

    def test_loop_read_runs_until_hangup(self, ready, fallback):
        connection, server = ready
        fallback.reset_mock()
        server.sendall(b":a!b@c PRIVMSG #x :one\r\nPING :t\r\n:a!b@c PRIVMSG #x :two\r\n")
        server.close()

        connection.loop_read()

        assert [c.args[3] for c in fallback.call_args_list] == ["one", "two"]
        assert connection.get_stats("events")["PRIVMSG"]["times"] == 2

    def test_close_releases_socket(self, ready):
        connection, _ = ready
        connection.close()
        assert connection.sock is None
        assert connection.state is ConnectionState.CLOSED
        assert connection.is_connected() is False


class TestAccessors:
    def test_get_option_before_connect(self, connection):
        assert connection.get_option("nick") is None

    def test_get_option(self, ready):
        connection, _ = ready
        assert connection.get_option("server") == "irc.test"
        assert connection.get_option("missing") is None

    def test_extra(self, connection):
        connection.set_extra({"db": "handle", "owner": "ops"})
        assert connection.get_extra("owner") == "ops"
        assert connection.get_extra("nope") is None
        assert connection.get_extra() == {"db": "handle", "owner": "ops"}

    def test_write_before_connect_reports_disconnect(self, connection):
        on_disconnect = Mock()
        connection.register("DISCONNECT", on_disconnect)
        assert connection.write("NICK x") is False
        on_disconnect.assert_called_once_with()
        assert connection.state is ConnectionState.DISCONNECTED
