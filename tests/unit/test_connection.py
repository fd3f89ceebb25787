"""Unit tests for the i3ipc session wrappers."""

from unittest.mock import Mock, patch

import i3ipc
import pytest
from i3ipc import Event

from workspace_capsules.connection import EventSession, QuerySession, open_connection
from workspace_capsules.errors import ErrorCode, IpcConnectError, IpcEventError, IpcQueryError


class TestOpenConnection:
    """Test connection establishment."""

    @patch("workspace_capsules.connection.i3ipc.Connection")
    def test_connects_without_auto_reconnect(self, mock_connection):
        conn = open_connection("query", "/run/user/1000/sway-ipc.sock")

        mock_connection.assert_called_once_with(
            socket_path="/run/user/1000/sway-ipc.sock", auto_reconnect=False
        )
        assert conn is mock_connection.return_value

    @patch("workspace_capsules.connection.i3ipc.Connection", side_effect=FileNotFoundError("no socket"))
    def test_failure_is_connect_error(self, _mock_connection):
        with pytest.raises(IpcConnectError) as exc_info:
            open_connection("event")

        assert exc_info.value.code == ErrorCode.WM_NOT_RUNNING
        assert exc_info.value.context["session"] == "event"


class TestQuerySession:
    """Test workspace queries."""

    def test_returns_replies(self, mock_i3_connection, set_workspaces):
        replies = set_workspaces(1, 2)

        assert QuerySession(mock_i3_connection).get_workspaces() == replies

    def test_failure_is_query_error(self, mock_i3_connection):
        mock_i3_connection.get_workspaces.side_effect = ConnectionResetError("reset")

        with pytest.raises(IpcQueryError):
            QuerySession(mock_i3_connection).get_workspaces()


@pytest.fixture
def event_conn():
    """Event connection that acknowledges its subscription."""
    conn = Mock(spec=i3ipc.Connection)
    conn.socket_path = "/run/user/1000/sway-ipc.sock"
    conn.subscriptions = 1
    conn._subscribe.return_value = Mock(success=True, error=None)
    return conn


@pytest.fixture
def mock_socket():
    with patch("workspace_capsules.connection.socket") as mock_module:
        yield mock_module


class TestEventSession:
    """Test subscription and dispatch."""

    def test_subscribe_registers_workspace_handler(self, event_conn, mock_socket):
        handler = Mock()
        session = EventSession(event_conn)

        session.subscribe([Event.WORKSPACE], handler)

        event_conn.on.assert_called_once()
        assert event_conn.on.call_args[0][0] == Event.WORKSPACE
        assert session.subscribed == [Event.WORKSPACE]

        # i3ipc calls handlers with (connection, event)
        payload = Mock()
        event_conn.on.call_args[0][1](event_conn, payload)
        handler.assert_called_once_with(payload)

    def test_subscribe_is_sent_before_returning(self, event_conn, mock_socket):
        """The SUBSCRIBE request goes out on the event socket inside subscribe()."""
        EventSession(event_conn).subscribe([Event.WORKSPACE], Mock())

        sub_socket = mock_socket.socket.return_value
        assert event_conn._sub_socket is sub_socket
        sub_socket.connect.assert_called_once_with("/run/user/1000/sway-ipc.sock")
        event_conn._subscribe.assert_called_once_with(1)
        event_conn.main.assert_not_called()

    def test_handler_registered_before_subscribe_request(self, event_conn, mock_socket):
        calls = Mock()
        calls.attach_mock(event_conn.on, "on")
        calls.attach_mock(event_conn._subscribe, "subscribe")

        EventSession(event_conn).subscribe([Event.WORKSPACE], Mock())

        assert [c[0] for c in calls.mock_calls] == ["on", "subscribe"]

    def test_subscribe_failure(self, event_conn, mock_socket):
        event_conn.on.side_effect = RuntimeError("bad event")

        with pytest.raises(IpcConnectError):
            EventSession(event_conn).subscribe([Event.WORKSPACE], Mock())

    def test_event_socket_connect_failure(self, event_conn, mock_socket):
        mock_socket.socket.return_value.connect.side_effect = ConnectionRefusedError("refused")
        session = EventSession(event_conn)

        with pytest.raises(IpcConnectError) as exc_info:
            session.subscribe([Event.WORKSPACE], Mock())

        assert "refused" in exc_info.value.message
        assert session.subscribed == []
        event_conn._subscribe.assert_not_called()
        event_conn._event_socket_teardown.assert_called_once()

    def test_refused_subscription(self, event_conn, mock_socket):
        event_conn._subscribe.return_value = Mock(success=False, error="unknown event type")
        session = EventSession(event_conn)

        with pytest.raises(IpcConnectError) as exc_info:
            session.subscribe([Event.WORKSPACE], Mock())

        assert "unknown event type" in exc_info.value.message
        assert session.subscribed == []
        event_conn._event_socket_teardown.assert_called_once()

    def test_listen_requires_subscription(self, event_conn):
        with pytest.raises(IpcEventError):
            EventSession(event_conn).listen()

        event_conn._event_socket_poll.assert_not_called()

    def test_listen_polls_until_stream_end(self, event_conn, mock_socket):
        event_conn._event_socket_poll.side_effect = [False, False, True]
        session = EventSession(event_conn)
        session.subscribe([Event.WORKSPACE], Mock())

        with pytest.raises(IpcEventError) as exc_info:
            session.listen()

        assert "closed" in exc_info.value.message
        assert event_conn._event_socket_poll.call_count == 3
        event_conn._event_socket_teardown.assert_called_once()
        assert session.subscribed == []

    def test_read_failure_is_fatal(self, event_conn, mock_socket):
        event_conn._event_socket_poll.side_effect = ValueError("Expecting value: line 1 column 1")
        session = EventSession(event_conn)
        session.subscribe([Event.WORKSPACE], Mock())

        with pytest.raises(IpcEventError) as exc_info:
            session.listen()

        assert exc_info.value.code == ErrorCode.WM_EVENT_FAILED
        event_conn._event_socket_teardown.assert_called_once()

    def test_handler_errors_propagate_unchanged(self, event_conn, mock_socket):
        event_conn._event_socket_poll.side_effect = IpcQueryError("get_workspaces", "broken pipe")
        session = EventSession(event_conn)
        session.subscribe([Event.WORKSPACE], Mock())

        with pytest.raises(IpcQueryError):
            session.listen()

    def test_close_tolerates_dead_socket(self, event_conn):
        event_conn._event_socket_teardown.side_effect = OSError(107, "Transport endpoint is not connected")

        EventSession(event_conn).close()
