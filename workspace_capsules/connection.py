"""Window manager IPC sessions.

Two independent i3ipc connections are used: one for synchronous queries and
one dedicated to the event subscription, so a query issued while handling an
event never interleaves with the event socket.
"""

import logging
import socket
from typing import Any, Callable, List, Optional

import i3ipc
from i3ipc import Event

from .errors import CapsuleError, IpcConnectError, IpcEventError, IpcQueryError

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]


def open_connection(session: str, socket_path: Optional[str] = None) -> i3ipc.Connection:
    """Open an i3/Sway IPC connection without auto-reconnect.

    Args:
        session: Session label used in log and error messages
        socket_path: Explicit IPC socket (default: discovered by i3ipc)

    Raises:
        IpcConnectError: If the window manager is not reachable
    """
    try:
        conn = i3ipc.Connection(socket_path=socket_path, auto_reconnect=False)
    except Exception as e:
        raise IpcConnectError(session, str(e)) from e
    logger.info(f"Connected {session} session to {conn.socket_path}")
    return conn


class QuerySession:
    """Synchronous request/reply session."""

    def __init__(self, conn: i3ipc.Connection) -> None:
        self.conn = conn

    def get_workspaces(self) -> List[Any]:
        """Return the live workspace replies.

        Raises:
            IpcQueryError: If the query fails
        """
        try:
            return self.conn.get_workspaces()
        except Exception as e:
            raise IpcQueryError("get_workspaces", str(e)) from e


class EventSession:
    """Event subscription session.

    The event socket is driven here rather than by ``Connection.main()``:
    ``subscribe()`` opens it and returns only once the window manager has
    acknowledged the SUBSCRIBE request, and ``listen()`` reads it one event at
    a time. Only event types with a registered handler are requested.
    """

    def __init__(self, conn: i3ipc.Connection) -> None:
        self.conn = conn
        self.subscribed: List[Event] = []

    def subscribe(self, events: List[Event], handler: EventHandler) -> None:
        """Register ``handler`` for each event type and subscribe.

        Raises:
            IpcConnectError: If the subscription cannot be sent or is refused
        """
        try:
            for event in events:
                self.conn.on(event, lambda _conn, payload: handler(payload))
            self.conn._sub_socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            self.conn._sub_socket.connect(self.conn.socket_path)
            reply = self.conn._subscribe(self.conn.subscriptions)
        except Exception as e:
            self.close()
            raise IpcConnectError("event", f"subscribe failed: {e}") from e

        if not reply.success:
            self.close()
            raise IpcConnectError("event", f"subscription refused: {reply.error or 'no reason given'}")

        self.subscribed.extend(events)
        logger.info(f"Subscribed to {', '.join(event.value for event in self.subscribed)} events")

    def listen(self) -> None:
        """Block dispatching events, one at a time, in arrival order.

        Only returns by raising: a closed stream is as fatal as a broken one.

        Raises:
            IpcEventError: If there is no subscription, or the stream fails or ends
            CapsuleError: Whatever a handler raised, unchanged
        """
        if not self.subscribed:
            raise IpcEventError("no acknowledged subscription to listen on")
        try:
            # poll returns True at end of stream
            while not self.conn._event_socket_poll():
                pass
        except CapsuleError:
            raise
        except Exception as e:
            raise IpcEventError(f"reading events failed: {e}") from e
        finally:
            self.close()
        raise IpcEventError("event stream closed by the window manager")

    def close(self) -> None:
        """Shut down the event socket, if one is open."""
        try:
            self.conn._event_socket_teardown()
        except OSError as e:
            logger.debug(f"Event socket already closed: {e}")
        self.subscribed.clear()
