"""
Workspace capsule daemon.

Mirrors the window manager's workspaces into one markup file per workspace
and keeps those files current as workspace events arrive.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

import i3ipc
from i3ipc import Event
from i3ipc.events import WorkspaceEvent

from .config import Config
from .connection import EventSession, QuerySession, open_connection
from .errors import CapsuleError, ErrorCode, IpcEventError
from .snapshot import build_snapshot
from .synchronizer import PublishedOutputs, SyncResult, reset_output_dir, synchronize

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of the daemon's window manager session."""
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    SUBSCRIBED = "subscribed"
    LISTENING = "listening"
    FAILED = "failed"


@dataclass
class SessionContext:
    """Everything a refresh pass needs, owned by a single daemon."""

    config: Config
    output_dir: Path
    query: Optional[QuerySession] = None
    events: Optional[EventSession] = None
    published: PublishedOutputs = field(default_factory=dict)


def refresh(context: SessionContext) -> SyncResult:
    """Re-query workspaces and publish changes."""
    snapshot = build_snapshot(context.query, context.config.minimum_workspace_count)
    return synchronize(snapshot, context.config, context.published, context.output_dir)


class CapsuleDaemon:
    """Owns the IPC sessions and drives the refresh loop."""

    def __init__(
        self,
        config: Config,
        output_dir: Path,
        socket_path: Optional[str] = None,
        connect: Callable[[str, Optional[str]], i3ipc.Connection] = open_connection,
    ):
        """
        Initialize the daemon.

        Args:
            config: Daemon configuration
            output_dir: Directory receiving one file per workspace
            socket_path: Explicit IPC socket (default: discovered by i3ipc)
            connect: Connection factory, replaceable in tests
        """
        self.context = SessionContext(config=config, output_dir=output_dir)
        self.socket_path = socket_path
        self._connect = connect
        self.state = SessionState.DISCONNECTED
        self.error: Optional[Exception] = None

    def _transition(self, state: SessionState) -> None:
        logger.debug(f"Session state: {self.state.value} -> {state.value}")
        self.state = state

    def connect(self) -> None:
        """Open the query and event sessions.

        Raises:
            IpcConnectError: If either session cannot connect
        """
        self.context.query = QuerySession(self._connect("query", self.socket_path))
        self.context.events = EventSession(self._connect("event", self.socket_path))
        self._transition(SessionState.CONNECTED)

    def reset_output_dir(self) -> None:
        """Start from an empty output directory."""
        reset_output_dir(self.context.output_dir)
        self.context.published.clear()

    def subscribe(self) -> None:
        """Subscribe to workspace events only, waiting for the acknowledgement."""
        self.context.events.subscribe([Event.WORKSPACE], self.handle_event)
        self._transition(SessionState.SUBSCRIBED)

    def refresh(self) -> SyncResult:
        return refresh(self.context)

    def handle_event(self, event: Any) -> None:
        """Dispatch one event from the subscription.

        Raises:
            IpcEventError: If the event is not a workspace event
        """
        if isinstance(event, WorkspaceEvent):
            logger.debug(f"Workspace event: {getattr(event, 'change', 'unknown')}")
            self.refresh()
        else:
            event_type = event.__class__.__name__
            raise IpcEventError(
                f"unexpected {event_type} on a workspace-only subscription",
                code=ErrorCode.WM_UNEXPECTED_EVENT,
                event_type=event_type,
            )

    def run(self) -> None:
        """Connect, publish the current state, then follow workspace events.

        Never returns normally: the event stream ending is an error.

        Raises:
            CapsuleError: On any fatal condition
        """
        logger.info("Starting workspace capsule daemon")
        try:
            self.connect()
            self.reset_output_dir()
            self.subscribe()
            self.refresh()
            self._transition(SessionState.LISTENING)
            logger.info("Listening for workspace events")
            self.context.events.listen()
        except Exception as e:
            self.error = e
            self._transition(SessionState.FAILED)
            if isinstance(e, CapsuleError):
                logger.error(f"Fatal error: {e.to_dict()}")
            else:
                logger.error(f"Fatal error: {e}")
            raise
