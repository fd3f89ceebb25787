"""Core data models for workspaces as reported by the window manager."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Rect:
    """Workspace rectangle in output pixels."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class Workspace:
    """A single workspace considered in one refresh pass.

    Only ``num`` and ``focused`` affect rendering; the other fields are carried
    through from the window manager reply.
    """

    num: int                # Workspace ordinal (identity)
    name: str = ""
    focused: bool = False
    visible: bool = False
    urgent: bool = False
    output: str = ""        # Output (monitor) name
    rect: Rect = field(default_factory=Rect)

    @classmethod
    def from_reply(cls, reply: Any) -> 'Workspace':
        """Build from an i3ipc ``WorkspaceReply``.

        Args:
            reply: Workspace reply object from ``Connection.get_workspaces()``

        Returns:
            Workspace instance
        """
        rect = getattr(reply, "rect", None)
        return cls(
            num=reply.num,
            name=reply.name or "",
            focused=bool(reply.focused),
            visible=bool(getattr(reply, "visible", False)),
            urgent=bool(getattr(reply, "urgent", False)),
            output=getattr(reply, "output", "") or "",
            rect=Rect(rect.x, rect.y, rect.width, rect.height) if rect is not None else Rect(),
        )

    @classmethod
    def placeholder(cls, num: int) -> 'Workspace':
        """Synthesize an empty, unfocused workspace for padding."""
        return cls(num=num)
