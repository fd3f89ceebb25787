"""Gap-filled workspace snapshots."""

import logging
from typing import Dict, Tuple

from .connection import QuerySession
from .models import Workspace

logger = logging.getLogger(__name__)

Snapshot = Tuple[Workspace, ...]


def build_snapshot(session: QuerySession, minimum_count: int = 0) -> Snapshot:
    """Query live workspaces and pad them with placeholders.

    Ordinals ``1..minimum_count`` missing from the window manager reply are
    filled with empty, unfocused placeholders; live entries always win.

    Args:
        session: Query session
        minimum_count: Pad up to this ordinal (0 disables padding)

    Returns:
        Workspaces sorted ascending by ``num``, no duplicates

    Raises:
        IpcQueryError: If the query fails (not retried)
    """
    by_num: Dict[int, Workspace] = {}
    for reply in session.get_workspaces():
        workspace = Workspace.from_reply(reply)
        if workspace.num < 1:
            # Named workspaces without a number are reported as -1
            logger.debug(f"Skipping unnumbered workspace {workspace.name!r}")
            continue
        by_num[workspace.num] = workspace

    padded = 0
    for num in range(1, minimum_count + 1):
        if num not in by_num:
            by_num[num] = Workspace.placeholder(num)
            padded += 1

    if padded:
        logger.debug(f"Padded snapshot with {padded} placeholder workspace(s)")

    return tuple(by_num[num] for num in sorted(by_num))
