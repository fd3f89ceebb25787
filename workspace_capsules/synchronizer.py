"""Diff rendered capsules against what was last published and write changes.

The output directory holds one file per workspace ordinal. The status bar
tails these files, so a write is a change notification: nothing is written
when a capsule's markup is unchanged.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .config import Config
from .errors import ErrorCode, FilesystemError, OutputDirCorruption
from .palette import Palette
from .renderer import render_segment
from .snapshot import Snapshot

logger = logging.getLogger(__name__)

CLEAR_MARKER = "\n\n"

PublishedOutputs = Dict[int, str]


@dataclass
class SyncResult:
    """Outcome of one synchronization pass."""

    written: List[int] = field(default_factory=list)   # Ordinals whose markup changed
    cleared: List[int] = field(default_factory=list)   # Ordinals that disappeared
    reset: bool = False                                # Output directory was corrupt and deleted

    @property
    def changed(self) -> bool:
        return bool(self.written or self.cleared or self.reset)


def reset_output_dir(output_dir: Path) -> None:
    """Delete the output directory if present and recreate it empty.

    Raises:
        FilesystemError: If removal or creation fails
    """
    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(
            "reset", str(output_dir), str(e), code=ErrorCode.DIRECTORY_RESET_FAILED
        ) from e
    logger.info(f"Reset output directory {output_dir}")


def scan_output_dir(output_dir: Path) -> List[int]:
    """List the workspace ordinals present in the output directory.

    Raises:
        OutputDirCorruption: If an entry name is not a decimal ordinal
        FilesystemError: If the directory cannot be read
    """
    try:
        names = sorted(entry.name for entry in output_dir.iterdir())
    except OSError as e:
        raise FilesystemError("read", str(output_dir), str(e)) from e

    nums = []
    for name in names:
        if not (name.isascii() and name.isdigit()):
            raise OutputDirCorruption(str(output_dir), name)
        nums.append(int(name))
    return nums


def write_block(path: Path, block: str, write_mode: str = "append") -> None:
    """Append ``block`` to ``path``, or replace its contents in truncate mode.

    Raises:
        FilesystemError: If the write fails
    """
    mode = "w" if write_mode == "truncate" else "a"
    try:
        with open(path, mode, encoding="utf-8") as f:
            f.write(block)
    except OSError as e:
        raise FilesystemError("write", str(path), str(e)) from e


def synchronize(
    snapshot: Snapshot,
    config: Config,
    published: PublishedOutputs,
    output_dir: Path,
    palette: Optional[Palette] = None,
) -> SyncResult:
    """Publish changed capsules and clear workspaces that disappeared.

    Args:
        snapshot: Workspaces of this pass, ascending by ``num``
        config: Daemon configuration
        published: Last markup written per ordinal (mutated in place)
        output_dir: Directory of per-workspace files
        palette: Palette override (default: built from ``config``)

    Returns:
        SyncResult describing the writes performed

    Raises:
        FilesystemError: If the directory cannot be created, read, or written
    """
    palette = palette or Palette.from_config(config)
    result = SyncResult()

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError("create", str(output_dir), str(e)) from e

    total_count = len(snapshot)
    seen = set()
    previous_num: Optional[int] = None
    for workspace in snapshot:
        markup = render_segment(
            workspace.num, workspace.focused, previous_num, total_count, palette
        )
        if markup != published.get(workspace.num, ""):
            write_block(output_dir / str(workspace.num), markup, config.write_mode)
            published[workspace.num] = markup
            result.written.append(workspace.num)
            logger.debug(f"Workspace {workspace.num}: published new markup")
        seen.add(workspace.num)
        previous_num = workspace.num

    try:
        existing = scan_output_dir(output_dir)
    except OutputDirCorruption as e:
        logger.warning(f"{e.message}; deleting output directory")
        try:
            shutil.rmtree(output_dir)
        except OSError as rm_error:
            raise FilesystemError("remove", str(output_dir), str(rm_error)) from rm_error
        published.clear()
        result.reset = True
        return result

    for num in existing:
        if num in seen or num not in published:
            continue
        write_block(output_dir / str(num), CLEAR_MARKER, config.write_mode)
        del published[num]
        result.cleared.append(num)
        logger.debug(f"Workspace {num}: cleared")

    # Workspaces whose file was removed externally
    for num in [num for num in published if num not in seen]:
        del published[num]

    if result.changed:
        logger.info(
            f"Synchronized {total_count} workspace(s): "
            f"{len(result.written)} written, {len(result.cleared)} cleared"
        )
    return result
