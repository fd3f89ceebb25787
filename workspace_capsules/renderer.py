"""Pango markup for one workspace capsule.

Consecutive capsules form a continuous chain: each capsule after the first
opens with a wedge drawn from the previous capsule's colour into its own, and
the last capsule closes the chain with a cap glyph.
"""

from enum import Enum
from typing import Optional

from .palette import Palette

UPPER_LEFT_TRIANGLE = ""   # nf-ple-upper_left_triangle
LOWER_RIGHT_TRIANGLE = ""  # nf-ple-lower_right_triangle


class SegmentShape(Enum):
    """Position of a capsule in the chain."""
    SOLE = "sole"
    FIRST = "first"
    LAST = "last"
    MIDDLE = "middle"


def classify_segment(num: int, total_count: int) -> SegmentShape:
    """Pick the capsule shape for workspace ``num`` in a pass of ``total_count``.

    ``total_count`` is the size of the current padded snapshot, not the
    largest ordinal, so a sparse snapshot such as ``[1, 5]`` renders 5 as last.
    """
    if num >= total_count and total_count == 1:
        return SegmentShape.SOLE
    elif num == 1:
        return SegmentShape.FIRST
    elif num >= total_count:
        return SegmentShape.LAST
    else:
        return SegmentShape.MIDDLE


def _closing_cap(color: str) -> str:
    return f'<span size="large" color="{color}">{UPPER_LEFT_TRIANGLE}</span>'


def _wedge(left_color: str, color: str) -> str:
    return (
        f'<span size="large" background="{left_color}" color="{left_color}">{UPPER_LEFT_TRIANGLE}</span>'
        f'<span size="large" background="{left_color}" color="{color}">{LOWER_RIGHT_TRIANGLE}</span>'
    )


def render_segment(
    num: int,
    focused: bool,
    previous_num: Optional[int],
    total_count: int,
    palette: Palette,
) -> str:
    """Render the markup block for one workspace.

    Args:
        num: Workspace ordinal
        focused: Whether the workspace has focus
        previous_num: Ordinal rendered just before this one in the same pass
        total_count: Number of workspaces in the current snapshot
        palette: Colour palette

    Returns:
        Newline-terminated Pango markup; identical inputs give identical output
    """
    label = palette.label(num, focused)
    color = palette.color_for(num)
    shape = classify_segment(num, total_count)

    if shape is SegmentShape.SOLE:
        return f'<span background="{color}"> {label} </span>{_closing_cap(color)}\n'
    elif shape is SegmentShape.FIRST:
        return f'<span size="large" background="{color}"> {label}</span>\n'

    wedge = _wedge(palette.left_color(num, previous_num), color)
    if shape is SegmentShape.LAST:
        return f'{wedge}<span background="{color}"> {label} </span>{_closing_cap(color)}\n'
    return f'{wedge}<span background="{color}"> {label}</span>\n'
