"""Colour resolution for workspace capsules."""

from dataclasses import dataclass
from typing import Optional, Tuple

from .config import Config


@dataclass(frozen=True)
class Palette:
    """Cyclic background palette plus the focused label colour."""

    background_colors: Tuple[str, ...]
    focused_foreground_color: str

    def __post_init__(self):
        if not self.background_colors:
            raise ValueError("Palette requires at least one background color")

    @classmethod
    def from_config(cls, config: Config) -> 'Palette':
        return cls(
            background_colors=tuple(config.background_colors),
            focused_foreground_color=config.focused_foreground_color,
        )

    def color_for(self, num: int) -> str:
        """Background colour of workspace ``num`` (1-based, wraps around)."""
        return self.background_colors[(num - 1) % len(self.background_colors)]

    def left_color(self, num: int, previous_num: Optional[int]) -> str:
        """Colour the transition wedge starts from.

        Falls back to the workspace's own colour at the start of a pass so
        no visible transition is drawn.
        """
        if previous_num is None:
            return self.color_for(num)
        return self.color_for(previous_num)

    def label(self, num: int, focused: bool) -> str:
        """Pango label text, highlighted when focused."""
        text = str(num)
        if focused:
            return f'<span color="{self.focused_foreground_color}">{text}</span>'
        return text
