"""
Workspace Capsules

Mirrors i3/Sway workspace state into per-workspace Pango markup files
for an external status bar.
"""

__version__ = "1.0.0"
