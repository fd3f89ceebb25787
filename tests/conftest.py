"""Pytest configuration and fixtures for workspace capsule tests."""

from pathlib import Path
from typing import Callable, List
from unittest.mock import Mock

import i3ipc
import pytest

from workspace_capsules.config import Config
from workspace_capsules.connection import QuerySession
from workspace_capsules.palette import Palette


@pytest.fixture
def sample_config() -> Config:
    """Three-colour palette, no padding."""
    return Config(
        background_colors=["#111111", "#222222", "#333333"],
        focused_foreground_color="#ffffff",
    )


@pytest.fixture
def palette(sample_config) -> Palette:
    return Palette.from_config(sample_config)


@pytest.fixture
def make_reply() -> Callable[..., Mock]:
    """Factory for i3ipc workspace replies."""
    def _make(num: int, focused: bool = False, name: str = None, output: str = "HEADLESS-1") -> Mock:
        reply = Mock(
            num=num, focused=focused, visible=focused, urgent=False, output=output,
            rect=Mock(x=0, y=0, width=1920, height=1080),
        )
        # Mock(name=...) names the mock itself, so set the attribute afterwards
        reply.name = name if name is not None else str(num)
        return reply
    return _make


@pytest.fixture
def mock_i3_connection() -> Mock:
    """Mock i3 IPC connection with no workspaces."""
    conn = Mock(spec=i3ipc.Connection)
    conn.get_workspaces.return_value = []
    return conn


@pytest.fixture
def query_session(mock_i3_connection) -> QuerySession:
    return QuerySession(mock_i3_connection)


@pytest.fixture
def set_workspaces(mock_i3_connection, make_reply) -> Callable[..., List[Mock]]:
    """Replace the live workspace list: ``set_workspaces(1, 2, focused=2)``."""
    def _set(*nums: int, focused: int = None) -> List[Mock]:
        replies = [make_reply(num, focused=(num == focused)) for num in nums]
        mock_i3_connection.get_workspaces.return_value = replies
        return replies
    return _set


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Output directory path (not created)."""
    return tmp_path / "workspace-capsules"


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Valid YAML configuration file."""
    path = tmp_path / "config"
    path.write_text(
        "background_colors:\n"
        "  - \"#111111\"\n"
        "  - \"#222222\"\n"
        "focused_foreground_color: \"#ffffff\"\n"
        "minimum_workspace_count: 3\n"
        "version: \"1\"\n"
    )
    return path
