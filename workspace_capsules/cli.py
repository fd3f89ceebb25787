"""
Workspace capsule command line interface.

Usage:
    workspace-capsules [--config PATH] [--log-level LEVEL] run [--output-dir DIR] [--socket PATH]
    workspace-capsules [--config PATH] [--log-level LEVEL] render [--socket PATH]
    workspace-capsules [--config PATH] [--log-level LEVEL] check-config
    workspace-capsules --version

LEVEL is one of DEBUG, INFO, WARNING, ERROR (default INFO).
"""

import logging
import signal
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import Config, default_config_path, default_output_dir, load_config
from .connection import QuerySession, open_connection
from .daemon import CapsuleDaemon
from .errors import CapsuleError
from .palette import Palette
from .renderer import classify_segment, render_segment
from .snapshot import build_snapshot

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _fail(error: CapsuleError) -> NoReturn:
    """Report a fatal error once on stderr and exit non-zero."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(error.message)}")
    if error.suggestion:
        err_console.print(f"  {escape(error.suggestion)}", style="dim")
    sys.exit(1)


def _load(ctx: click.Context) -> Config:
    config_path: Optional[Path] = ctx.obj["config_path"]
    if config_path is None:
        config_path = default_config_path()
    return load_config(config_path)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: $XDG_CONFIG_HOME/workspace-capsules/config)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity",
)
@click.version_option(__version__)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], log_level: str):
    """Mirror i3/Sway workspaces into per-workspace status bar markup files."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: $XDG_CACHE_HOME/workspace-capsules)",
)
@click.option("--socket", "socket_path", default=None, help="i3/Sway IPC socket path")
@click.pass_context
def run(ctx: click.Context, output_dir: Optional[Path], socket_path: Optional[str]):
    """
    Run the daemon.

    The output directory is wiped on start. The daemon never reconnects:
    any IPC failure exits with status 1 so a supervisor can restart it.
    """
    try:
        config = _load(ctx)
        if output_dir is None:
            output_dir = default_output_dir()
        daemon = CapsuleDaemon(config, output_dir, socket_path=socket_path)

        signal.signal(signal.SIGINT, lambda *_args: sys.exit(0))
        signal.signal(signal.SIGTERM, lambda *_args: sys.exit(0))

        daemon.run()
    except CapsuleError as e:
        _fail(e)


@cli.command()
@click.option("--socket", "socket_path", default=None, help="i3/Sway IPC socket path")
@click.pass_context
def render(ctx: click.Context, socket_path: Optional[str]):
    """Print the markup of every capsule once, without writing files."""
    try:
        config = _load(ctx)
        session = QuerySession(open_connection("query", socket_path))
        snapshot = build_snapshot(session, config.minimum_workspace_count)
    except CapsuleError as e:
        _fail(e)

    palette = Palette.from_config(config)
    previous_num = None
    for workspace in snapshot:
        shape = classify_segment(workspace.num, len(snapshot))
        markup = render_segment(
            workspace.num, workspace.focused, previous_num, len(snapshot), palette
        )
        click.echo(f"{workspace.num}\t{shape.value}\t{markup}", nl=False)
        previous_num = workspace.num


@cli.command(name="check-config")
@click.pass_context
def check_config(ctx: click.Context):
    """Validate the configuration file and print a summary."""
    try:
        config = _load(ctx)
    except CapsuleError as e:
        _fail(e)

    console = Console()
    table = Table(title="workspace-capsules configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("background_colors", escape(", ".join(config.background_colors)))
    table.add_row("focused_foreground_color", escape(config.focused_foreground_color))
    table.add_row("minimum_workspace_count", str(config.minimum_workspace_count))
    table.add_row("write_mode", config.write_mode)
    table.add_row("version", escape(config.version or "-"))
    console.print(table)


def main() -> None:
    """Console script entry point."""
    cli(obj={})
