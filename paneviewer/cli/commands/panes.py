# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pane lifecycle commands."""

from typing import Optional

import click
from rich.table import Table

from paneviewer.cli import cli
from paneviewer.cli.helpers import _get_manager, console, handle_errors
from paneviewer.models.state import PaneConfig

DIRECTIONS = ["right", "left", "up", "down", "top", "bottom"]


@cli.command(name="open")
@click.option("--task-id", help="Track the pane under this task id")
@click.option("--agent-type", default="unknown", show_default=True, help="Agent label")
@click.option("--description", default="", help="Task description shown in the pane")
@click.option("--transcript-path", default="", help="Transcript file; its directory is watched")
@click.option("--direction", type=click.Choice(DIRECTIONS), help="Split direction")
@click.option("--percent", type=click.IntRange(1, 99), help="Pane size in percent")
@click.option("--auto-close", type=click.IntRange(min=0), help="Close N seconds after completion (0 = never)")
@click.option("--reuse", is_flag=True, help="Reuse the task's pane if it is still open")
@handle_errors
def open_pane(
    task_id: Optional[str],
    agent_type: str,
    description: str,
    transcript_path: str,
    direction: Optional[str],
    percent: Optional[int],
    auto_close: Optional[int],
    reuse: bool,
):
    """Spawn a monitor pane and print its pane id."""
    manager = _get_manager()
    pane_id = manager.get_or_create_pane(
        PaneConfig(
            task_id=task_id,
            agent_type=agent_type,
            description=description,
            transcript_path=transcript_path,
            direction=direction,
            percent=percent,
            auto_close_timeout=auto_close,
            reuse=reuse,
        )
    )
    click.echo(pane_id)


@cli.command(name="send")
@click.argument("pane_id")
@click.argument("message")
@handle_errors
def send(pane_id: str, message: str):
    """Send a line of text to a pane."""
    _get_manager().send_message(pane_id, message)


@cli.command(name="close")
@click.argument("pane_id")
@handle_errors
def close(pane_id: str):
    """Close a pane and stop tracking it."""
    _get_manager().close_pane(pane_id)
    console.print(f"[green]Closed pane {pane_id}[/green]")


@cli.command(name="cleanup")
@handle_errors
def cleanup():
    """Forget panes that no longer exist."""
    cleaned = _get_manager().cleanup()
    if cleaned:
        console.print(f"[green]Removed {cleaned} stale pane(s)[/green]")
    else:
        console.print("[dim]No stale panes[/dim]")


@cli.command(name="list")
@handle_errors
def list_panes():
    """List tracked panes."""
    panes = _get_manager().list_panes()

    if not panes:
        console.print("[yellow]No panes tracked[/yellow]")
        return

    table = Table(title="Tracked Panes")
    table.add_column("Task", style="cyan")
    table.add_column("Pane", style="magenta")
    table.add_column("Multiplexer", style="blue")
    table.add_column("Agent", style="white")
    table.add_column("Description", style="white")
    table.add_column("Created", style="dim")

    for task_id, record in sorted(panes.items(), key=lambda item: item[1].created_at):
        table.add_row(
            task_id,
            record.pane_id,
            record.multiplexer,
            record.agent_type,
            record.description,
            record.created_at,
        )

    console.print(table)
