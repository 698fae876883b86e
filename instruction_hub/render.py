"""
Rendering functions for instruction-hub output.

This module handles all pretty-printing and table formatting.
Services return data and progress strings; this module makes them
human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich.markup import escape
from rich import box
from typing import List

from .domain.instruction import ManagedInstruction

console = Console()


def render_repos_table(repos: List[str]) -> None:
    """Numbered table of configured repositories."""
    table = Table(show_header=True, header_style="bold cyan", box=box.ROUNDED)
    table.add_column("#", style="dim", width=4)
    table.add_column("Repository", style="cyan")

    for i, repo in enumerate(repos, 1):
        table.add_row(str(i), escape(repo))

    console.print("[bold]Configured repositories:[/bold]")
    console.print(table)


def format_installed_at(instruction: ManagedInstruction) -> str:
    """Install time in local time, or the raw value if it does not parse."""
    try:
        return instruction.installed_datetime.astimezone().strftime('%Y-%m-%d %H:%M:%S')
    except ValueError:
        return instruction.installed_at


def render_instructions_table(instructions: List[ManagedInstruction]) -> None:
    """Table of managed instructions."""
    table = Table(show_header=True, header_style="bold cyan", box=box.ROUNDED)
    table.add_column("#", style="dim", width=4)
    table.add_column("File", style="cyan")
    table.add_column("Source", style="green")
    table.add_column("Path")
    table.add_column("Installed", style="dim")

    for i, instruction in enumerate(instructions, 1):
        table.add_row(
            str(i),
            escape(instruction.filename),
            escape(instruction.source_repo),
            escape(instruction.source_path),
            format_installed_at(instruction),
        )

    console.print("[bold]Managed instructions:[/bold]")
    console.print(table)


def print_progress(message: str) -> None:
    """Print a service progress message, colored by its marker."""
    text = escape(message)
    if message.startswith("✓"):
        console.print(f"[green]{text}[/green]")
    elif message.startswith("✗"):
        console.print(f"[red]{text}[/red]")
    elif message.startswith("  "):
        console.print(f"[yellow]{text}[/yellow]")
    else:
        console.print(f"[blue]{text}[/blue]")


def print_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
