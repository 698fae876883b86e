"""
Update command for instruction-hub.

Re-downloads every managed instruction from its source repository and
rewrites the files whose content changed.
"""

import click
from rich.markup import escape

from ..cli_utils import HubContext, pass_hub, run_flow
from ..render import console


@click.command('update')
@pass_hub
@click.pass_context
def update_handler(ctx, hub: HubContext):
    """
    Update all managed instructions from their sources.

    Files already matching their source are left untouched.
    """
    managed = hub.tracker.get_instructions()

    if not managed:
        console.print("[yellow]No managed instructions found to update.[/yellow]")
        return

    console.print(f"[bold]Updating {len(managed)} managed instruction(s):[/bold]")
    for i, instruction in enumerate(managed, 1):
        console.print(
            f"[cyan]  {i}. {escape(instruction.filename)}[/cyan] "
            f"[dim](from {escape(instruction.source_repo)})[/dim]"
        )
    console.print()

    result = run_flow(hub.service.update())
    if result is None:
        return

    console.print()
    if result.succeeded:
        console.print(f"[green]✓ Successfully updated {result.succeeded} instruction(s)[/green]")
    if result.skipped and not result.succeeded and not result.failed:
        console.print("[dim]All instructions are up to date[/dim]")
    if result.failed:
        console.print(f"[red]✗ Failed to update {result.failed} instruction(s)[/red]")
        ctx.exit(result.exit_code)
