"""
Uninstall command for instruction-hub.
"""

import click
from rich.markup import escape

from .. import prompts
from ..cli_utils import HubContext, pass_hub, run_flow
from ..render import console


@click.command('uninstall')
@pass_hub
@click.pass_context
def uninstall_handler(ctx, hub: HubContext):
    """
    Uninstall managed instructions.

    With a single managed instruction it is removed straight away;
    otherwise pick the ones to remove from a checklist.
    """
    managed = hub.tracker.get_instructions()

    if not managed:
        console.print("[yellow]No managed instructions found.[/yellow]")
        return

    if len(managed) == 1:
        selected = managed
        console.print(f"[cyan]Uninstalling: {escape(managed[0].filename)}[/cyan]")
    else:
        selected = prompts.select_instructions(managed)

    if not selected:
        console.print("[yellow]No instructions selected.[/yellow]")
        return

    result = run_flow(hub.service.uninstall(selected))
    if result is not None and result.exit_code:
        ctx.exit(result.exit_code)
