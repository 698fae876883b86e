"""
List command for instruction-hub.
"""

import json

import click

from ..cli_utils import HubContext, pass_hub
from ..render import console, render_instructions_table


@click.command('list')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSONL')
@pass_hub
def list_handler(hub: HubContext, json_output):
    """
    List managed instructions.

    Examples:

    \b
        instruction-hub list
        instruction-hub list --json
    """
    managed = hub.tracker.get_instructions()

    if json_output:
        for instruction in managed:
            click.echo(json.dumps(instruction.to_dict(), ensure_ascii=False))
        return

    if not managed:
        console.print("[yellow]No managed instructions.[/yellow]")
        return

    render_instructions_table(managed)
