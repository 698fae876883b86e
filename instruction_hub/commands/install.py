"""
Install command for instruction-hub.

Without arguments, walks the user through picking a configured repository
and the instruction files to install from it. With a GitHub file URL,
installs that single file directly.
"""

import click

from .. import prompts
from ..cli_utils import HubContext, exit_with_error, pass_hub, run_flow
from ..errors import InstructionHubError
from ..render import console


def _print_summary(result) -> None:
    failed = f"[red]{result.failed} failed[/red]" if result.failed else "[dim]0 failed[/dim]"
    console.print()
    console.print(f"[bold]Installation complete:[/bold] [green]{result.succeeded} succeeded[/green], {failed}")


@click.command('install')
@click.argument('url', required=False)
@pass_hub
@click.pass_context
def install_handler(ctx, hub: HubContext, url):
    """
    Install instructions from configured repositories (interactive).

    URL: optional GitHub file URL to install directly, e.g.
    https://github.com/owner/repo/blob/main/path/to/file.md

    Examples:

    \b
        instruction-hub install
        instruction-hub install https://github.com/octo/docs/blob/main/guide.md
    """
    if url:
        run_flow(hub.service.install_from_url(url))
        return

    repos = hub.config_store.get_repos()
    if not repos:
        console.print("[yellow]No repositories configured. Please add repositories first using:[/yellow]")
        console.print("[cyan]  instruction-hub config add <repo>[/cyan]")
        return

    selected_repo = prompts.select_repository(repos)
    if not selected_repo:
        console.print("[yellow]No repository selected.[/yellow]")
        return

    console.print("[blue]Fetching instructions from repository...[/blue]")
    try:
        files = hub.service.list_files(selected_repo)
    except InstructionHubError as e:
        exit_with_error(e)

    if not files:
        console.print("[yellow]No markdown files found in this repository.[/yellow]")
        return

    selected_files = prompts.select_files(files)
    if not selected_files:
        console.print("[yellow]No files selected.[/yellow]")
        return

    result = run_flow(hub.service.install(selected_repo, selected_files))
    if result is None:
        return

    _print_summary(result)
    if result.exit_code:
        ctx.exit(result.exit_code)

