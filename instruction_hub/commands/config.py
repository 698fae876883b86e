"""
Repository configuration commands.

Commands for managing the list of repositories instructions are
installed from.
"""

import json

import click
from rich.markup import escape

from ..cli_utils import HubContext, create_alias, exit_with_error, pass_hub
from ..errors import InstructionHubError
from ..render import console, render_repos_table


@click.group("config")
def config_cmd():
    """Manage instruction repositories."""
    pass


@config_cmd.command("add")
@click.argument("repo")
@pass_hub
def repo_add(hub: HubContext, repo):
    """Add a repository.

    REPO: owner/repo, owner/repo/path, or a GitHub (Enterprise) URL

    Examples:

    \b
        instruction-hub config add octo/docs
        instruction-hub config add octo/docs/instructions
        instruction-hub config add https://ghe.example.com/team/prompts
    """
    try:
        added = hub.config_store.add_repo(repo)
    except InstructionHubError as e:
        exit_with_error(e)

    if not added:
        console.print(f"[yellow]Repository already configured:[/yellow] {escape(repo)}")
        return

    console.print(f"[green]✓[/green] Added repository: [cyan]{escape(repo)}[/cyan]")


@config_cmd.command("remove")
@click.argument("repo")
@pass_hub
def repo_remove(hub: HubContext, repo):
    """Remove a repository.

    REPO: Reference to remove (must match exactly as stored)
    """
    repos = hub.config_store.get_repos()

    if repo not in repos:
        console.print(f"[yellow]Repository not found in configuration:[/yellow] {escape(repo)}")
        if repos:
            console.print("\n[dim]Current configured repositories:[/dim]")
            for r in repos:
                console.print(f"  {escape(r)}")
        return

    try:
        hub.config_store.remove_repo(repo)
    except InstructionHubError as e:
        exit_with_error(e)

    console.print(f"[green]✓[/green] Removed repository: [cyan]{escape(repo)}[/cyan]")


@config_cmd.command("list")
@click.option("--json", "json_output", is_flag=True, help="Output as JSONL")
@pass_hub
def repo_list(hub: HubContext, json_output):
    """List configured repositories.

    Examples:

    \b
        instruction-hub config list
        instruction-hub config list --json
    """
    repos = hub.config_store.get_repos()

    if json_output:
        for i, repo in enumerate(repos):
            click.echo(json.dumps({"index": i, "repo": repo}))
        return

    if not repos:
        console.print("[yellow]No repositories configured.[/yellow]")
        console.print("[dim]Add a repository with: instruction-hub config add <repo>[/dim]")
        return

    render_repos_table(repos)


config_cmd.add_command(create_alias(repo_remove, "rm"))
config_cmd.add_command(create_alias(repo_list, "ls"))
