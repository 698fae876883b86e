#!/usr/bin/env python3

import logging
from pathlib import Path

import click

from instruction_hub import __version__
from instruction_hub.cli_utils import HubContext, create_alias
from instruction_hub.commands.config import config_cmd
from instruction_hub.commands.install import install_handler
from instruction_hub.commands.uninstall import uninstall_handler
from instruction_hub.commands.update import update_handler
from instruction_hub.commands.list import list_handler


@click.group()
@click.version_option(version=__version__, prog_name='instruction-hub')
@click.option('-C', '--project-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Project directory holding .github/instructions (default: current directory)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, project_dir, debug):
    """instruction-hub - Manage GitHub Copilot instructions.

    Installs Markdown instruction files from GitHub repositories into
    .github/instructions/, keeps track of them, and updates or removes
    them later.
    """
    if debug:
        logging.getLogger('instruction_hub').setLevel(logging.DEBUG)

    if ctx.obj is None:
        ctx.obj = HubContext.create(project_dir=project_dir)


# Command groups
cli.add_command(config_cmd)

# Core commands
cli.add_command(install_handler, name='install')
cli.add_command(uninstall_handler, name='uninstall')
cli.add_command(update_handler, name='update')
cli.add_command(list_handler, name='list')

# Aliases
for _cmd, _aliases in (
    (install_handler, ('i', 'add')),
    (uninstall_handler, ('rm', 'remove', 'delete')),
    (update_handler, ('u', 'upgrade')),
    (list_handler, ('ls',)),
):
    for _alias in _aliases:
        cli.add_command(create_alias(_cmd, _alias))


def main():
    cli()

if __name__ == "__main__":
    main()
