"""
Common CLI utilities for consistent command behavior.

Commands share one HubContext per invocation, stored on `ctx.obj` by the
top-level group. Tests can pass their own HubContext through
`CliRunner.invoke(cli, args, obj=...)`.
"""

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Generator, Optional

import click

from .errors import InstructionHubError
from .exit_codes import INTERRUPTED, get_exit_code_for_exception
from .infra.credentials import CredentialProvider
from .infra.github_client import GitHubContentsClient
from .render import print_error, print_progress
from .services import InstallationTracker, InstallService, OperationResult, RepoConfigStore


@dataclass
class HubContext:
    """Services shared by every command of one invocation."""
    config_store: RepoConfigStore
    tracker: InstallationTracker
    client: GitHubContentsClient
    service: InstallService

    @classmethod
    def create(
        cls,
        project_dir: Optional[Path] = None,
        config_path: Optional[Path] = None,
        credentials: Optional[CredentialProvider] = None,
        client: Optional[GitHubContentsClient] = None,
    ) -> 'HubContext':
        """
        Build the default service graph.

        Args:
            project_dir: Project root holding .github/instructions
            config_path: Config file (defaults to ~/.instruction-hub/config.json)
            credentials: Token source for the GitHub client
            client: Pre-built GitHub client (overrides credentials)
        """
        config_store = RepoConfigStore(config_path)
        tracker = InstallationTracker(project_dir)
        client = client or GitHubContentsClient(credentials=credentials)
        return cls(
            config_store=config_store,
            tracker=tracker,
            client=client,
            service=InstallService(config_store, tracker, client),
        )


pass_hub = click.make_pass_decorator(HubContext)


def exit_with_error(error: InstructionHubError) -> None:
    """Print a user-facing error and exit with its code."""
    print_error(error.message)
    click.get_current_context().exit(get_exit_code_for_exception(error))


def run_flow(flow: Generator[str, None, OperationResult]) -> Optional[OperationResult]:
    """
    Drive a service flow, printing its progress messages.

    Flow-level errors are printed and turned into the matching exit code;
    Ctrl+C exits with INTERRUPTED.

    Returns:
        The flow's OperationResult
    """
    ctx = click.get_current_context()
    try:
        while True:
            print_progress(next(flow))
    except StopIteration as stop:
        return stop.value
    except InstructionHubError as e:
        exit_with_error(e)
    except KeyboardInterrupt:
        print_error("Interrupted")
        ctx.exit(INTERRUPTED)
    return None


def create_alias(original_cmd: click.Command, name: str) -> click.Command:
    """Hidden copy of a command registered under another name."""
    alias = copy.deepcopy(original_cmd)
    alias.name = name
    alias.hidden = True
    return alias
