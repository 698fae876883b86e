"""
instruction-hub - Install and track GitHub Copilot instruction files.

instruction-hub copies Markdown instruction files from GitHub repositories
(public, private or Enterprise) into a project's .github/instructions/
directory, remembers where each file came from, and can later update or
remove them.

Quick Start:
    from instruction_hub import HubContext

    hub = HubContext.create(project_dir=".")
    hub.config_store.add_repo("octo/docs")

    files = hub.service.list_files("octo/docs")
    for message in hub.service.install("octo/docs", files):
        print(message)

    for message in hub.service.update():
        print(message)

Domain Objects:
    RepoLocator - Parsed repository reference
    FileLocator - Parsed GitHub file URL
    RepoFile - Markdown file listed from a repository
    ManagedInstruction - Installed, tracked instruction file

Services:
    RepoConfigStore - Configured repository list (~/.instruction-hub/config.json)
    InstallationTracker - Installation manifest (.github/instructions/.instruction-hub.json)
    InstallService - Install, update and uninstall flows
"""

__version__ = "1.0.0"

# Domain objects
from .domain import (
    RepoLocator,
    FileLocator,
    RepoFile,
    ManagedInstruction,
    parse_repo_reference,
    parse_file_reference,
)

# Services
from .services import (
    RepoConfigStore,
    InstallationTracker,
    InstallService,
    OperationResult,
)

# Infrastructure
from .infra import GitHubContentsClient

from .cli_utils import HubContext

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "RepoLocator",
    "FileLocator",
    "RepoFile",
    "ManagedInstruction",
    "parse_repo_reference",
    "parse_file_reference",
    # Services
    "RepoConfigStore",
    "InstallationTracker",
    "InstallService",
    "OperationResult",
    "GitHubContentsClient",
    "HubContext",
]
