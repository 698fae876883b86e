"""
Interactive prompts for instruction-hub.

Thin wrappers over questionary so commands (and tests) deal in domain
objects. Every helper returns None or an empty list when the user
cancels with Ctrl+C.
"""

from typing import List, Optional

import questionary

from .domain.instruction import ManagedInstruction, RepoFile


def select_repository(repos: List[str]) -> Optional[str]:
    """Single-choice list of configured repositories."""
    return questionary.select(
        "Select a repository:",
        choices=repos,
    ).ask()


def select_files(files: List[RepoFile]) -> List[RepoFile]:
    """Checkbox of Markdown files, titled by their repository path."""
    choices = [questionary.Choice(title=f.path, value=f) for f in files]
    selected = questionary.checkbox(
        "Select instruction files to install (use space to select):",
        choices=choices,
    ).ask()
    return selected or []


def select_instructions(instructions: List[ManagedInstruction]) -> List[ManagedInstruction]:
    """Checkbox of tracked instructions."""
    choices = [
        questionary.Choice(title=f"{i.filename} (from {i.source_repo})", value=i)
        for i in instructions
    ]
    selected = questionary.checkbox(
        "Select instructions to uninstall (use space to select):",
        choices=choices,
    ).ask()
    return selected or []
