"""
Service layer for instruction-hub.

Contains business logic that orchestrates domain objects and infrastructure:
- RepoConfigStore: configured repository list
- InstallationTracker: manifest of installed instruction files
- InstallService: install, update and uninstall flows

Services are the primary API for commands to use.
"""

from .config_store import RepoConfigStore
from .tracker import InstallationTracker
from .install_service import InstallService, OperationResult

__all__ = [
    'RepoConfigStore',
    'InstallationTracker',
    'InstallService',
    'OperationResult',
]
