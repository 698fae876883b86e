"""
Repository config store for instruction-hub.

Persists the user's list of repository references as
`{"repos": [...]}` in ~/.instruction-hub/config.json. The list is global
to the machine; references are stored exactly as typed.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import get_config_path, get_default_config
from ..infra.file_store import JsonDocumentStore

logger = logging.getLogger(__name__)


def _repos(config: Dict[str, Any]) -> List[str]:
    """The `repos` list of a config document, reset if it is not a list."""
    if not isinstance(config.get('repos'), list):
        config['repos'] = []
    return config['repos']


class RepoConfigStore:
    """
    Read-modify-write access to the configured repository list.

    `owner/repo` and `https://github.com/owner/repo` are distinct entries;
    no normalization is applied.

    Example:
        store = RepoConfigStore()
        store.add_repo("octo/docs")
        print(store.get_repos())
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize RepoConfigStore.

        Args:
            path: Config file path (defaults to get_config_path())
        """
        self.path = Path(path) if path else get_config_path()
        self._store = JsonDocumentStore(self.path, get_default_config())

    def load(self) -> Dict[str, Any]:
        """Config document; missing or malformed files read as empty."""
        config = self._store.read()
        _repos(config)
        return config

    def get_repos(self) -> List[str]:
        return list(self.load()['repos'])

    def has_repo(self, repo: str) -> bool:
        return repo in self.load()['repos']

    def add_repo(self, repo: str) -> bool:
        """
        Add a repository reference.

        Returns:
            False if the exact string was already configured

        Raises:
            LocalIOError: if the config file cannot be written
        """
        if self.has_repo(repo):
            return False

        self._store.update(lambda config: _repos(config).append(repo))
        logger.debug(f"Added repository {repo} to {self.path}")
        return True

    def remove_repo(self, repo: str) -> bool:
        """
        Remove a repository reference (exact match).

        Returns:
            True if an entry was removed

        Raises:
            LocalIOError: if the config file cannot be written
        """
        if not self.has_repo(repo):
            return False

        def drop(config):
            config['repos'] = [r for r in _repos(config) if r != repo]

        self._store.update(drop)
        logger.debug(f"Removed repository {repo} from {self.path}")
        return True
