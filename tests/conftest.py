"""
Shared fixtures for instruction-hub tests.
"""

import itertools
from pathlib import Path
from typing import Dict, Optional

import pytest

from instruction_hub.cli_utils import HubContext
from instruction_hub.domain.instruction import RepoFile
from instruction_hub.domain.locator import RepoLocator, parse_file_reference
from instruction_hub.errors import NotFoundError, TransportError
from instruction_hub.infra.github_client import SingleFile
from instruction_hub.services import InstallationTracker, InstallService, RepoConfigStore


class FakeContentsClient:
    """
    In-memory stand-in for GitHubContentsClient.

    `repos` maps "owner/repo" to {path: content}.
    """

    def __init__(self, repos: Optional[Dict[str, Dict[str, str]]] = None, token: Optional[str] = None):
        self.repos = repos if repos is not None else {}
        self.token = token
        self.failing_downloads = set()
        self.list_calls = []
        self.download_calls = []

    def resolve_token(self, host=None):
        return self.token

    def _files(self, owner, repo):
        key = f"{owner}/{repo}"
        if key not in self.repos:
            raise NotFoundError(f"Repository not found: {key}")
        return self.repos[key]

    def list_markdown_files(self, locator: RepoLocator):
        self.list_calls.append(locator)
        files = self._files(locator.owner, locator.repo)
        prefix = f"{locator.path}/" if locator.path else ""
        return [
            RepoFile(name=path.rsplit('/', 1)[-1], path=path,
                     download_url=f"fake://{locator.owner}/{locator.repo}/{path}")
            for path in files
            if path.endswith('.md') and path.startswith(prefix)
        ]

    def download_content(self, url, token=None):
        self.download_calls.append((url, token))
        if url in self.failing_downloads:
            raise TransportError(f"Failed to download file: {url}")
        owner, repo, path = url[len("fake://"):].split('/', 2)
        return self._files(owner, repo)[path]

    def fetch_single_file(self, file_url):
        locator = parse_file_reference(file_url)
        files = self._files(locator.owner, locator.repo)
        if locator.file_path not in files:
            raise NotFoundError(f"File not found: {locator.file_path}")
        return SingleFile(
            content=files[locator.file_path],
            filename=locator.file_path.rsplit('/', 1)[-1],
            path=locator.file_path,
            locator=locator,
        )


def make_clock():
    """Deterministic, strictly increasing timestamps."""
    counter = itertools.count(1)
    return lambda: f"2024-01-01T00:00:{next(counter):02d}.000Z"


@pytest.fixture
def project_dir(tmp_path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def config_path(tmp_path) -> Path:
    return tmp_path / "home" / ".instruction-hub" / "config.json"


@pytest.fixture
def fake_client():
    return FakeContentsClient()


@pytest.fixture
def hub(project_dir, config_path, fake_client) -> HubContext:
    config_store = RepoConfigStore(config_path)
    tracker = InstallationTracker(project_dir)
    service = InstallService(config_store, tracker, fake_client, clock=make_clock())
    return HubContext(config_store=config_store, tracker=tracker, client=fake_client, service=service)


@pytest.fixture
def instructions_dir(project_dir) -> Path:
    return project_dir / ".github" / "instructions"
