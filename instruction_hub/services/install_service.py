"""
Install service for instruction-hub.

Implements the install, direct-URL install, update and uninstall flows on
top of the config store, the installation tracker and the GitHub client.
Prompting is left to the commands; every flow here works on an explicit
selection, yields progress messages and returns an OperationResult.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, Generator, List, Optional

from ..domain.instruction import (
    ManagedInstruction,
    RepoFile,
    disambiguated_filename,
    ensure_front_matter,
    installed_filename,
    utc_timestamp,
)
from ..domain.locator import parse_file_reference, parse_repo_reference
from ..errors import InstructionHubError, LocalIOError, MalformedReferenceError, NotFoundError
from ..exit_codes import exit_code_for_counts
from ..infra.github_client import FILE_URL_FORMAT, GitHubContentsClient
from .config_store import RepoConfigStore
from .tracker import InstallationTracker

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Result of an install/update/uninstall run."""
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)
    details: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0

    @property
    def exit_code(self) -> int:
        return exit_code_for_counts(self.succeeded, self.failed)

    def record(self, status: str, **detail: Any) -> None:
        """Count one unit of work and keep its detail record."""
        if status == 'error':
            self.failed += 1
            self.errors.append(f"{detail.get('name', '')}: {detail.get('error', '')}")
        elif status == 'skipped':
            self.skipped += 1
        else:
            self.succeeded += 1
        self.details.append({'status': status, **detail})


class InstallService:
    """
    Orchestrates installing, updating and removing instruction files.

    Example:
        service = InstallService(RepoConfigStore(), InstallationTracker(), GitHubContentsClient())
        files = service.list_files("octo/docs")

        for message in service.install("octo/docs", files):
            print(message)

        result = service.last_result
        print(f"{result.succeeded} installed, {result.failed} failed")
    """

    def __init__(
        self,
        config_store: RepoConfigStore,
        tracker: InstallationTracker,
        client: GitHubContentsClient,
        clock: Callable[[], str] = utc_timestamp,
    ):
        """
        Initialize InstallService.

        Args:
            config_store: Configured repository list
            tracker: Manifest of installed files for the project
            client: GitHub contents client
            clock: Returns the timestamp recorded for installs/updates
        """
        self.config_store = config_store
        self.tracker = tracker
        self.client = client
        self.clock = clock
        self.last_result: Optional[OperationResult] = None

    def list_files(self, repo_ref: str) -> List[RepoFile]:
        """List Markdown files available from a repository reference."""
        return self.client.list_markdown_files(parse_repo_reference(repo_ref))

    # File handling

    def _read_file(self, path: Path) -> str:
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise LocalIOError(f"Could not read {path}: {e}") from e

    def _write_file(self, path: Path, content: str) -> None:
        try:
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        except OSError as e:
            raise LocalIOError(f"Could not write {path}: {e}") from e

    def _write_instruction(
        self,
        source_name: str,
        source_repo: str,
        source_path: str,
        content: str,
    ) -> Generator[str, None, str]:
        """
        Write a downloaded file into the instructions directory and track it.

        If the target name is taken by a file tracked from another
        repository, the source repository name is inserted before the
        suffix. A same-source or untracked file is overwritten.

        Returns:
            Filename the content was written under
        """
        try:
            self.tracker.ensure_instructions_dir()
        except OSError as e:
            raise LocalIOError(f"Could not create {self.tracker.instructions_dir}: {e}") from e

        filename = installed_filename(source_name)
        target = self.tracker.path_for(filename)

        if target.exists():
            existing = self.tracker.get(filename)
            if existing is not None and existing.source_repo != source_repo:
                repo_name = parse_repo_reference(source_repo).repo
                filename = disambiguated_filename(filename, repo_name)
                target = self.tracker.path_for(filename)
                yield f"  File {PurePosixPath(source_name).name} already exists from a different source."
                yield f"  Installing as {filename} to avoid conflict."
            else:
                yield f"  File {filename} already exists. Overwriting..."

        self._write_file(target, ensure_front_matter(content))
        self.tracker.add(ManagedInstruction(
            filename=filename,
            source_repo=source_repo,
            source_path=source_path,
            installed_at=self.clock(),
        ))
        return filename

    # Flows

    def install(self, repo_ref: str, files: List[RepoFile]) -> Generator[str, None, OperationResult]:
        """
        Install selected files from a configured repository.

        Per-file failures are recorded and the loop continues.

        Yields:
            Progress messages

        Returns:
            OperationResult with success/failure counts
        """
        result = OperationResult()
        self.last_result = result

        if not files:
            yield "No files selected."
            return result

        locator = parse_repo_reference(repo_ref)
        token = self.client.resolve_token(locator.host)

        yield f"Installing {len(files)} instruction(s)..."

        for repo_file in files:
            yield f"Downloading {repo_file.path}..."
            try:
                content = self.client.download_content(repo_file.download_url, token)
                filename = yield from self._write_instruction(
                    repo_file.name or repo_file.path, repo_ref, repo_file.path, content
                )
            except (InstructionHubError, OSError) as e:
                logger.debug(f"Install of {repo_file.path} failed: {e}")
                result.record('error', name=repo_file.path, error=str(e))
                yield f"✗ Failed to install {repo_file.path}: {e}"
                continue

            result.record('installed', name=repo_file.path, filename=filename, source=repo_ref)
            yield f"✓ Installed {filename}"

        return result

    def install_from_url(self, url: str) -> Generator[str, None, OperationResult]:
        """
        Install a single file given its GitHub blob URL.

        The file's repository is added to the configuration if it is not
        there yet.

        Raises:
            MalformedReferenceError, NotFoundError, AuthenticationError,
            ForbiddenError, TransportError, LocalIOError
        """
        result = OperationResult()
        self.last_result = result

        locator = parse_file_reference(url)
        if locator is None:
            raise MalformedReferenceError(
                f"Invalid GitHub file URL. Expected format: {FILE_URL_FORMAT}"
            )

        repo_ref = locator.repo_reference
        if self.config_store.add_repo(repo_ref):
            yield f"Added repository {repo_ref} to configuration."

        yield f"Fetching {locator.file_path}..."
        fetched = self.client.fetch_single_file(url)

        filename = yield from self._write_instruction(fetched.filename, repo_ref, fetched.path, fetched.content)
        result.record('installed', name=fetched.path, filename=filename, source=repo_ref)
        yield f"✓ Installed {filename}"
        return result

    def update(self) -> Generator[str, None, OperationResult]:
        """
        Refresh every tracked instruction from its source.

        Unchanged files are skipped; changed files are overwritten and their
        entry re-added with a new timestamp (moving it to the end of the
        manifest). Failures are recorded and the loop continues.
        """
        result = OperationResult()
        self.last_result = result

        instructions = self.tracker.get_instructions()
        if not instructions:
            yield "No managed instructions found to update."
            return result

        yield f"Updating {len(instructions)} managed instruction(s)..."

        listings: Dict[str, List[RepoFile]] = {}

        for instruction in instructions:
            yield f"Updating {instruction.filename}..."
            try:
                locator = parse_repo_reference(instruction.source_repo)
                token = self.client.resolve_token(locator.host)
                if instruction.source_repo not in listings:
                    listings[instruction.source_repo] = self.client.list_markdown_files(locator)

                source_file = next(
                    (f for f in listings[instruction.source_repo] if f.path == instruction.source_path),
                    None,
                )
                if source_file is None:
                    raise NotFoundError(f"Source file not found: {instruction.source_path}")

                content = ensure_front_matter(self.client.download_content(source_file.download_url, token))
                target = self.tracker.path_for(instruction.filename)
                existing = self._read_file(target) if target.exists() else ''

                if content == existing:
                    result.record('skipped', name=instruction.filename, reason='up to date')
                    yield f"  {instruction.filename} is already up to date"
                    continue

                self._write_file(target, content)
                self.tracker.add(instruction.with_timestamp(self.clock()))

            except (InstructionHubError, OSError) as e:
                logger.debug(f"Update of {instruction.filename} failed: {e}")
                result.record('error', name=instruction.filename, error=str(e))
                yield f"✗ Failed to update {instruction.filename}: {e}"
                continue

            result.record('updated', name=instruction.filename, source=instruction.source_repo)
            yield f"✓ Updated {instruction.filename}"

        return result

    def uninstall(self, instructions: List[ManagedInstruction]) -> Generator[str, None, OperationResult]:
        """
        Remove installed files and stop tracking them.

        A file already missing from disk is not an error; its entry is
        removed all the same.
        """
        result = OperationResult()
        self.last_result = result

        if not instructions:
            yield "No instructions selected."
            return result

        for instruction in instructions:
            path = self.tracker.path_for(instruction.filename)
            try:
                if path.exists():
                    path.unlink()
                self.tracker.remove(instruction.filename)
            except (InstructionHubError, OSError) as e:
                result.record('error', name=instruction.filename, error=str(e))
                yield f"✗ Failed to uninstall {instruction.filename}: {e}"
                continue

            result.record('uninstalled', name=instruction.filename)
            yield f"✓ Uninstalled {instruction.filename}"

        return result
