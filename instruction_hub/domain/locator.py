"""
Repository and file locators for instruction-hub.

A repository reference is whatever the user typed: `owner/repo`,
`owner/repo/sub/dir`, a github.com URL (optionally with `/tree/<branch>/`),
or a GitHub Enterprise URL. References are never canonicalized or stored
in parsed form; they are re-parsed on every use.
"""

from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import SplitResult, quote, unquote, urlsplit

from ..errors import MalformedReferenceError

PUBLIC_HOST = "github.com"
PUBLIC_API_BASE = "https://api.github.com"
ENTERPRISE_API_PATH = "/api/v3"


def api_base_for(scheme: str, host: str, port: Optional[int] = None) -> str:
    """
    API root for a host.

    github.com uses the public API; anything else is treated as a
    GitHub Enterprise server exposing the v3 API under /api/v3.
    """
    if host == PUBLIC_HOST:
        return PUBLIC_API_BASE
    if ':' in host:
        host = f"[{host}]"
    if port is not None:
        host = f"{host}:{port}"
    return f"{scheme}://{host}{ENTERPRISE_API_PATH}"


def _url_api_base(parts: SplitResult) -> str:
    """
    API root for a parsed URL.

    Built from hostname and port only, so userinfo never reaches a
    stored reference.

    Raises:
        ValueError: if the port is not a number
    """
    return api_base_for(parts.scheme, parts.hostname, parts.port)


@dataclass(frozen=True)
class RepoLocator:
    """
    Normalized repository location.

    Attributes:
        owner: Repository owner (user or organization)
        repo: Repository name
        path: Sub-directory to list, or None for the repository root
        api_base_url: API root (public or Enterprise)
        host: Hostname used for credential lookup
    """
    owner: str
    repo: str
    path: Optional[str] = None
    api_base_url: str = PUBLIC_API_BASE
    host: str = PUBLIC_HOST

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def api_contents_url(self, path: Optional[str] = None) -> str:
        """
        Contents API URL for `path` (defaults to the locator's own path).

        Paths are stored decoded and percent-encoded here.
        """
        target = quote((self.path if path is None else path) or '', safe='/')
        return f"{self.api_base_url}/repos/{self.owner}/{self.repo}/contents/{target}"

    def with_path(self, path: Optional[str]) -> 'RepoLocator':
        """Same repository, different directory."""
        return replace(self, path=path or None)


@dataclass(frozen=True)
class FileLocator:
    """
    Location of a single file from a `.../blob/<branch>/<path>` URL.

    The branch is recorded but contents lookups target the default branch.
    """
    owner: str
    repo: str
    file_path: str
    branch: str
    api_base_url: str = PUBLIC_API_BASE
    host: str = PUBLIC_HOST

    @property
    def repo_reference(self) -> str:
        """
        Repository reference to store in the configuration.

        Enterprise references keep their host so later listings still
        target the Enterprise API.
        """
        if self.host == PUBLIC_HOST:
            return f"{self.owner}/{self.repo}"
        web_base = self.api_base_url[:-len(ENTERPRISE_API_PATH)]
        return f"{web_base}/{self.owner}/{self.repo}"

    def repo_locator(self) -> RepoLocator:
        return RepoLocator(
            owner=self.owner,
            repo=self.repo,
            path=None,
            api_base_url=self.api_base_url,
            host=self.host,
        )

    def api_contents_url(self) -> str:
        return self.repo_locator().api_contents_url(self.file_path)


def _strip_tree_segment(path: str) -> str:
    """Drop `/tree/<branch>` from a path, keeping whatever follows the branch."""
    if '/tree/' not in path:
        return path

    before_tree, after_tree = path.split('/tree/', 1)
    after_branch = '/'.join(after_tree.split('/')[1:])
    return f"{before_tree}/{after_branch}" if after_branch else before_tree


def parse_repo_reference(reference: str) -> RepoLocator:
    """
    Parse a repository reference into a RepoLocator.

    Handles formats like:
        owner/repo
        owner/repo/path/to/folder
        https://github.com/owner/repo
        https://github.com/owner/repo/tree/main/path
        https://ghe.company.com/owner/repo

    Owner and repository names are not validated; a nonsensical reference
    surfaces later as a "repository not found" error.

    Raises:
        MalformedReferenceError: if the reference is empty or has a bad port
    """
    cleaned = reference.strip()
    api_base_url = PUBLIC_API_BASE
    host = PUBLIC_HOST

    if '://' in cleaned:
        parts = urlsplit(cleaned)
        hostname = parts.hostname or ''
        if hostname and hostname != PUBLIC_HOST:
            # GitHub Enterprise
            host = hostname
            try:
                api_base_url = _url_api_base(parts)
            except ValueError as e:
                raise MalformedReferenceError(f"Invalid repository reference: {reference!r}") from e
        cleaned = unquote(parts.path.lstrip('/'))

    cleaned = _strip_tree_segment(cleaned)

    segments = [s for s in cleaned.split('/') if s]
    if not segments:
        raise MalformedReferenceError(f"Invalid repository reference: {reference!r}")

    owner = segments[0]
    repo = segments[1] if len(segments) > 1 else ''
    path_parts = segments[2:]

    return RepoLocator(
        owner=owner,
        repo=repo,
        path='/'.join(path_parts) if path_parts else None,
        api_base_url=api_base_url,
        host=host,
    )


def parse_file_reference(url: str) -> Optional[FileLocator]:
    """
    Parse a GitHub file URL.

    Supports formats like:
        https://github.com/owner/repo/blob/main/path/to/file.md
        https://ghe.company.com/owner/repo/blob/main/README.md

    The file path and branch are percent-decoded, matching the paths the
    contents API reports.

    Returns:
        FileLocator, or None if the URL is not a blob URL
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None

    if not parts.scheme or not parts.hostname:
        return None

    path_parts = [unquote(p) for p in parts.path[1:].split('/')]

    # Need at least: owner, repo, blob, branch, file
    if len(path_parts) < 5 or path_parts[2] != 'blob':
        return None

    if parts.hostname == PUBLIC_HOST:
        host = PUBLIC_HOST
        api_base_url = PUBLIC_API_BASE
    else:
        host = parts.hostname
        try:
            api_base_url = _url_api_base(parts)
        except ValueError:
            return None

    return FileLocator(
        owner=path_parts[0],
        repo=path_parts[1],
        file_path='/'.join(path_parts[4:]),
        branch=path_parts[3],
        api_base_url=api_base_url,
        host=host,
    )
