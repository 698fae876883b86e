"""
GitHub contents API client for instruction-hub.

Provides the three network operations the tool needs:
- List Markdown files in a repository (or sub-directory), depth-first
- Download raw file content from a `download_url`
- Fetch a single file from a `.../blob/<branch>/<path>` URL

Works against github.com and GitHub Enterprise (`/api/v3`). Tokens come
from a pluggable credential provider; without one, requests are sent
unauthenticated. There is no retry and no pagination.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

import requests

from ..config import get_http_timeout
from ..domain.instruction import RepoFile
from ..domain.locator import FileLocator, RepoLocator, PUBLIC_HOST, parse_file_reference
from ..errors import (
    AuthenticationError,
    ForbiddenError,
    MalformedReferenceError,
    NotAFileError,
    NotFoundError,
    TransportError,
)
from .credentials import CredentialProvider, default_credential_provider

logger = logging.getLogger(__name__)

USER_AGENT = 'instruction-hub'

FILE_URL_FORMAT = 'https://github.com/owner/repo/blob/branch/path/to/file.md'

NOT_FOUND_UNAUTHENTICATED = {
    'Repository': 'Repository not found or private',
    'File': 'File not found or repository is private',
}


@dataclass
class SingleFile:
    """Content and metadata of a file fetched by URL."""
    content: str
    filename: str
    path: str
    locator: FileLocator


def _login_hint(host: str) -> str:
    if host != PUBLIC_HOST:
        return f"gh auth login --hostname {host}"
    return "gh auth login"


class GitHubContentsClient:
    """
    Client for the GitHub contents API.

    Example:
        client = GitHubContentsClient()
        locator = parse_repo_reference("octo/docs")
        for f in client.list_markdown_files(locator):
            print(f.path)
    """

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHubContentsClient.

        Args:
            credentials: Token source (defaults to gh CLI, then environment)
            timeout: HTTP request timeout in seconds
            session: requests session to use (a new one by default)
        """
        self.credentials = credentials or default_credential_provider()
        self.timeout = timeout if timeout is not None else get_http_timeout()
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': USER_AGENT,
        })

    def resolve_token(self, host: Optional[str] = None) -> Optional[str]:
        """Token for a host, or None to go unauthenticated."""
        return self.credentials.resolve(host)

    def _headers(self, token: Optional[str], api: bool = True) -> dict:
        headers = {}
        if api:
            headers['Accept'] = 'application/vnd.github.v3+json'
        if token:
            headers['Authorization'] = f'Bearer {token}'
        return headers

    def _get_json(
        self,
        url: str,
        token: Optional[str],
        host: str,
        not_found: str,
        subject: str,
    ) -> Any:
        """
        GET a contents API URL and decode JSON, translating failures.

        Args:
            url: API URL
            token: Bearer token or None
            host: Host the request targets (for login hints)
            not_found: Message for a 404 when a token was sent
            subject: "Repository" or "File", used in error messages
        """
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, headers=self._headers(token), timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Failed to fetch from GitHub: {e}") from e

        status = response.status_code
        if status == 404:
            if not token:
                raise NotFoundError(
                    f"{NOT_FOUND_UNAUTHENTICATED[subject]}. "
                    f"Please authenticate with GitHub CLI: {_login_hint(host)}"
                )
            raise NotFoundError(not_found)
        if status == 401:
            raise AuthenticationError(
                "Authentication failed. Please check your GitHub CLI authentication: gh auth status"
            )
        if status == 403:
            raise ForbiddenError(
                f"Access forbidden. You may not have permission to access this {subject.lower()}."
            )
        if status >= 400:
            raise TransportError(f"Failed to fetch from GitHub: HTTP {status} for {url}")

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Failed to fetch from GitHub: invalid JSON from {url}") from e

    def _list_directory(self, locator: RepoLocator, token: Optional[str], path: Optional[str]) -> List[dict]:
        data = self._get_json(
            locator.api_contents_url(path),
            token,
            locator.host,
            not_found=f"Repository not found: {locator.full_name}",
            subject='Repository',
        )
        # A path pointing at a file returns a single object
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise TransportError(f"Failed to fetch from GitHub: unexpected contents response for {locator.full_name}")
        return data

    def list_markdown_files(self, locator: RepoLocator) -> List[RepoFile]:
        """
        List Markdown files under the locator's path, recursively.

        Directories are expanded in place, so the result has the same
        order as a recursive depth-first walk of the API responses.

        Args:
            locator: Repository (and optional sub-directory) to list

        Returns:
            RepoFile for every `.md` file found

        Raises:
            NotFoundError, AuthenticationError, ForbiddenError, TransportError
        """
        token = self.resolve_token(locator.host)

        files: List[RepoFile] = []
        pending: List[Iterator[dict]] = [iter(self._list_directory(locator, token, locator.path))]

        while pending:
            item = next(pending[-1], None)
            if item is None:
                pending.pop()
                continue

            item_type = item.get('type')
            name = item.get('name', '')
            if item_type == 'file' and name.endswith('.md'):
                files.append(RepoFile.from_api_response(item))
            elif item_type == 'dir' and item.get('path'):
                pending.append(iter(self._list_directory(locator, token, item['path'])))

        logger.debug(f"Found {len(files)} markdown files in {locator.full_name}")
        return files

    def download_content(self, url: str, token: Optional[str] = None) -> str:
        """
        Download raw file content.

        Args:
            url: A `download_url` from the contents API
            token: Optional bearer token

        Returns:
            Response body as text

        Raises:
            TransportError: on any failure
        """
        logger.debug(f"Downloading {url}")
        try:
            response = self.session.get(url, headers=self._headers(token, api=False), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"Failed to download file: {e}") from e
        return response.text

    def fetch_single_file(self, file_url: str) -> SingleFile:
        """
        Fetch one file given its GitHub blob URL.

        Raises:
            MalformedReferenceError: if the URL is not a blob URL
            NotAFileError: if the URL resolves to a directory
            NotFoundError, AuthenticationError, ForbiddenError, TransportError
        """
        locator = parse_file_reference(file_url)
        if locator is None:
            raise MalformedReferenceError(
                f"Invalid GitHub file URL. Expected format: {FILE_URL_FORMAT}"
            )

        token = self.resolve_token(locator.host)
        data = self._get_json(
            locator.api_contents_url(),
            token,
            locator.host,
            not_found=f"File not found: {locator.file_path}",
            subject='File',
        )

        if not isinstance(data, dict) or data.get('type') != 'file':
            raise NotAFileError("URL does not point to a file")

        content = self.download_content(data.get('download_url') or '', token)
        return SingleFile(
            content=content,
            filename=data.get('name') or locator.file_path.rsplit('/', 1)[-1],
            path=locator.file_path,
            locator=locator,
        )
