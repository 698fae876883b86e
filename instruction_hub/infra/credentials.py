"""
Credential providers for instruction-hub.

A credential provider answers one question: which bearer token (if any)
should be sent to a given GitHub host. Lookups are best-effort; a missing
token is never an error and requests are then sent unauthenticated.
"""

import os
import subprocess
import logging
from typing import Dict, Optional, Union

from ..domain.locator import PUBLIC_HOST

logger = logging.getLogger(__name__)


def _normalize_host(host: Optional[str]) -> str:
    return host if host and host != PUBLIC_HOST else PUBLIC_HOST


class CredentialProvider:
    """Base class: resolve(host) -> token or None."""

    def resolve(self, host: Optional[str] = None) -> Optional[str]:
        raise NotImplementedError


class GhCliCredentialProvider(CredentialProvider):
    """
    Tokens from the GitHub CLI (`gh auth token --hostname <host>`).

    Any failure (gh not installed, not logged in, timeout) yields None.
    Results are cached per host.
    """

    def __init__(self, executable: str = 'gh', timeout: int = 10):
        self.executable = executable
        self.timeout = timeout
        self._cache: Dict[str, Optional[str]] = {}

    def resolve(self, host: Optional[str] = None) -> Optional[str]:
        host = _normalize_host(host)
        if host not in self._cache:
            self._cache[host] = self._run_gh(host)
        return self._cache[host]

    def _run_gh(self, host: str) -> Optional[str]:
        try:
            result = subprocess.run(
                [self.executable, 'auth', 'token', '--hostname', host],
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.debug(f"gh auth token failed for {host}: {e}")
            return None

        if result.returncode != 0:
            logger.debug(f"gh auth token exited {result.returncode} for {host}")
            return None

        token = result.stdout.strip()
        return token or None


class EnvCredentialProvider(CredentialProvider):
    """
    Tokens from environment variables.

    github.com: INSTRUCTION_HUB_GITHUB_TOKEN, then GITHUB_TOKEN.
    Enterprise hosts: GH_ENTERPRISE_TOKEN.
    """

    PUBLIC_VARS = ('INSTRUCTION_HUB_GITHUB_TOKEN', 'GITHUB_TOKEN')
    ENTERPRISE_VARS = ('GH_ENTERPRISE_TOKEN',)

    def resolve(self, host: Optional[str] = None) -> Optional[str]:
        names = self.PUBLIC_VARS if _normalize_host(host) == PUBLIC_HOST else self.ENTERPRISE_VARS
        for name in names:
            value = os.environ.get(name, '').strip()
            if value:
                return value
        return None


class StaticCredentialProvider(CredentialProvider):
    """
    Fixed tokens.

    Example:
        StaticCredentialProvider("tok")                      # every host
        StaticCredentialProvider({"ghe.corp.com": "tok"})    # per host
    """

    def __init__(self, tokens: Union[None, str, Dict[str, str]] = None):
        self.tokens = tokens

    def resolve(self, host: Optional[str] = None) -> Optional[str]:
        if self.tokens is None or isinstance(self.tokens, str):
            return self.tokens
        return self.tokens.get(_normalize_host(host))


class ChainCredentialProvider(CredentialProvider):
    """First provider returning a token wins."""

    def __init__(self, *providers: CredentialProvider):
        self.providers = providers

    def resolve(self, host: Optional[str] = None) -> Optional[str]:
        for provider in self.providers:
            token = provider.resolve(host)
            if token:
                return token
        return None


def default_credential_provider() -> CredentialProvider:
    """GitHub CLI first, then environment variables."""
    return ChainCredentialProvider(GhCliCredentialProvider(), EnvCredentialProvider())
