"""
Infrastructure layer for instruction-hub.

Contains abstractions for external systems:
- GitHubContentsClient: GitHub contents API access
- Credential providers: gh CLI / environment / fixed tokens
- JsonDocumentStore: JSON file persistence

These provide clean interfaces that can be mocked for testing.
"""

from .credentials import (
    CredentialProvider,
    GhCliCredentialProvider,
    EnvCredentialProvider,
    StaticCredentialProvider,
    ChainCredentialProvider,
    default_credential_provider,
)
from .file_store import JsonDocumentStore
from .github_client import GitHubContentsClient, SingleFile

__all__ = [
    'CredentialProvider',
    'GhCliCredentialProvider',
    'EnvCredentialProvider',
    'StaticCredentialProvider',
    'ChainCredentialProvider',
    'default_credential_provider',
    'JsonDocumentStore',
    'GitHubContentsClient',
    'SingleFile',
]
