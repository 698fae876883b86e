"""
Domain layer for instruction-hub.

Contains pure domain objects with no I/O or side effects:
- RepoLocator / FileLocator: parsed repository and file references
- RepoFile: a Markdown file listed from a repository
- ManagedInstruction: an installed, tracked instruction file

These objects are immutable and provide serialization methods
for the manifest and JSONL output.
"""

from .locator import (
    RepoLocator,
    FileLocator,
    parse_repo_reference,
    parse_file_reference,
    PUBLIC_HOST,
    PUBLIC_API_BASE,
)
from .instruction import (
    RepoFile,
    ManagedInstruction,
    INSTRUCTION_SUFFIX,
    DEFAULT_FRONT_MATTER,
    installed_filename,
    disambiguated_filename,
    has_front_matter,
    ensure_front_matter,
    utc_timestamp,
)

__all__ = [
    'RepoLocator',
    'FileLocator',
    'parse_repo_reference',
    'parse_file_reference',
    'PUBLIC_HOST',
    'PUBLIC_API_BASE',
    'RepoFile',
    'ManagedInstruction',
    'INSTRUCTION_SUFFIX',
    'DEFAULT_FRONT_MATTER',
    'installed_filename',
    'disambiguated_filename',
    'has_front_matter',
    'ensure_front_matter',
    'utc_timestamp',
]
