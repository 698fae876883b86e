"""
Instruction domain objects for instruction-hub.

- RepoFile: a Markdown file found in a source repository (transient)
- ManagedInstruction: a file this tool installed and tracks
- Filename and front-matter rules applied to every installed file
"""

import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Dict

INSTRUCTION_SUFFIX = ".instructions.md"

DEFAULT_FRONT_MATTER = '---\napplyTo: "**"\n---\n\n'

# A `---` line at the very start, then anything up to a closing `---` line
FRONT_MATTER_PATTERN = re.compile(r'\A---[ \t]*\r?\n(?:.*?\r?\n)?---[ \t]*(?:\r?\n|\Z)', re.DOTALL)


@dataclass(frozen=True)
class RepoFile:
    """A Markdown file listed from a repository."""
    name: str
    path: str
    download_url: str

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'RepoFile':
        """Create from a contents API entry."""
        return cls(
            name=data.get('name', ''),
            path=data.get('path', ''),
            download_url=data.get('download_url') or '',
        )


@dataclass(frozen=True)
class ManagedInstruction:
    """
    Metadata for an installed instruction file.

    Keyed by `filename` within the installation manifest.

    Attributes:
        filename: Name of the installed file inside the instructions directory
        source_repo: Repository reference the file was installed from
        source_path: Path of the file inside the source repository
        installed_at: ISO-8601 UTC timestamp of the last install/update
    """
    filename: str
    source_repo: str
    source_path: str
    installed_at: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ManagedInstruction':
        return cls(
            filename=str(data.get('filename', '')),
            source_repo=str(data.get('sourceRepo', '')),
            source_path=str(data.get('sourcePath', '')),
            installed_at=str(data.get('installedAt', '')),
        )

    def to_dict(self) -> Dict[str, str]:
        """Manifest representation (camelCase keys)."""
        return {
            'filename': self.filename,
            'sourceRepo': self.source_repo,
            'sourcePath': self.source_path,
            'installedAt': self.installed_at,
        }

    def with_timestamp(self, installed_at: str) -> 'ManagedInstruction':
        return replace(self, installed_at=installed_at)

    @property
    def installed_datetime(self) -> datetime:
        """Install time as an aware datetime."""
        value = self.installed_at
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        return datetime.fromisoformat(value)


def installed_filename(source_name: str) -> str:
    """
    Name an installed file is written under.

    Names already ending in `.instructions.md` are kept; otherwise a
    trailing `.md` is dropped and the suffix appended:
        guide.md               -> guide.instructions.md
        go.instructions.md     -> go.instructions.md
    """
    filename = PurePosixPath(source_name).name
    if filename.endswith(INSTRUCTION_SUFFIX):
        return filename
    if filename.endswith('.md'):
        filename = filename[:-len('.md')]
    return f"{filename}{INSTRUCTION_SUFFIX}"


def disambiguated_filename(filename: str, repo_name: str) -> str:
    """
    Insert the source repository name before the suffix.

        guide.instructions.md, repoB -> guide.repoB.instructions.md
    """
    stem = filename[:-len(INSTRUCTION_SUFFIX)] if filename.endswith(INSTRUCTION_SUFFIX) else filename
    return f"{stem}.{repo_name}{INSTRUCTION_SUFFIX}"


def has_front_matter(text: str) -> bool:
    """True if the text starts with a `---`-delimited block."""
    return FRONT_MATTER_PATTERN.match(text) is not None


def ensure_front_matter(text: str) -> str:
    """Prefix the default front matter unless the text already has one."""
    if has_front_matter(text):
        return text
    return DEFAULT_FRONT_MATTER + text


def utc_timestamp() -> str:
    """Current time as e.g. 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')
