"""
Installation tracker for instruction-hub.

Records every file the tool installed in
`<project>/.github/instructions/.instruction-hub.json`. Nothing keeps the
manifest and the directory in sync: a tracked file may have been deleted
by hand and an untracked file may sit next to tracked ones.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import get_instructions_dir, get_manifest_path
from ..domain.instruction import ManagedInstruction
from ..infra.file_store import JsonDocumentStore

logger = logging.getLogger(__name__)


def _empty_manifest() -> Dict[str, Any]:
    return {"instructions": []}


def _entries(manifest: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Well-formed entries of a manifest document."""
    entries = manifest.get('instructions')
    if not isinstance(entries, list):
        return []
    return [e for e in entries if isinstance(e, dict)]


class InstallationTracker:
    """
    Manifest of managed instructions for one project directory.

    Entries are keyed by filename; adding an entry whose filename is
    already tracked replaces it (the new entry goes to the end).
    """

    def __init__(self, project_dir: Optional[Path] = None):
        """
        Initialize InstallationTracker.

        Args:
            project_dir: Project root (defaults to the current directory)
        """
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.instructions_dir = get_instructions_dir(self.project_dir)
        self._store = JsonDocumentStore(get_manifest_path(self.project_dir), _empty_manifest())

    @property
    def manifest_path(self) -> Path:
        return self._store.path

    def ensure_instructions_dir(self) -> Path:
        self.instructions_dir.mkdir(parents=True, exist_ok=True)
        return self.instructions_dir

    def path_for(self, filename: str) -> Path:
        """Location of an installed file."""
        return self.instructions_dir / filename

    def load(self) -> List[ManagedInstruction]:
        return [ManagedInstruction.from_dict(e) for e in _entries(self._store.read())]

    def get_instructions(self) -> List[ManagedInstruction]:
        return self.load()

    def get(self, filename: str) -> Optional[ManagedInstruction]:
        for instruction in self.load():
            if instruction.filename == filename:
                return instruction
        return None

    def is_managed(self, filename: str) -> bool:
        return self.get(filename) is not None

    def add(self, instruction: ManagedInstruction) -> None:
        """
        Track an instruction, replacing any entry with the same filename.

        Raises:
            LocalIOError: if the manifest cannot be written
        """
        def upsert(manifest):
            entries = [e for e in _entries(manifest) if e.get('filename') != instruction.filename]
            entries.append(instruction.to_dict())
            manifest['instructions'] = entries

        self._store.update(upsert)
        logger.debug(f"Tracking {instruction.filename} from {instruction.source_repo}")

    def remove(self, filename: str) -> bool:
        """
        Stop tracking a filename.

        Returns:
            True if an entry was removed

        Raises:
            LocalIOError: if the manifest cannot be written
        """
        if not self.is_managed(filename):
            return False

        def drop(manifest):
            manifest['instructions'] = [e for e in _entries(manifest) if e.get('filename') != filename]

        self._store.update(drop)
        return True
