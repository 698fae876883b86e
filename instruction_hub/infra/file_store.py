"""
File store infrastructure for instruction-hub.

Provides JSON document persistence with:
- Atomic writes (write to temp, then rename)
- Pretty formatting for human readability
- Automatic parent directory creation
- Malformed or missing documents read as a default value
"""

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional
import logging

from ..errors import LocalIOError

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """
    Whole-document JSON persistence with atomic writes.

    There is no file locking: concurrent read-modify-write cycles from
    separate processes can lose updates.

    Example:
        store = JsonDocumentStore(Path("~/.instruction-hub/config.json"), {"repos": []})
        store.update(lambda doc: doc["repos"].append("octo/docs"))
        repos = store.read()["repos"]
    """

    def __init__(self, path: Path, default: Optional[Dict[str, Any]] = None):
        """
        Initialize JsonDocumentStore.

        Args:
            path: Path to JSON file
            default: Document returned when the file is missing or unreadable
        """
        self.path = Path(path).expanduser()
        self._default = default if default is not None else {}

    def _ensure_parent(self) -> None:
        """Create parent directories if needed."""
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """Write data atomically using temp file and rename."""
        # Write to temp file in same directory
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write('\n')  # Trailing newline

            # Atomic rename
            os.replace(temp_path, self.path)

        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def default(self) -> Dict[str, Any]:
        """Fresh copy of the default document."""
        return copy.deepcopy(self._default)

    def read(self) -> Dict[str, Any]:
        """
        Read the whole document.

        Returns:
            Stored document, or a copy of the default when the file is
            missing, unreadable or not a JSON object
        """
        if not self.path.exists():
            return self.default()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.debug(f"Treating unreadable {self.path} as empty: {e}")
            return self.default()

        if not isinstance(data, dict):
            logger.debug(f"Treating non-object document {self.path} as empty")
            return self.default()
        return data

    def write(self, data: Dict[str, Any]) -> None:
        """
        Write the whole document.

        Args:
            data: Dictionary to write

        Raises:
            LocalIOError: if the directory or file cannot be written
        """
        try:
            self._ensure_parent()
            self._write_atomic(data)
        except OSError as e:
            raise LocalIOError(f"Could not write {self.path}: {e}") from e

    def update(self, mutate: Callable[[Dict[str, Any]], Any]) -> Dict[str, Any]:
        """
        Read, mutate in place and write back.

        Args:
            mutate: Callable receiving the loaded document

        Returns:
            The document as written
        """
        data = self.read()
        mutate(data)
        self.write(data)
        return data
