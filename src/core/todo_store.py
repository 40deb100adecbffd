"""
Persistence for the todo collection.
The collection is stored as one JSON array and is loaded fresh for every
operation; nothing is cached between calls.
"""

import os
import json
import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from typing import List, Optional

from core.errors import StorageError
from core.models import TodoItem

logger = logging.getLogger(__name__)

# mkstemp creates files readable by the owner only
NEW_FILE_MODE = 0o644


class TodoStore(ABC):
    """Load/save pair shared by every todo operation."""

    @abstractmethod
    def load(self) -> List[TodoItem]:
        """Return the full collection in stored order."""

    @abstractmethod
    def save(self, todos: List[TodoItem]) -> None:
        """Replace the stored collection with `todos`."""


class JsonFileStore(TodoStore):
    """Stores the collection in a single human-readable JSON file."""

    def __init__(self, path: str):
        """Initialize the store.

        Args:
            path: Location of the backing file. It does not need to exist yet.
        """
        self.path = path

    def load(self) -> List[TodoItem]:
        """Read the backing file.

        A missing or empty file is an empty collection. Anything that is not a
        JSON array of todo objects raises StorageError.
        """
        if not os.path.exists(self.path):
            logger.debug(f"No todo file at {self.path}, starting empty")
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            logger.error(f"Error reading todo file {self.path}: {str(e)}")
            raise StorageError(f"Could not read {self.path}: {e}") from e

        if not content.strip():
            return []

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Malformed todo file {self.path}: {str(e)}")
            raise StorageError(f"Malformed todo file {self.path}: {e}") from e

        if not isinstance(data, list):
            logger.error(f"Todo file {self.path} does not hold a JSON array")
            raise StorageError(f"Todo file {self.path} does not hold a JSON array")

        try:
            todos = [TodoItem.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid todo record in {self.path}: {str(e)}")
            raise StorageError(f"Invalid todo record in {self.path}: {e}") from e

        logger.debug(f"Loaded {len(todos)} todos from {self.path}")
        return todos

    def save(self, todos: List[TodoItem]) -> None:
        """Overwrite the backing file with the full collection."""
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".todos-", suffix=".tmp")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump([t.to_dict() for t in todos], f, indent=2, ensure_ascii=False)
                    f.write("\n")
                if os.path.exists(self.path):
                    shutil.copymode(self.path, tmp_path)
                else:
                    os.chmod(tmp_path, NEW_FILE_MODE)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            logger.error(f"Error writing todo file {self.path}: {str(e)}")
            raise StorageError(f"Could not write {self.path}: {e}") from e

        logger.debug(f"Saved {len(todos)} todos to {self.path}")


class InMemoryTodoStore(TodoStore):
    """Keeps the collection as plain dicts in memory. Useful for tests."""

    def __init__(self, todos: Optional[List[TodoItem]] = None):
        self._records = [t.to_dict() for t in todos or []]

    def load(self) -> List[TodoItem]:
        # fresh objects each time, like reading the file again
        return [TodoItem.from_dict(record) for record in self._records]

    def save(self, todos: List[TodoItem]) -> None:
        self._records = [t.to_dict() for t in todos]
