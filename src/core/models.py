"""
Data models for the todo service.
"""

import time
from typing import Optional, List, Dict
from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TodoItem:
    """Represents a single todo record."""

    def __init__(self, text: str, completed: bool = False,
                 created_at: Optional[str] = None, id: Optional[int] = None):
        """Initialize a todo item."""
        self.id = id
        self.text = text
        self.completed = completed
        self.created_at = created_at or utc_timestamp()

    def toggle(self) -> None:
        self.completed = not self.completed

    def to_dict(self) -> Dict:
        """Convert todo item to its JSON shape."""
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'TodoItem':
        """Create todo item from its JSON shape.

        Raises:
            KeyError: a required field is missing.
            TypeError: a field has the wrong JSON type.
            ValueError: the text is blank.
        """
        todo_id = data["id"]
        text = data["text"]
        completed = data.get("completed", False)
        created_at = data["createdAt"]
        # bool is an int subclass, reject it explicitly
        if isinstance(todo_id, bool) or not isinstance(todo_id, int):
            raise TypeError(f"Todo id must be an integer, got {todo_id!r}")
        if not isinstance(text, str):
            raise TypeError(f"Todo {todo_id} text must be a string")
        if not text.strip():
            raise ValueError(f"Todo {todo_id} has blank text")
        if not isinstance(completed, bool):
            raise TypeError(f"Todo {todo_id} completed must be a boolean, got {completed!r}")
        if not isinstance(created_at, str):
            raise TypeError(f"Todo {todo_id} createdAt must be a string")
        return cls(id=todo_id, text=text, completed=completed, created_at=created_at)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TodoItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"TodoItem(id={self.id!r}, text={self.text!r}, completed={self.completed!r})"


def find_todo(todos: List[TodoItem], todo_id: int) -> Optional[TodoItem]:
    """Return the todo with the given id, or None."""
    return next((t for t in todos if t.id == todo_id), None)


def next_id(todos: List[TodoItem], floor: int = 0) -> int:
    """Pick an id for a new todo.

    Ids come from the millisecond clock, floored at one above both the
    current maximum and `floor` (the highest id already handed out), so they
    stay unique and increasing even when todos are created within the same
    millisecond or the newest one was deleted.
    """
    highest = max([floor] + [t.id for t in todos])
    return max(highest + 1, int(time.time() * 1000))
