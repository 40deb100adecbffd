"""
Todo command handlers.
This module contains the implementation of the todo operations. Every command
loads the collection from the store, works on it, and saves it back when it
changed.
"""

from typing import Any, List, Optional
from core.models import TodoItem, find_todo, next_id
from core.todo_store import TodoStore
from core.errors import ValidationError, NotFoundError
import logging

logger = logging.getLogger(__name__)


def clean_text(text: Any) -> str:
    """Trim todo text, rejecting anything that is not a non-blank string."""
    if not isinstance(text, str) or not text.strip():
        raise ValidationError()
    return text.strip()


class TodoCommands:
    def __init__(self, store: TodoStore):
        self.store = store
        # highest id handed out by this process, so a deleted id is never issued again
        self.last_issued_id = 0

    def list_todos(self) -> List[TodoItem]:
        """Return every todo in stored order."""
        return self.store.load()

    def create_todo(self, text: Optional[str]) -> TodoItem:
        """Append a new incomplete todo and return it."""
        text = clean_text(text)
        todos = self.store.load()
        todo = TodoItem(id=next_id(todos, self.last_issued_id), text=text)
        self.last_issued_id = todo.id
        todos.append(todo)
        self.store.save(todos)
        logger.info(f"Created todo {todo.id}")
        return todo

    def toggle_todo(self, todo_id: int) -> TodoItem:
        """Flip the completed flag of a todo."""
        todos = self.store.load()
        todo = find_todo(todos, todo_id)
        if todo is None:
            raise NotFoundError()
        todo.toggle()
        self.store.save(todos)
        logger.info(f"Todo {todo_id} marked as {'completed' if todo.completed else 'not completed'}")
        return todo

    def update_text(self, todo_id: int, text: Optional[str]) -> TodoItem:
        """Replace the text of a todo, keeping its other fields."""
        text = clean_text(text)
        todos = self.store.load()
        todo = find_todo(todos, todo_id)
        if todo is None:
            raise NotFoundError()
        todo.text = text
        self.store.save(todos)
        logger.info(f"Updated text of todo {todo_id}")
        return todo

    def delete_todo(self, todo_id: int) -> None:
        """Delete a todo item."""
        todos = self.store.load()
        todo = find_todo(todos, todo_id)
        if todo is None:
            raise NotFoundError()
        todos.remove(todo)
        self.store.save(todos)
        logger.info(f"Deleted todo {todo_id}")

    def search_todos(self, query: Optional[str]) -> List[TodoItem]:
        """Search todos by text, case-insensitively."""
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        needle = query.strip().lower()
        return [t for t in self.store.load() if needle in t.text.lower()]

    def clear_todos(self, completed_only: bool = False) -> int:
        """Clear todos from the store.

        Args:
            completed_only: If True, only clear completed todos. If False, clear all todos.

        Returns:
            Number of todos that were cleared.
        """
        todos = self.store.load()
        if completed_only:
            remaining = [t for t in todos if not t.completed]
        else:
            remaining = []
        deleted_count = len(todos) - len(remaining)
        if deleted_count:
            self.store.save(remaining)
        logger.info(f"Cleared {deleted_count} todos")
        return deleted_count
