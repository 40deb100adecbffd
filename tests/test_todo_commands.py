import unittest
from unittest.mock import patch

from core.errors import ValidationError, NotFoundError, TEXT_REQUIRED, TODO_NOT_FOUND
from core.models import TodoItem, next_id
from core.todo_commands import TodoCommands, clean_text
from core.todo_store import InMemoryTodoStore


class TestTodoCommands(unittest.TestCase):
    """Test cases for TodoCommands class."""

    def setUp(self):
        """Set up test environment."""
        self.store = InMemoryTodoStore()
        self.todo_commands = TodoCommands(self.store)

    def test_create_todo(self):
        """Test adding a todo item."""
        todo = self.todo_commands.create_todo("  Test todo  ")

        self.assertEqual(todo.text, "Test todo")
        self.assertFalse(todo.completed)
        self.assertIsNotNone(todo.id)
        self.assertTrue(todo.created_at)

        todos = self.todo_commands.list_todos()
        self.assertEqual(todos, [todo])

    def test_create_rejects_missing_or_blank_text(self):
        for text in (None, "", "   ", 42):
            with self.assertRaises(ValidationError) as ctx:
                self.todo_commands.create_todo(text)
            self.assertEqual(ctx.exception.message, TEXT_REQUIRED)
        self.assertEqual(self.todo_commands.list_todos(), [])

    def test_create_appends_in_order_with_unique_ids(self):
        first = self.todo_commands.create_todo("first")
        second = self.todo_commands.create_todo("second")
        third = self.todo_commands.create_todo("third")

        self.assertLess(first.id, second.id)
        self.assertLess(second.id, third.id)
        self.assertEqual([t.text for t in self.todo_commands.list_todos()], ["first", "second", "third"])

    def test_toggle_todo(self):
        """Test completing and uncompleting a todo item."""
        todo = self.todo_commands.create_todo("Test todo")

        self.assertTrue(self.todo_commands.toggle_todo(todo.id).completed)
        self.assertTrue(self.todo_commands.list_todos()[0].completed)

        self.assertFalse(self.todo_commands.toggle_todo(todo.id).completed)
        self.assertFalse(self.todo_commands.list_todos()[0].completed)

    def test_toggle_missing_todo(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.todo_commands.toggle_todo(999999)
        self.assertEqual(ctx.exception.message, TODO_NOT_FOUND)

    def test_update_text(self):
        todo = self.todo_commands.create_todo("Old text")
        self.todo_commands.toggle_todo(todo.id)

        updated = self.todo_commands.update_text(todo.id, "  New text ")

        self.assertEqual(updated.text, "New text")
        self.assertTrue(updated.completed)
        self.assertEqual(updated.created_at, todo.created_at)
        self.assertEqual(self.todo_commands.list_todos()[0].text, "New text")

    def test_update_text_validates_before_lookup(self):
        with self.assertRaises(ValidationError):
            self.todo_commands.update_text(999999, "")
        with self.assertRaises(NotFoundError):
            self.todo_commands.update_text(999999, "Does not matter")

    def test_delete_todo(self):
        """Test deleting a todo item keeps the others in order."""
        todos = [self.todo_commands.create_todo(text) for text in ("a", "b", "c")]

        self.todo_commands.delete_todo(todos[1].id)

        self.assertEqual([t.text for t in self.todo_commands.list_todos()], ["a", "c"])
        with self.assertRaises(NotFoundError):
            self.todo_commands.delete_todo(todos[1].id)

    def test_search_todos(self):
        """Test searching todo items."""
        for text in ("Buy groceries and milk", "Do laundry", "Buy MILK"):
            self.todo_commands.create_todo(text)

        results = self.todo_commands.search_todos("milk")
        self.assertEqual([t.text for t in results], ["Buy groceries and milk", "Buy MILK"])

        results = self.todo_commands.search_todos("laundry")
        self.assertEqual(len(results), 1)

        self.assertEqual(self.todo_commands.search_todos("nonexistent"), [])

        with self.assertRaises(ValidationError):
            self.todo_commands.search_todos("  ")

    def test_clear_todos(self):
        done = self.todo_commands.create_todo("done")
        self.todo_commands.create_todo("open")
        self.todo_commands.toggle_todo(done.id)

        self.assertEqual(self.todo_commands.clear_todos(completed_only=True), 1)
        self.assertEqual([t.text for t in self.todo_commands.list_todos()], ["open"])

        self.assertEqual(self.todo_commands.clear_todos(), 1)
        self.assertEqual(self.todo_commands.list_todos(), [])
        self.assertEqual(self.todo_commands.clear_todos(), 0)


class TestIds(unittest.TestCase):

    def test_next_id_follows_clock(self):
        with patch("core.models.time.time", return_value=1700000000.123):
            self.assertEqual(next_id([]), 1700000000123)

    def test_next_id_stays_above_existing(self):
        todos = [TodoItem(id=5, text="a"), TodoItem(id=10 ** 15, text="b")]
        self.assertEqual(next_id(todos), 10 ** 15 + 1)

    def test_deleted_highest_id_is_not_reused(self):
        store = InMemoryTodoStore()
        commands = TodoCommands(store)
        with patch("core.models.time.time", return_value=1000.0):
            first = commands.create_todo("first")
            commands.delete_todo(first.id)
        with patch("core.models.time.time", return_value=1000.5):
            second = commands.create_todo("second")
        self.assertNotEqual(first.id, second.id)

    def test_deleted_newest_id_is_not_reused_within_one_millisecond(self):
        commands = TodoCommands(InMemoryTodoStore())
        with patch("core.models.time.time", return_value=1000.0):
            first = commands.create_todo("a")
            second = commands.create_todo("b")
            commands.delete_todo(second.id)
            third = commands.create_todo("c")

        self.assertEqual(first.id, 1000000)
        self.assertEqual(second.id, 1000001)
        self.assertGreater(third.id, second.id)

    def test_next_id_respects_floor(self):
        with patch("core.models.time.time", return_value=1.0):
            self.assertEqual(next_id([TodoItem(id=3, text="a")], floor=9), 10)


class TestCleanText(unittest.TestCase):

    def test_trims(self):
        self.assertEqual(clean_text("  Spaced  "), "Spaced")

    def test_rejects_non_strings(self):
        for value in (None, 1, ["x"], {"text": "x"}):
            with self.assertRaises(ValidationError):
                clean_text(value)


if __name__ == '__main__':
    unittest.main()
