"""
Exceptions raised by the todo store and commands.
Each carries the HTTP status the API layer answers with.
"""

TEXT_REQUIRED = "Todo text is required"
TODO_NOT_FOUND = "Todo not found"


class TodoError(Exception):
    """Base class for todo service errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TodoError):
    """Client supplied missing or unusable input."""

    status_code = 400

    def __init__(self, message: str = TEXT_REQUIRED):
        super().__init__(message)


class NotFoundError(TodoError):
    """No todo exists with the requested id."""

    status_code = 404

    def __init__(self, message: str = TODO_NOT_FOUND):
        super().__init__(message)


class StorageError(TodoError):
    """The backing file could not be read or written."""

    status_code = 500
