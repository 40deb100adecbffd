"""
FastAPI server implementation for the todo service.
Provides JSON endpoints for listing, creating, toggling, editing and deleting
todos kept in a flat JSON file.
"""

import os
import logging
from typing import List, Optional
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import TodoError, StorageError, TEXT_REQUIRED, TODO_NOT_FOUND
from core.todo_commands import TodoCommands
from core.todo_store import JsonFileStore, TodoStore

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


# Pydantic models for request/response validation
class TodoText(BaseModel):
    text: Optional[str] = None


class TodoResponse(BaseModel):
    id: int
    text: str
    completed: bool
    createdAt: str


class MessageResponse(BaseModel):
    message: str


class ClearResponse(BaseModel):
    deleted: int


def cors_origins() -> List[str]:
    """Allowed CORS origins, from CORS_ORIGINS (comma-separated)."""
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_todo_commands(request: Request) -> TodoCommands:
    return request.app.state.todo_commands


def _error(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
        return _error(exc.status_code, "Todo storage is unavailable")
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _error(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # A path id that is not an integer cannot name any todo.
    if any(err.get("loc", ())[:1] == ("path",) for err in exc.errors()):
        return _error(404, TODO_NOT_FOUND)
    logger.warning(f"Rejected body on {request.method} {request.url.path}: {exc.errors()}")
    return _error(400, TEXT_REQUIRED)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


def create_app(store: Optional[TodoStore] = None) -> FastAPI:
    """Build the API application.

    Args:
        store: Store to serve todos from. Defaults to a JsonFileStore at
            TODOS_FILE (or todos.json).
    """
    if store is None:
        store = JsonFileStore(os.getenv("TODOS_FILE", "todos.json"))

    app = FastAPI(
        title="Todo API",
        description="API for managing todos stored in a JSON file",
        version="1.0.0"
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.todo_commands = TodoCommands(store)

    app.add_exception_handler(TodoError, todo_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Todo endpoints
    @app.get("/api/todos", response_model=List[TodoResponse])
    async def list_todos(commands: TodoCommands = Depends(get_todo_commands)):
        """List all todo items."""
        return [TodoResponse(**todo.to_dict()) for todo in commands.list_todos()]

    @app.post("/api/todos", response_model=TodoResponse, status_code=201)
    async def create_todo(payload: Optional[TodoText] = None,
                          commands: TodoCommands = Depends(get_todo_commands)):
        """Create a new todo item."""
        todo = commands.create_todo(payload.text if payload else None)
        return TodoResponse(**todo.to_dict())

    @app.get("/api/todos/search", response_model=List[TodoResponse])
    async def search_todos(query: Optional[str] = None,
                           commands: TodoCommands = Depends(get_todo_commands)):
        """Search todos by text."""
        return [TodoResponse(**todo.to_dict()) for todo in commands.search_todos(query)]

    @app.delete("/api/todos", response_model=ClearResponse)
    async def clear_todos(completed_only: bool = Query(False, alias="completedOnly"),
                          commands: TodoCommands = Depends(get_todo_commands)):
        """Clear all todos, or only the completed ones."""
        return ClearResponse(deleted=commands.clear_todos(completed_only))

    @app.put("/api/todos/{todo_id}", response_model=TodoResponse)
    async def toggle_todo(todo_id: int, commands: TodoCommands = Depends(get_todo_commands)):
        """Flip a todo between completed and not completed."""
        return TodoResponse(**commands.toggle_todo(todo_id).to_dict())

    @app.patch("/api/todos/{todo_id}", response_model=TodoResponse)
    async def update_todo(todo_id: int, payload: Optional[TodoText] = None,
                          commands: TodoCommands = Depends(get_todo_commands)):
        """Replace the text of a todo item."""
        todo = commands.update_text(todo_id, payload.text if payload else None)
        return TodoResponse(**todo.to_dict())

    @app.delete("/api/todos/{todo_id}", response_model=MessageResponse)
    async def delete_todo(todo_id: int, commands: TodoCommands = Depends(get_todo_commands)):
        """Delete a todo item."""
        commands.delete_todo(todo_id)
        return MessageResponse(message="Todo deleted")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
