"""
HTTP client for a running todo server.
Used by the command line mode of run.py.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class TodoAPIError(Exception):
    """The server answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class TodoClient:
    def __init__(self, base_url: str = "http://127.0.0.1:8000", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _make_request(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None,
                      params: Optional[Dict[str, Any]] = None) -> Any:
        """Make an HTTP request to the API and return the decoded JSON body."""
        url = f"{self.base_url}/{endpoint}"
        logger.debug(f"{method} {url}")
        response = requests.request(method, url, json=data, params=params, timeout=self.timeout)
        if response.status_code >= 400:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise TodoAPIError(response.status_code, message)
        return response.json()

    def list_todos(self) -> List[Dict[str, Any]]:
        return self._make_request("GET", "api/todos")

    def create_todo(self, text: str) -> Dict[str, Any]:
        return self._make_request("POST", "api/todos", {"text": text})

    def toggle_todo(self, todo_id: int) -> Dict[str, Any]:
        return self._make_request("PUT", f"api/todos/{todo_id}")

    def update_todo(self, todo_id: int, text: str) -> Dict[str, Any]:
        return self._make_request("PATCH", f"api/todos/{todo_id}", {"text": text})

    def delete_todo(self, todo_id: int) -> Dict[str, Any]:
        return self._make_request("DELETE", f"api/todos/{todo_id}")

    def search_todos(self, query: str) -> List[Dict[str, Any]]:
        return self._make_request("GET", "api/todos/search", params={"query": query})

    def clear_todos(self, completed_only: bool = False) -> int:
        """Clear todos and return how many were removed."""
        params = {"completedOnly": "true" if completed_only else "false"}
        return self._make_request("DELETE", "api/todos", params=params)["deleted"]


def format_todo(todo: Dict[str, Any]) -> str:
    mark = "x" if todo["completed"] else " "
    return f"[{mark}] {todo['id']}  {todo['text']}"
