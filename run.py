#!/usr/bin/env python3
"""
Main entry point for the todo service.
This script runs the API server, or talks to a running server from the
command line.
"""

import os
import sys
import argparse
import logging

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from utils.api_client import TodoClient, TodoAPIError, format_todo
import uvicorn

# Configure logging
logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Todo API - JSON file backed todo list')
    parser.add_argument('mode', choices=['server', 'cli'], help='Run mode: server (API) or cli (command line)')
    parser.add_argument('--port', type=int, default=8000, help='Port number for server mode')
    parser.add_argument('--host', default='0.0.0.0', help='Host for server mode')
    parser.add_argument('--command', choices=['list', 'add', 'toggle', 'edit', 'delete', 'search', 'clear'],
                        help='Command to run in CLI mode')
    parser.add_argument('--args', nargs=argparse.REMAINDER, default=[], help='Arguments for CLI command')
    return parser.parse_args(argv)


def run_command(client: TodoClient, command: str, args: list) -> None:
    """Run one CLI command against the server and print the result."""
    if command == 'list':
        for todo in client.list_todos():
            print(format_todo(todo))
    elif command == 'add':
        print(format_todo(client.create_todo(' '.join(args))))
    elif command == 'toggle':
        print(format_todo(client.toggle_todo(int(args[0]))))
    elif command == 'edit':
        print(format_todo(client.update_todo(int(args[0]), ' '.join(args[1:]))))
    elif command == 'delete':
        client.delete_todo(int(args[0]))
        print(f"Todo {args[0]} deleted")
    elif command == 'search':
        for todo in client.search_todos(' '.join(args)):
            print(format_todo(todo))
    elif command == 'clear':
        count = client.clear_todos(completed_only='--completed' in args)
        print(f"Cleared {count} todos")


def main(argv=None):
    args = parse_args(argv)

    if args.mode == 'server':
        logger.info(f"Starting server on {args.host}:{args.port}")
        logger.info(f"Todos file: {os.path.abspath(os.getenv('TODOS_FILE', 'todos.json'))}")
        uvicorn.run("api.server:app", host=args.host, port=args.port)
        return

    if not args.command:
        logger.error("Command required in CLI mode")
        sys.exit(1)

    if args.command in ('toggle', 'edit', 'delete') and (not args.args or not args.args[0].isdigit()):
        logger.error(f"Todo id required for {args.command}")
        sys.exit(1)

    client = TodoClient(os.getenv('TODO_API_URL', 'http://127.0.0.1:8000'))
    try:
        run_command(client, args.command, args.args)
    except TodoAPIError as e:
        logger.error(f"Server error: {e.message}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
