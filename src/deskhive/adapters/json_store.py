"""JSON file storage adapter for the todo board."""

import json
import logging
from pathlib import Path
from uuid import NAMESPACE_URL, uuid5

from deskhive.core.todos import Board, Todo, TodoGroup

logger = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = "Default"


class StoreError(Exception):
    """Raised when the data file cannot be read or parsed."""

    pass


def group_to_dict(group: TodoGroup) -> dict:
    return {
        "id": group.id,
        "name": group.name,
        "order": group.order,
        "collapsed": group.collapsed,
    }


def todo_to_dict(todo: Todo) -> dict:
    data = {
        "id": todo.id,
        "text": todo.text,
        "completed": todo.completed,
        "createdAt": todo.created_at,
        "order": todo.order,
        "groupId": todo.group_id,
        "priority": todo.priority,
    }
    # Optional fields are omitted rather than written as null
    if todo.completed_at is not None:
        data["completedAt"] = todo.completed_at
    if todo.deadline is not None:
        data["deadline"] = todo.deadline
    return data


def board_to_dict(board: Board) -> dict:
    return {
        "groups": [group_to_dict(g) for g in board.groups],
        "todos": [todo_to_dict(t) for t in board.todos],
    }


def _field(entry: dict, key: str, kind: type, default=None, optional: bool = False):
    """Read one stored field, rejecting values of the wrong JSON type."""
    value = entry.get(key, default)
    if value is None and optional:
        return None
    # bool is an int subclass; a stored true/false is never a valid number
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise StoreError(f"Field {key!r} must be {kind.__name__}, got {value!r}")
    return value


def board_from_dict(data: dict, default_group_name: str = DEFAULT_GROUP_NAME) -> Board:
    """Build a Board from stored JSON, importing the legacy two-list layout."""
    if "pending_todos" in data or "completed_todos" in data:
        return _board_from_legacy(data, default_group_name)

    groups = tuple(
        TodoGroup(
            id=_field(g, "id", str),
            name=_field(g, "name", str, ""),
            order=_field(g, "order", int, i),
            collapsed=_field(g, "collapsed", bool, False),
        )
        for i, g in enumerate(data.get("groups", []))
    )
    todos = tuple(
        Todo(
            id=_field(t, "id", str),
            text=_field(t, "text", str, ""),
            group_id=_field(t, "groupId", str),
            order=_field(t, "order", int, i),
            created_at=_field(t, "createdAt", int, 0),
            completed=_field(t, "completed", bool, False),
            completed_at=_field(t, "completedAt", int, optional=True),
            deadline=_field(t, "deadline", int, optional=True),
            priority=_field(t, "priority", int, 0),
        )
        for i, t in enumerate(data.get("todos", []))
    )
    return Board(groups=groups, todos=todos)


def _legacy_id(key: str) -> str:
    # Stable across loads until the board is saved in the current layout
    return str(uuid5(NAMESPACE_URL, f"deskhive-legacy:{key}"))


def _board_from_legacy(data: dict, group_name: str) -> Board:
    """
    Import `{"pending_todos": [...], "completed_todos": [...]}` files.

    Everything lands in one group, pending first, in list order.
    Completed entries had no completion time, so creation time is used.
    """
    group = TodoGroup(id=_legacy_id("group"), name=group_name, order=0)
    entries = [(t, False) for t in data.get("pending_todos", [])]
    entries += [(t, True) for t in data.get("completed_todos", [])]

    todos = []
    for order, (t, done) in enumerate(entries):
        created_at = _field(t, "created_at", int, 0)
        todos.append(
            Todo(
                id=t.get("id") or _legacy_id(f"{order}:{created_at}:{t.get('text', '')}"),
                text=_field(t, "text", str, ""),
                group_id=group.id,
                order=order,
                created_at=created_at,
                completed=done,
                completed_at=created_at if done else None,
                deadline=_field(t, "deadline", int, optional=True),
            )
        )

    logger.info(f"Imported {len(todos)} legacy todos into group {group_name!r}")
    return Board(groups=(group,), todos=tuple(todos))


class JsonTodoStore:
    """
    JSON file storage.

    Implements TodoStore protocol. The whole board is rewritten on
    every save.
    """

    def __init__(self, path: Path | str, default_group_name: str = DEFAULT_GROUP_NAME):
        self.path = Path(path).expanduser()
        self.default_group_name = default_group_name

    def load(self) -> Board:
        """Load the board. Returns an empty board if the file is missing."""
        if not self.path.exists():
            return Board()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return board_from_dict(data, self.default_group_name)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise StoreError(f"Failed to parse {self.path}: {e}") from e

    def save(self, board: Board) -> None:
        """Write the board, creating parent directories as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(board_to_dict(board), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
