"""Ports - interfaces/protocols for external dependencies."""

from .todo_store import TodoStore
from .notifier import Notifier

__all__ = [
    "TodoStore",
    "Notifier",
]
