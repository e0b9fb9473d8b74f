"""Adapters - I/O implementations of ports."""

from .json_store import JsonTodoStore, StoreError
from .echo_notifier import EchoNotifier

__all__ = [
    "JsonTodoStore",
    "StoreError",
    "EchoNotifier",
]
