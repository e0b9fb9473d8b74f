"""Shared workflow layer between the CLI and the reminder watcher.

Each mutating workflow loads the board, applies one engine operation
and saves the resulting snapshot, so a failed operation never reaches
the store.
"""

from datetime import date
from typing import Callable, TypeVar

from .adapters.json_store import JsonTodoStore
from .config import Config
from .core.calendar import CalendarResolver, DateInfo
from .core.ordering import OrderingEngine
from .core.todos import Board
from .ports.todo_store import TodoStore

T = TypeVar("T")


def get_store(config: Config) -> TodoStore:
    """Resolve the data file from config."""
    return JsonTodoStore(config.data_path, default_group_name=config.default_group_name)


def load_engine(config: Config, store: TodoStore | None = None) -> OrderingEngine:
    """Build an engine from the persisted board."""
    if store is None:
        store = get_store(config)
    return OrderingEngine.from_board(store.load())


def load_board(config: Config, store: TodoStore | None = None) -> Board:
    """Read-only snapshot of the persisted board, normalized by the engine."""
    return load_engine(config, store).snapshot()


def apply(
    config: Config,
    operation: Callable[[OrderingEngine], T],
    store: TodoStore | None = None,
) -> T:
    """Run one engine operation and persist the result if it succeeds."""
    if store is None:
        store = get_store(config)
    engine = OrderingEngine.from_board(store.load())
    result = operation(engine)
    store.save(engine.snapshot())
    return result


def ensure_default_group(engine: OrderingEngine, name: str) -> str:
    """Id of the first group, creating one named `name` on an empty board."""
    groups = engine.groups()
    if groups:
        return groups[0].id
    return engine.create_group(name).id


def describe_date(config: Config, target: date | None = None) -> DateInfo:
    """Resolve a solar date (today by default) in the configured locale."""
    return CalendarResolver(config.locale).resolve_today(target)
