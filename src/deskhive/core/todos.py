"""Pure todo domain types and snapshot helpers - no I/O dependencies."""

from dataclasses import dataclass, field
from enum import IntEnum


class Priority(IntEnum):
    NORMAL = 0
    IMPORTANT = 1


@dataclass(frozen=True)
class TodoGroup:
    """A collapsible, ordered group of todos."""

    id: str
    name: str
    order: int
    collapsed: bool = False


@dataclass(frozen=True)
class Todo:
    """A to-do item. Timestamps are integer seconds since the epoch."""

    id: str
    text: str
    group_id: str
    order: int
    created_at: int
    completed: bool = False
    completed_at: int | None = None
    deadline: int | None = None
    priority: int = Priority.NORMAL

    @property
    def is_important(self) -> bool:
        return self.priority == Priority.IMPORTANT

    def is_overdue(self, now: int) -> bool:
        """Incomplete with a deadline already in the past."""
        return not self.completed and self.deadline is not None and self.deadline < now

    def seconds_until_deadline(self, now: int) -> int | None:
        """Seconds until the deadline (negative if passed)."""
        if self.deadline is None:
            return None
        return self.deadline - now


@dataclass(frozen=True)
class Board:
    """
    Immutable snapshot of every group and todo.

    Groups are sorted by order, todos by (group order, order), so two
    boards describing the same state compare equal.
    """

    groups: tuple[TodoGroup, ...] = field(default_factory=tuple)
    todos: tuple[Todo, ...] = field(default_factory=tuple)

    def group_by_id(self, group_id: str) -> TodoGroup | None:
        return next((g for g in self.groups if g.id == group_id), None)

    def todos_in(self, group_id: str) -> list[Todo]:
        """Todos of one group in display order."""
        return sorted((t for t in self.todos if t.group_id == group_id), key=lambda t: t.order)


def pending(todos: list[Todo] | tuple[Todo, ...]) -> list[Todo]:
    """Todos not yet completed."""
    return [t for t in todos if not t.completed]


def completed(todos: list[Todo] | tuple[Todo, ...]) -> list[Todo]:
    """Completed todos, most recently completed first."""
    done = [t for t in todos if t.completed]
    return sorted(done, key=lambda t: t.completed_at or 0, reverse=True)


def sort_for_display(todos: list[Todo] | tuple[Todo, ...], deadline_first: bool = True) -> list[Todo]:
    """
    Sort todos for a flat timeline view.

    Incomplete before completed. With `deadline_first`, then by deadline
    (none last), important before normal, then by creation time.
    Otherwise by creation time, then important before normal.

    Pure function - no I/O.
    """

    def sort_key(t: Todo) -> tuple[int, int, int, int]:
        # Todos without a deadline sort after any real timestamp
        deadline = t.deadline if t.deadline is not None else 2**63
        return (int(t.completed), deadline, -t.priority, t.created_at)

    def created_key(t: Todo) -> tuple[int, int, int]:
        return (int(t.completed), t.created_at, -t.priority)

    return sorted(todos, key=sort_key if deadline_first else created_key)


def filter_overdue(todos: list[Todo] | tuple[Todo, ...], now: int) -> list[Todo]:
    """Filter to overdue todos only."""
    return [t for t in todos if t.is_overdue(now)]


def due_for_reminder(
    todos: list[Todo] | tuple[Todo, ...],
    now: int,
    minutes_before: int = 30,
    notified: set[str] | frozenset[str] = frozenset(),
    slack_seconds: int = 30,
) -> list[Todo]:
    """
    Todos whose deadline is roughly `minutes_before` minutes away.

    A todo qualifies when it is incomplete, has a deadline still in the
    future, sits within `slack_seconds` of the threshold, and has not
    already been notified.
    """
    threshold = minutes_before * 60
    hits = []
    for t in todos:
        if t.completed or t.id in notified:
            continue
        remaining = t.seconds_until_deadline(now)
        if remaining is None or remaining <= 0:
            continue
        if threshold - slack_seconds <= remaining <= threshold + slack_seconds:
            hits.append(t)
    return hits
