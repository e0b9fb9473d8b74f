"""Todo/group ordering engine - pure, in-memory, no I/O.

Every structural change renumbers the affected scope to a dense
0..n-1 sequence, so `order` values double as display indices.
Operations validate everything up front and only then commit, so a
failed call leaves the collection exactly as it was.
"""

import logging
import time
from dataclasses import replace
from typing import Callable
from uuid import uuid4

from .errors import InvalidArgument, NotFound
from .todos import Board, Priority, Todo, TodoGroup

logger = logging.getLogger(__name__)


def _now() -> int:
    return int(time.time())


def _new_id() -> str:
    return str(uuid4())


def _renumbered(items: list) -> dict:
    """Map id -> item with order rewritten to its list position."""
    return {item.id: item if item.order == i else replace(item, order=i) for i, item in enumerate(items)}


def _check_index(index: int, upper: int) -> None:
    if not 0 <= index <= upper:
        raise InvalidArgument(f"Target index {index} outside [0, {upper}]")


def _check_priority(priority: int) -> None:
    if priority not in {p.value for p in Priority}:
        raise InvalidArgument(f"Unknown priority: {priority}")


class OrderingEngine:
    """
    Owns the group and todo collection and enforces its invariants.

    Callers only ever receive frozen value objects, so the collection
    cannot be changed except through these operations.
    """

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._clock = clock or _now
        self._new_id = id_factory or _new_id
        self._groups: dict[str, TodoGroup] = {}
        self._todos: dict[str, Todo] = {}

    @classmethod
    def from_board(
        cls,
        board: Board,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> "OrderingEngine":
        """
        Rebuild an engine from a persisted snapshot.

        Rejects duplicate ids and orphaned todos. Orders are renumbered
        densely (stable by stored order, then creation time) and
        completion timestamps are made consistent with the flag.
        """
        engine = cls(clock=clock, id_factory=id_factory)

        group_ids = [g.id for g in board.groups]
        if len(set(group_ids)) != len(group_ids):
            raise InvalidArgument("Duplicate group id in board")
        todo_ids = [t.id for t in board.todos]
        if len(set(todo_ids)) != len(todo_ids):
            raise InvalidArgument("Duplicate todo id in board")

        known = set(group_ids)
        orphans = [t.id for t in board.todos if t.group_id not in known]
        if orphans:
            raise InvalidArgument(f"Todos reference missing groups: {', '.join(orphans)}")

        groups = sorted(board.groups, key=lambda g: g.order)
        engine._groups = _renumbered(groups)

        todos = []
        for t in board.todos:
            _check_priority(t.priority)
            if t.completed and t.completed_at is None:
                logger.warning(f"Todo {t.id} completed without timestamp, using creation time")
                t = replace(t, completed_at=t.created_at)
            elif not t.completed and t.completed_at is not None:
                t = replace(t, completed_at=None)
            todos.append(t)

        for group in groups:
            siblings = sorted(
                (t for t in todos if t.group_id == group.id),
                key=lambda t: (t.order, t.created_at),
            )
            engine._todos.update(_renumbered(siblings))

        return engine

    # ============== Queries ==============

    def get_group(self, group_id: str) -> TodoGroup:
        group = self._groups.get(group_id)
        if group is None:
            raise NotFound(f"Group not found: {group_id}")
        return group

    def get_todo(self, todo_id: str) -> Todo:
        todo = self._todos.get(todo_id)
        if todo is None:
            raise NotFound(f"Todo not found: {todo_id}")
        return todo

    def groups(self) -> list[TodoGroup]:
        """All groups in display order."""
        return sorted(self._groups.values(), key=lambda g: g.order)

    def todos_in(self, group_id: str) -> list[Todo]:
        """Todos of one group in display order."""
        self.get_group(group_id)
        return self._siblings(group_id)

    def snapshot(self) -> Board:
        """Immutable copy of the whole collection."""
        groups = self.groups()
        todos = [t for g in groups for t in self._siblings(g.id)]
        return Board(groups=tuple(groups), todos=tuple(todos))

    def _siblings(self, group_id: str) -> list[Todo]:
        return sorted(
            (t for t in self._todos.values() if t.group_id == group_id),
            key=lambda t: t.order,
        )

    # ============== Groups ==============

    def create_group(self, name: str) -> TodoGroup:
        """Append a new group at the end of the group order."""
        order = max((g.order for g in self._groups.values()), default=-1) + 1
        group = TodoGroup(id=self._new_id(), name=name, order=order)
        self._groups[group.id] = group
        logger.debug(f"Created group {group.id} ({name!r}) at {order}")
        return group

    def rename_group(self, group_id: str, name: str) -> TodoGroup:
        group = replace(self.get_group(group_id), name=name)
        self._groups[group_id] = group
        return group

    def set_collapsed(self, group_id: str, collapsed: bool) -> TodoGroup:
        """Set the UI collapse flag. Never affects order."""
        group = replace(self.get_group(group_id), collapsed=collapsed)
        self._groups[group_id] = group
        return group

    def toggle_collapsed(self, group_id: str) -> TodoGroup:
        return self.set_collapsed(group_id, not self.get_group(group_id).collapsed)

    def reorder_groups(self, group_id: str, target_index: int) -> None:
        """Move a group to `target_index` and renumber all groups."""
        group = self.get_group(group_id)
        ordered = self.groups()
        _check_index(target_index, len(ordered) - 1)

        ordered.remove(group)
        ordered.insert(target_index, group)
        self._groups.update(_renumbered(ordered))
        logger.debug(f"Moved group {group_id} to index {target_index}")

    def delete_group(self, group_id: str) -> None:
        """Delete a group and every todo in it, then close the gap."""
        self.get_group(group_id)
        survivors = [g for g in self.groups() if g.id != group_id]
        doomed = [t.id for t in self._todos.values() if t.group_id == group_id]

        del self._groups[group_id]
        for todo_id in doomed:
            del self._todos[todo_id]
        self._groups.update(_renumbered(survivors))
        logger.debug(f"Deleted group {group_id} with {len(doomed)} todos")

    # ============== Todos ==============

    def create_todo(
        self,
        group_id: str,
        text: str,
        priority: int = Priority.NORMAL,
        deadline: int | None = None,
    ) -> Todo:
        """Append a new, incomplete todo at the end of a group."""
        self.get_group(group_id)
        _check_priority(priority)

        order = max((t.order for t in self._siblings(group_id)), default=-1) + 1
        todo = Todo(
            id=self._new_id(),
            text=text,
            group_id=group_id,
            order=order,
            created_at=self._clock(),
            priority=int(priority),
            deadline=deadline,
        )
        self._todos[todo.id] = todo
        logger.debug(f"Created todo {todo.id} in group {group_id} at {order}")
        return todo

    def set_completed(self, todo_id: str, completed: bool) -> Todo:
        """Mark a todo done or not done. Setting the current value is a no-op."""
        todo = self.get_todo(todo_id)
        if todo.completed == completed:
            return todo

        todo = replace(
            todo,
            completed=completed,
            completed_at=self._clock() if completed else None,
        )
        self._todos[todo_id] = todo
        return todo

    def update_text(self, todo_id: str, text: str) -> Todo:
        todo = replace(self.get_todo(todo_id), text=text)
        self._todos[todo_id] = todo
        return todo

    def set_deadline(self, todo_id: str, deadline: int | None) -> Todo:
        """Set or clear (None) a deadline. Past deadlines are allowed."""
        todo = replace(self.get_todo(todo_id), deadline=deadline)
        self._todos[todo_id] = todo
        return todo

    def set_priority(self, todo_id: str, priority: int) -> Todo:
        todo = self.get_todo(todo_id)
        _check_priority(priority)
        todo = replace(todo, priority=int(priority))
        self._todos[todo_id] = todo
        return todo

    def reorder_within_group(self, group_id: str, todo_id: str, target_index: int) -> None:
        """Move a todo to `target_index` inside its own group."""
        self.get_group(group_id)
        todo = self.get_todo(todo_id)
        if todo.group_id != group_id:
            raise InvalidArgument(f"Todo {todo_id} does not belong to group {group_id}")

        siblings = self._siblings(group_id)
        _check_index(target_index, len(siblings) - 1)

        siblings.remove(todo)
        siblings.insert(target_index, todo)
        self._todos.update(_renumbered(siblings))
        logger.debug(f"Moved todo {todo_id} to index {target_index} in group {group_id}")

    def move_to_group(self, todo_id: str, dest_group_id: str, target_index: int) -> None:
        """
        Move a todo into another group at `target_index`.

        The destination accepts indices 0..len(dest), so appending is
        allowed. Moving within the same group is a plain reorder.
        """
        todo = self.get_todo(todo_id)
        self.get_group(dest_group_id)
        if todo.group_id == dest_group_id:
            self.reorder_within_group(dest_group_id, todo_id, target_index)
            return

        source = [t for t in self._siblings(todo.group_id) if t.id != todo_id]
        dest = self._siblings(dest_group_id)
        _check_index(target_index, len(dest))

        dest.insert(target_index, replace(todo, group_id=dest_group_id))
        updates = _renumbered(source)
        updates.update(_renumbered(dest))
        self._todos.update(updates)
        logger.debug(f"Moved todo {todo_id} from {todo.group_id} to {dest_group_id} at {target_index}")

    def delete_todo(self, todo_id: str) -> None:
        """Delete a todo and close the gap among its siblings."""
        todo = self.get_todo(todo_id)
        survivors = [t for t in self._siblings(todo.group_id) if t.id != todo_id]

        del self._todos[todo_id]
        self._todos.update(_renumbered(survivors))
        logger.debug(f"Deleted todo {todo_id}")
