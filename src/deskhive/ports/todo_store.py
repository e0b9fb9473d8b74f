"""Todo storage interface."""

from typing import Protocol

from deskhive.core.todos import Board


class TodoStore(Protocol):
    """Interface for persisting the full group/todo collection."""

    def load(self) -> Board:
        """Load the saved board. Returns an empty board if nothing is saved."""
        ...

    def save(self, board: Board) -> None:
        """Replace the saved board with this snapshot."""
        ...
