"""Notification interface."""

from typing import Protocol

from deskhive.core.todos import Todo


class Notifier(Protocol):
    """Interface for delivering deadline reminders."""

    def notify(self, todo: Todo, seconds_left: int) -> None:
        """Tell the user a todo's deadline is approaching."""
        ...
