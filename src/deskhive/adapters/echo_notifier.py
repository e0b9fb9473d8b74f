"""Terminal notification adapter."""

import logging
from datetime import datetime

import click

from deskhive.core.todos import Todo

logger = logging.getLogger(__name__)


def format_reminder(todo: Todo, seconds_left: int, locale: str = "en") -> str:
    """One-line reminder text for a todo whose deadline is near."""
    minutes_left = max(seconds_left // 60, 0)
    deadline = datetime.fromtimestamp(todo.deadline or 0)
    if locale == "zh":
        priority = "高优先级" if todo.is_important else "普通"
        return (
            f"[{priority}] {todo.text} - 截止时间 {deadline.strftime('%m月%d日 %H时%M分')}"
            f"（剩余 {minutes_left} 分钟）"
        )
    priority = "important" if todo.is_important else "normal"
    return f"[{priority}] {todo.text} - due {deadline.strftime('%b %d %H:%M')} ({minutes_left} min left)"


class EchoNotifier:
    """
    Prints reminders to the terminal.

    Implements Notifier protocol.
    """

    def __init__(self, locale: str = "en"):
        self.locale = locale

    def notify(self, todo: Todo, seconds_left: int) -> None:
        message = format_reminder(todo, seconds_left, self.locale)
        click.echo(message)
        logger.info(f"Sent reminder for todo {todo.id}")
