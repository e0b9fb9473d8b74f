"""Deadline reminder watcher."""

import logging
import time
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.echo_notifier import EchoNotifier
from .config import Config, load_config
from .core.todos import due_for_reminder
from .ports.notifier import Notifier
from .workflows import load_board

logger = logging.getLogger(__name__)

# Forget a notified todo once its deadline is this far behind us
FORGET_AFTER_SECONDS = 3600


class ReminderTracker:
    """Remembers which todos were already notified."""

    def __init__(
        self,
        config: Config,
        notifier: Notifier,
        clock: Callable[[], int] | None = None,
    ):
        self.config = config
        self.notifier = notifier
        self.clock = clock or (lambda: int(time.time()))
        self.notified: set[str] = set()

    def check(self) -> list[str]:
        """Send reminders for todos nearing their deadline. Returns notified ids."""
        now = self.clock()
        board = load_board(self.config)

        hits = due_for_reminder(
            board.todos,
            now,
            minutes_before=self.config.notification_minutes_before,
            notified=self.notified,
        )
        for todo in hits:
            self.notifier.notify(todo, todo.deadline - now)
            self.notified.add(todo.id)

        live = {t.id: t for t in board.todos}
        for todo_id in list(self.notified):
            todo = live.get(todo_id)
            if todo is None or todo.deadline is None or now - todo.deadline > FORGET_AFTER_SECONDS:
                self.notified.discard(todo_id)

        return [t.id for t in hits]


def setup_scheduler(config: Config | None = None, notifier: Notifier | None = None) -> BlockingScheduler:
    """Set up the periodic deadline check."""
    if config is None:
        config = load_config()

    tracker = ReminderTracker(config, notifier or EchoNotifier(config.locale))
    scheduler = BlockingScheduler()
    scheduler.add_job(
        _run_check,
        IntervalTrigger(seconds=config.reminder_interval_seconds),
        args=[tracker],
        id="deadline_reminders",
    )
    logger.info(f"Scheduled deadline check every {config.reminder_interval_seconds}s")
    return scheduler


def _run_check(tracker: ReminderTracker) -> None:
    try:
        sent = tracker.check()
    except Exception as e:
        logger.error(f"Deadline check failed: {e}")
        return
    if sent:
        logger.info(f"Sent {len(sent)} deadline reminders")


def run_watcher(config: Config | None = None) -> None:
    """Run the reminder watcher until interrupted."""
    if config is None:
        config = load_config()

    if not config.enable_deadline_notification:
        raise ValueError("Deadline notifications disabled - set ENABLE_DEADLINE_NOTIFICATION=true")

    scheduler = setup_scheduler(config)
    logger.info("Starting DeskHive reminder watcher...")
    scheduler.start()
