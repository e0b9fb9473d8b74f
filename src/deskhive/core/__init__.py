"""Functional core - pure business logic with no I/O."""

from .errors import DeskHiveError, NotFound, InvalidArgument, OutOfRange
from .todos import Board, Priority, Todo, TodoGroup, due_for_reminder, filter_overdue
from .ordering import OrderingEngine
from .calendar import CalendarResolver, DateInfo, LunarDate, to_lunar

__all__ = [
    # Errors
    "DeskHiveError",
    "NotFound",
    "InvalidArgument",
    "OutOfRange",
    # Todos
    "Board",
    "Priority",
    "Todo",
    "TodoGroup",
    "due_for_reminder",
    "filter_overdue",
    "OrderingEngine",
    # Calendar
    "CalendarResolver",
    "DateInfo",
    "LunarDate",
    "to_lunar",
]
