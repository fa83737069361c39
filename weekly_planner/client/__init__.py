"""Async client for the weekly planner: task store, API wrapper and sync rules."""

from .api import WeekApi
from .board import CardMode, TaskCard, WeekBoard
from .store import TaskStore
from .sync import MutationKind, MutationState, PendingMutation, SyncClient
from .week import day_dates, monday_of, new_task_id, parse_week_key, shift_week, week_key_for

__all__ = [
    "CardMode",
    "MutationKind",
    "MutationState",
    "PendingMutation",
    "SyncClient",
    "TaskCard",
    "TaskStore",
    "WeekApi",
    "WeekBoard",
    "day_dates",
    "monday_of",
    "new_task_id",
    "parse_week_key",
    "shift_week",
    "week_key_for",
]
