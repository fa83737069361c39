"""Week model for SQLModel."""
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from weekly_planner.utils.clock import timestamp_column, utc_now


class Week(SQLModel, table=True):
    """One persisted week of tasks, keyed by the ISO date of its Monday.

    ``days`` maps a day index ("0"-"6") to a list of task dicts
    (``{"id", "text", "status"}``). Absent and empty day lists both mean
    "no tasks that day".
    """

    id: int | None = Field(default=None, primary_key=True)
    week_key: str = Field(unique=True, index=True, max_length=10)
    days: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
