"""Week key helpers and client-side task ids."""
import random
import time
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from weekly_planner.errors import InvalidPayload
from weekly_planner.schemas.task import DAYS_PER_WEEK

WEEK_KEY_FORMAT = "%Y-%m-%d"


def monday_of(day: Union[date, datetime]) -> date:
    """Monday of the week containing ``day`` (weeks run Monday-Sunday)."""
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())


def week_key_for(day: Optional[Union[date, datetime]] = None) -> str:
    """Week key (ISO date of the Monday) for ``day``, today by default."""
    return monday_of(day or date.today()).strftime(WEEK_KEY_FORMAT)


def parse_week_key(week_key: str) -> date:
    """Parse a week key, rejecting anything that is not a Monday in YYYY-MM-DD form."""
    try:
        monday = datetime.strptime(week_key, WEEK_KEY_FORMAT).date()
    except (TypeError, ValueError):
        raise InvalidPayload(f"Invalid week key: {week_key!r}", {"week_key": week_key})
    if monday.weekday() != 0:
        raise InvalidPayload(f"Week key is not a Monday: {week_key!r}", {"week_key": week_key})
    return monday


def day_dates(week_key: str) -> List[date]:
    """The seven dates of a week, Monday first."""
    monday = parse_week_key(week_key)
    return [monday + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def shift_week(week_key: str, weeks: int) -> str:
    """Week key ``weeks`` weeks before (negative) or after (positive) ``week_key``."""
    return (parse_week_key(week_key) + timedelta(weeks=weeks)).strftime(WEEK_KEY_FORMAT)


def new_task_id() -> str:
    """Client-generated task id: millisecond timestamp plus a random suffix."""
    return f"task_{int(time.time() * 1000)}{random.randrange(10**9, 10**10)}"
