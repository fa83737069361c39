"""In-memory task store backing the weekly board."""
from typing import TYPE_CHECKING, Dict, List, Optional, Set, Tuple

from weekly_planner.errors import PlannerError
from weekly_planner.schemas.task import TaskItem
from weekly_planner.utils.logger import get_logger

if TYPE_CHECKING:
    from weekly_planner.client.api import ClientDays, WeekApi

logger = get_logger(__name__)

DayRef = Tuple[str, int]


class TaskStore:
    """Client-side state: week key -> day index -> ordered list of tasks.

    Task ids are unique within a day list only. The store also remembers
    which tasks are known to be persisted on the server, and which day lists
    changed since they were last written.
    """

    def __init__(self):
        self._weeks: Dict[str, Dict[int, List[TaskItem]]] = {}
        self._persisted: Set[Tuple[str, int, str]] = set()
        self._dirty: Set[DayRef] = set()
        self.current_week_key: Optional[str] = None

    def week(self, week_key: str) -> "ClientDays":
        """Copy of a week's day lists (empty if the week is unknown)."""
        return {index: list(tasks) for index, tasks in self._weeks.get(week_key, {}).items()}

    def day(self, week_key: str, day_index: int) -> List[TaskItem]:
        return list(self._weeks.get(week_key, {}).get(day_index, []))

    def find_task(self, week_key: str, day_index: int, task_id: str) -> Optional[TaskItem]:
        return next((task for task in self.day(week_key, day_index) if task.id == task_id), None)

    def has_week(self, week_key: str) -> bool:
        return week_key in self._weeks

    async def load(self, week_key: str, api: "WeekApi") -> "ClientDays":
        """Replace a week with the server's copy. A failed fetch loads an empty week."""
        try:
            days = await api.get_week(week_key)
        except PlannerError as e:
            logger.warning("Loading week failed, showing it empty", week_key=week_key, error=e.message)
            days = {}
        self.replace_week(week_key, days, persisted=True)
        return self.week(week_key)

    def replace_week(self, week_key: str, days: "ClientDays", persisted: bool = False) -> None:
        self._forget_week(week_key)
        self._weeks[week_key] = {index: list(tasks) for index, tasks in days.items()}
        if persisted:
            for index, tasks in days.items():
                for task in tasks:
                    self._persisted.add((week_key, index, task.id))

    def upsert_task(self, week_key: str, day_index: int, task: TaskItem) -> None:
        """Insert a task, or replace the task with the same id in place."""
        tasks = self._weeks.setdefault(week_key, {}).setdefault(day_index, [])
        for position, existing in enumerate(tasks):
            if existing.id == task.id:
                tasks[position] = task
                break
        else:
            tasks.append(task)
        self._dirty.add((week_key, day_index))

    def remove_task(self, week_key: str, day_index: int, task_id: str) -> bool:
        """Remove a task by id. Returns False (and changes nothing) if it is absent."""
        tasks = self._weeks.get(week_key, {}).get(day_index)
        self._persisted.discard((week_key, day_index, task_id))
        if not tasks:
            return False
        remaining = [task for task in tasks if task.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._weeks[week_key][day_index] = remaining
        self._dirty.add((week_key, day_index))
        return True

    def remove_task_if_matches(self, week_key: str, day_index: int, task_id: str, text: str) -> bool:
        """Remove a task only if it still carries ``text``.

        Used to roll back an optimistic create without destroying an edit
        that replaced the entry in the meantime.
        """
        task = self.find_task(week_key, day_index, task_id)
        if task is None or task.text != text:
            return False
        return self.remove_task(week_key, day_index, task_id)

    def clear(self, week_key: str) -> None:
        """Empty every day list of a week."""
        days = self._weeks.get(week_key)
        if not days:
            return
        for index in days:
            days[index] = []
            self._dirty.add((week_key, index))
        self._persisted = {ref for ref in self._persisted if ref[0] != week_key}

    def drop_week(self, week_key: str) -> None:
        """Forget a week entirely."""
        self._weeks.pop(week_key, None)
        self._forget_week(week_key)

    def _forget_week(self, week_key: str) -> None:
        self._persisted = {ref for ref in self._persisted if ref[0] != week_key}
        self._dirty = {ref for ref in self._dirty if ref[0] != week_key}

    def is_persisted(self, week_key: str, day_index: int, task_id: str) -> bool:
        return (week_key, day_index, task_id) in self._persisted

    def mark_days_persisted(self, week_key: str, days: "ClientDays") -> None:
        """Record that ``days`` (a snapshot sent to the server) was written.

        Tasks added after the snapshot was taken stay unpersisted, and their
        day lists stay dirty.
        """
        for index, tasks in days.items():
            for task in tasks:
                self._persisted.add((week_key, index, task.id))
            current = self._weeks.get(week_key, {}).get(index, [])
            if all(self.is_persisted(week_key, index, task.id) for task in current):
                self._dirty.discard((week_key, index))

    def mark_persisted(self, week_key: str, day_index: int, task_id: str) -> None:
        self._persisted.add((week_key, day_index, task_id))

    def is_dirty(self, week_key: str, day_index: int) -> bool:
        return (week_key, day_index) in self._dirty

    def dirty_days(self, week_key: str) -> List[int]:
        return sorted(index for key, index in self._dirty if key == week_key)

    def mark_clean(self, week_key: str, day_index: int) -> None:
        self._dirty.discard((week_key, day_index))
