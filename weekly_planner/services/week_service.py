"""Week store: persistence of per-week task lists."""
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import Session, select

from weekly_planner.errors import InternalError, InvalidPayload, NotFound
from weekly_planner.models.week import Week
from weekly_planner.schemas.task import DAYS_PER_WEEK, TaskItem, TaskStatus
from weekly_planner.utils.clock import utc_now
from weekly_planner.utils.logger import get_logger

logger = get_logger(__name__)

Days = Dict[str, List[Dict[str, Any]]]


def day_key(day_index: Any) -> str:
    """Canonical JSON key for a day index, or InvalidPayload if it is not 0-6."""
    try:
        index = int(day_index)
    except (TypeError, ValueError):
        raise InvalidPayload(f"Invalid day index: {day_index!r}", {"day_index": day_index})
    if isinstance(day_index, bool) or not 0 <= index < DAYS_PER_WEEK:
        raise InvalidPayload(f"Invalid day index: {day_index!r}", {"day_index": day_index})
    return str(index)


def normalize_days(days: Any) -> Days:
    """Validate a client-supplied ``days`` mapping and return its stored form.

    Raises:
        InvalidPayload: if ``days`` is not a mapping, a key is not a day index,
            two keys name the same day, a day list is not a list, a task is malformed, or a task id repeats
            within one day list.
    """
    if not isinstance(days, Mapping):
        raise InvalidPayload("Invalid payload: 'days' must be an object")

    normalized: Days = {}
    for raw_key, tasks in days.items():
        key = day_key(raw_key)
        if key in normalized:
            # "1", "01" and 1 all name the same day
            raise InvalidPayload(f"Invalid payload: day {key} appears more than once", {"day_index": key})
        if tasks is None:
            tasks = []
        if not isinstance(tasks, list):
            raise InvalidPayload(f"Invalid payload: day {key} must be a list of tasks")

        seen = set()
        day_list = []
        for raw_task in tasks:
            try:
                task = TaskItem.model_validate(raw_task)
            except ValidationError as e:
                raise InvalidPayload(
                    f"Invalid task in day {key}",
                    {"errors": e.errors(include_url=False, include_context=False)},
                )
            if task.id in seen:
                raise InvalidPayload(f"Duplicate task id {task.id!r} in day {key}")
            seen.add(task.id)
            day_list.append(task.to_document())
        normalized[key] = day_list
    return normalized


class WeekService:
    """Service class for week document CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def _find(self, week_key: str) -> Optional[Week]:
        statement = select(Week).where(Week.week_key == week_key)
        return self.session.exec(statement).first()

    def _save(self, week: Week) -> Week:
        week.updated_at = utc_now()
        try:
            self.session.add(week)
            self.session.commit()
            self.session.refresh(week)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to save week", week_key=week.week_key)
            raise InternalError("Failed to save week") from e
        return week

    def _day_list(self, week: Optional[Week], week_key: str, day_index: int) -> List[Dict[str, Any]]:
        key = str(day_index)
        if week is None or week.days.get(key) is None:
            logger.warning("Week or day not found", week_key=week_key, day_index=day_index)
            raise NotFound("Week or day not found", {"week_key": week_key, "day_index": day_index})
        return week.days[key]

    def get_week(self, week_key: str) -> Days:
        """Return the ``days`` mapping of a week; an empty mapping if none is stored."""
        week = self._find(week_key)
        if week is None:
            return {}
        return dict(week.days or {})

    def put_week(self, week_key: str, days: Any) -> Days:
        """Create or replace the whole week document."""
        normalized = normalize_days(days)

        week = self._find(week_key)
        if week is None:
            week = Week(week_key=week_key, days=normalized)
        else:
            week.days = normalized
        week = self._save(week)

        logger.info(
            "Week saved",
            week_key=week_key,
            task_count=sum(len(tasks) for tasks in normalized.values()),
        )
        return dict(week.days)

    def delete_task(self, week_key: str, day_index: int, task_id: str) -> Days:
        """Remove one task by id. Deleting an absent id leaves the list unchanged."""
        week = self._find(week_key)
        tasks = self._day_list(week, week_key, day_index)

        remaining = [task for task in tasks if task.get("id") != task_id]
        if len(remaining) == len(tasks):
            logger.info("Task already absent", week_key=week_key, day_index=day_index, task_id=task_id)
            return dict(week.days)

        week.days[str(day_index)] = remaining
        # JSON columns do not track nested mutation
        flag_modified(week, "days")
        week = self._save(week)

        logger.info("Task deleted", week_key=week_key, day_index=day_index, task_id=task_id)
        return dict(week.days)

    def update_task(
        self,
        week_key: str,
        day_index: int,
        task_id: str,
        text: str,
        status: TaskStatus = TaskStatus.UNSET,
    ) -> Dict[str, Any]:
        """Replace the text and status of an existing task in place."""
        week = self._find(week_key)
        tasks = self._day_list(week, week_key, day_index)

        position = next((i for i, task in enumerate(tasks) if task.get("id") == task_id), None)
        if position is None:
            logger.warning("Task not found", week_key=week_key, day_index=day_index, task_id=task_id)
            raise NotFound("Task not found", {"week_key": week_key, "day_index": day_index, "task_id": task_id})

        try:
            updated = TaskItem(id=task_id, text=text, status=status).to_document()
        except ValidationError as e:
            raise InvalidPayload("Invalid task", {"errors": e.errors(include_url=False, include_context=False)})

        tasks[position] = updated
        flag_modified(week, "days")
        self._save(week)

        logger.info("Task updated", week_key=week_key, day_index=day_index, task_id=task_id)
        return updated

    def append_task(self, week_key: str, day_index: int, task: TaskItem) -> Dict[str, Any]:
        """Insert one task into a day list, replacing any task with the same id.

        The week document is created if it does not exist yet.
        """
        key = day_key(day_index)
        document = task.to_document()

        week = self._find(week_key)
        if week is None:
            week = Week(week_key=week_key, days={key: [document]})
        else:
            tasks = week.days.setdefault(key, [])
            position = next((i for i, t in enumerate(tasks) if t.get("id") == task.id), None)
            if position is None:
                tasks.append(document)
            else:
                tasks[position] = document
            flag_modified(week, "days")
        self._save(week)

        logger.info("Task appended", week_key=week_key, day_index=day_index, task_id=task.id)
        return document

    def clear_week(self, week_key: str) -> bool:
        """Delete the week document. Returns whether one existed."""
        week = self._find(week_key)
        if week is None:
            return False
        try:
            self.session.delete(week)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Failed to clear week", week_key=week_key)
            raise InternalError("Failed to clear week") from e

        logger.info("Week cleared", week_key=week_key)
        return True
