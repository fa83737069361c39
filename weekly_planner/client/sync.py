"""Sync client: turns board actions into the minimal server call.

Every action is tracked as a ``PendingMutation`` that ends either
committed or rolled back:

- create: the task is appended locally, then the whole week is upserted.
  On failure the task is removed again, but only if the local entry still
  has the text that was sent.
- update: a targeted PUT; the local entry changes only once the server
  confirms it.
- delete: a targeted DELETE; the task is removed locally whatever the
  outcome, and real failures are logged.
- clear: a whole-week DELETE; the local week is dropped.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from weekly_planner.client.api import ClientDays, WeekApi
from weekly_planner.client.store import TaskStore
from weekly_planner.client.week import new_task_id
from weekly_planner.errors import InvalidPayload, NotFound, PlannerError
from weekly_planner.schemas.task import TASK_TEXT_MAX_LENGTH, TaskItem, TaskStatus
from weekly_planner.utils.logger import get_logger

logger = get_logger(__name__)

# notify(message, level) where level is "success" or "error"
Notifier = Callable[[str, str], None]


class MutationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CLEAR = "clear"


class MutationState(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class PendingMutation:
    """One in-flight change to the board."""

    kind: MutationKind
    week_key: str
    day_index: Optional[int] = None
    task: Optional[TaskItem] = None
    state: MutationState = MutationState.PENDING
    error: Optional[PlannerError] = field(default=None, repr=False)

    @property
    def committed(self) -> bool:
        return self.state == MutationState.COMMITTED

    @property
    def rolled_back(self) -> bool:
        return self.state == MutationState.ROLLED_BACK

    def _leave_pending(self, state: MutationState) -> None:
        if self.state != MutationState.PENDING:
            raise RuntimeError(f"{self.kind.value} mutation is already {self.state.value}")
        self.state = state

    def commit(self, error: Optional[PlannerError] = None) -> None:
        self._leave_pending(MutationState.COMMITTED)
        self.error = error

    def roll_back(self, error: PlannerError) -> None:
        self._leave_pending(MutationState.ROLLED_BACK)
        self.error = error

    def still_applied(self, store: TaskStore) -> bool:
        """True while the local entry is the one this mutation wrote."""
        if self.task is None or self.day_index is None:
            return False
        current = store.find_task(self.week_key, self.day_index, self.task.id)
        return current is not None and current.text == self.task.text


def _log_notification(message: str, level: str) -> None:
    if level == "error":
        logger.warning(message)
    else:
        logger.info(message)


def validate_text(text: str) -> str:
    """Strip task text and check it is 1-100 characters."""
    text = (text or "").strip()
    if not text:
        raise InvalidPayload("Task cannot be empty")
    if len(text) > TASK_TEXT_MAX_LENGTH:
        raise InvalidPayload(f"Task cannot be longer than {TASK_TEXT_MAX_LENGTH} characters")
    return text


class SyncClient:
    """Applies board actions to a TaskStore and mirrors them to the server."""

    def __init__(self, store: TaskStore, api: WeekApi, notify: Optional[Notifier] = None):
        self.store = store
        self.api = api
        self.notify = notify or _log_notification

    async def load_week(self, week_key: str) -> ClientDays:
        """Fetch a week into the store and make it the current week."""
        days = await self.store.load(week_key, self.api)
        self.store.current_week_key = week_key
        return days

    async def save_task(
        self,
        week_key: str,
        day_index: int,
        task_id: str,
        text: str,
        status: TaskStatus = TaskStatus.UNSET,
    ) -> PendingMutation:
        """Create the task if the server has never seen it, otherwise update it."""
        if self.store.is_persisted(week_key, day_index, task_id):
            return await self.update_task(week_key, day_index, task_id, text, status)
        return await self.create_task(week_key, day_index, text, status, task_id=task_id)

    async def create_task(
        self,
        week_key: str,
        day_index: int,
        text: str,
        status: TaskStatus = TaskStatus.UNSET,
        task_id: Optional[str] = None,
    ) -> PendingMutation:
        task = TaskItem(id=task_id or new_task_id(), text=validate_text(text), status=status)
        mutation = PendingMutation(MutationKind.CREATE, week_key, day_index, task)

        self.store.upsert_task(week_key, day_index, task)
        sent = self.store.week(week_key)
        try:
            await self.api.put_week(week_key, sent)
        except PlannerError as e:
            if mutation.still_applied(self.store):
                self.store.remove_task(week_key, day_index, task.id)
            mutation.roll_back(e)
            logger.warning(
                "Create rolled back",
                week_key=week_key, day_index=day_index, task_id=task.id, error=e.message,
            )
            self.notify("Failed to save task", "error")
            return mutation

        self.store.mark_days_persisted(week_key, sent)
        mutation.commit()
        logger.info("Task created", week_key=week_key, day_index=day_index, task_id=task.id)
        self.notify("Task saved successfully", "success")
        return mutation

    async def update_task(
        self,
        week_key: str,
        day_index: int,
        task_id: str,
        text: str,
        status: TaskStatus = TaskStatus.UNSET,
    ) -> PendingMutation:
        task = TaskItem(id=task_id, text=validate_text(text), status=status)
        mutation = PendingMutation(MutationKind.UPDATE, week_key, day_index, task)

        try:
            confirmed = await self.api.update_task(week_key, day_index, task_id, task.text, task.status)
        except PlannerError as e:
            mutation.roll_back(e)
            logger.warning(
                "Update failed, local task unchanged",
                week_key=week_key, day_index=day_index, task_id=task_id, error=e.message,
            )
            self.notify("Failed to save task", "error")
            return mutation

        # a delete that ran while the PUT was in flight wins
        if self.store.find_task(week_key, day_index, task_id) is not None:
            self.store.upsert_task(week_key, day_index, confirmed)
            self.store.mark_persisted(week_key, day_index, task_id)
            self.store.mark_clean(week_key, day_index)
        mutation.task = confirmed
        mutation.commit()
        logger.info("Task updated", week_key=week_key, day_index=day_index, task_id=task_id)
        self.notify("Task saved successfully", "success")
        return mutation

    async def delete_task(self, week_key: str, day_index: int, task_id: str) -> PendingMutation:
        mutation = PendingMutation(
            MutationKind.DELETE, week_key, day_index, self.store.find_task(week_key, day_index, task_id)
        )

        error = None
        try:
            await self.api.delete_task(week_key, day_index, task_id)
        except NotFound as e:
            # never reached the server
            error = e
            logger.debug("Delete of unsaved task", week_key=week_key, day_index=day_index, task_id=task_id)
        except PlannerError as e:
            error = e
            logger.error(
                "Delete failed on server, removing locally",
                week_key=week_key, day_index=day_index, task_id=task_id, error=e.message,
            )

        self.store.remove_task(week_key, day_index, task_id)
        self.store.mark_clean(week_key, day_index)
        mutation.commit(error)
        self.notify("Task deleted successfully" if error is None else "Task removed", "success")
        return mutation

    async def clear_week(self, week_key: str) -> PendingMutation:
        mutation = PendingMutation(MutationKind.CLEAR, week_key)

        error = None
        try:
            await self.api.clear_week(week_key)
        except PlannerError as e:
            error = e
            logger.error("Clearing week failed on server", week_key=week_key, error=e.message)

        self.store.drop_week(week_key)
        mutation.commit(error)
        return mutation
