"""Board controllers: the weekly grid and its task cards, without rendering."""
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from weekly_planner.client.store import TaskStore
from weekly_planner.client.sync import PendingMutation, SyncClient, validate_text
from weekly_planner.client.week import day_dates, new_task_id, week_key_for
from weekly_planner.errors import InvalidPayload
from weekly_planner.schemas.task import DAYS_PER_WEEK, TaskItem, TaskStatus, normalize_status


class CardMode(str, Enum):
    SAVE = "save"  # text is editable, the next click saves it
    EDIT = "edit"  # text is shown, the next click reopens it


class TaskCard:
    """One task box in a day column.

    While a save or delete is in flight the card is busy and ignores further
    clicks; other cards stay usable.
    """

    def __init__(self, sync: SyncClient, week_key: str, day_index: int, task: Optional[TaskItem] = None):
        self.sync = sync
        self.week_key = week_key
        self.day_index = day_index
        self.task_id = task.id if task else new_task_id()
        self.text = task.text if task else ""
        self.status = task.status if task else TaskStatus.UNSET
        self.mode = CardMode.EDIT if task else CardMode.SAVE
        self.busy = False
        self.removed = False

    @property
    def buttons_enabled(self) -> bool:
        return not self.busy and not self.removed

    @property
    def label(self) -> str:
        return f"{self.text} - {self.status.value}"

    def begin_edit(self) -> None:
        if self.buttons_enabled and self.mode == CardMode.EDIT:
            self.mode = CardMode.SAVE

    async def save(self, text: str, status: Union[TaskStatus, str] = TaskStatus.UNSET) -> Optional[PendingMutation]:
        """Save the card. Returns None when the click was ignored or the input was rejected."""
        if not self.buttons_enabled or self.mode != CardMode.SAVE:
            return None
        try:
            text = validate_text(text)
        except InvalidPayload as e:
            self.sync.notify(e.message, "error")
            return None

        try:
            status = TaskStatus(normalize_status(status))
        except ValueError:
            self.sync.notify(f"Invalid status: {status}", "error")
            return None

        self.busy = True
        try:
            mutation = await self.sync.save_task(self.week_key, self.day_index, self.task_id, text, status)
        finally:
            self.busy = False

        if mutation.committed:
            self.text = mutation.task.text
            self.status = mutation.task.status
            self.mode = CardMode.EDIT
        return mutation

    async def delete(self) -> Optional[PendingMutation]:
        if not self.buttons_enabled:
            return None
        self.busy = True
        try:
            mutation = await self.sync.delete_task(self.week_key, self.day_index, self.task_id)
        finally:
            self.busy = False
        self.removed = True
        return mutation


class WeekBoard:
    """The 7-day grid for the current week, built from an injected store."""

    def __init__(self, store: TaskStore, sync: SyncClient):
        self.store = store
        self.sync = sync
        self.cards: Dict[int, List[TaskCard]] = {index: [] for index in range(DAYS_PER_WEEK)}

    @property
    def week_key(self) -> Optional[str]:
        return self.store.current_week_key

    @property
    def dates(self) -> List[date]:
        return day_dates(self.week_key) if self.week_key else []

    async def open_week(self, when: Union[str, date, datetime, None] = None) -> str:
        """Load the week containing ``when`` (a date or a week key) and rebuild the cards."""
        week_key = when if isinstance(when, str) else week_key_for(when)
        await self.sync.load_week(week_key)
        self.render()
        return week_key

    def render(self) -> None:
        """Rebuild every card from the store."""
        self.cards = {index: [] for index in range(DAYS_PER_WEEK)}
        if self.week_key is None:
            return
        for index, tasks in self.store.week(self.week_key).items():
            if 0 <= index < DAYS_PER_WEEK:
                self.cards[index] = [TaskCard(self.sync, self.week_key, index, task) for task in tasks]

    def add_card(self, day_index: int) -> TaskCard:
        """Add an empty card in save mode to a day column."""
        if self.week_key is None:
            raise RuntimeError("No week is open")
        if not 0 <= day_index < DAYS_PER_WEEK:
            raise InvalidPayload(f"Invalid day index: {day_index!r}")
        card = TaskCard(self.sync, self.week_key, day_index)
        self.cards[day_index].append(card)
        return card

    async def delete_card(self, card: TaskCard) -> Optional[PendingMutation]:
        mutation = await card.delete()
        if card.removed and card in self.cards[card.day_index]:
            self.cards[card.day_index].remove(card)
        return mutation

    async def clear(self) -> Optional[PendingMutation]:
        if self.week_key is None:
            return None
        week_key = self.week_key
        mutation = await self.sync.clear_week(week_key)
        self.store.current_week_key = week_key
        self.render()
        return mutation
