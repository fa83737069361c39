"""Tests for weekly_planner.client.board — task cards and the week grid."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from weekly_planner.client.api import WeekApi
from weekly_planner.client.board import CardMode, TaskCard, WeekBoard
from weekly_planner.client.store import TaskStore
from weekly_planner.client.sync import SyncClient
from weekly_planner.errors import NetworkFailure
from weekly_planner.schemas.task import TaskItem, TaskStatus

WEEK = "2024-01-01"


@pytest.fixture
def api():
    fake = MagicMock(spec=WeekApi)
    fake.get_week = AsyncMock(return_value={2: [TaskItem(id="a", text="saved", status="Completed")]})
    fake.put_week = AsyncMock(side_effect=lambda week_key, days: days)
    fake.update_task = AsyncMock(
        side_effect=lambda week_key, day_index, task_id, text, status: TaskItem(id=task_id, text=text, status=status)
    )
    fake.delete_task = AsyncMock(return_value={})
    fake.clear_week = AsyncMock(return_value=True)
    return fake


@pytest.fixture
def notify():
    return MagicMock()


@pytest.fixture
def board(api, notify):
    store = TaskStore()
    return WeekBoard(store, SyncClient(store, api, notify=notify))


class TestOpenWeek:
    @pytest.mark.asyncio
    async def test_builds_cards_from_store(self, board):
        week_key = await board.open_week(date(2024, 1, 4))
        assert week_key == WEEK
        assert board.dates[0] == date(2024, 1, 1)
        [card] = board.cards[2]
        assert card.mode == CardMode.EDIT
        assert card.label == "saved - Completed"
        assert all(board.cards[i] == [] for i in (0, 1, 3, 4, 5, 6))

    @pytest.mark.asyncio
    async def test_failed_load_shows_empty_week(self, board, api):
        api.get_week.side_effect = NetworkFailure("offline")
        await board.open_week(WEEK)
        assert all(cards == [] for cards in board.cards.values())


class TestTaskCard:
    @pytest.mark.asyncio
    async def test_new_card_saves_and_switches_to_edit(self, board, api):
        await board.open_week(WEEK)
        card = board.add_card(0)
        assert card.mode == CardMode.SAVE

        mutation = await card.save("  write report ", "In Process")

        assert mutation.committed
        assert card.mode == CardMode.EDIT
        assert card.label == "write report - In Process"
        api.put_week.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_text_is_rejected(self, board, api, notify):
        await board.open_week(WEEK)
        card = board.add_card(0)
        assert await card.save("   ") is None
        notify.assert_called_with("Task cannot be empty", "error")
        api.put_week.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["", "default", None])
    async def test_unpicked_status_saves_as_unset(self, board, api, status):
        await board.open_week(WEEK)
        card = board.add_card(0)

        mutation = await card.save("write report", status)

        assert mutation.committed
        assert card.status == TaskStatus.UNSET
        assert card.label == "write report - No status"

    @pytest.mark.asyncio
    async def test_unknown_status_is_rejected(self, board, api, notify):
        await board.open_week(WEEK)
        card = board.add_card(0)

        assert await card.save("write report", "Someday") is None
        notify.assert_called_with("Invalid status: Someday", "error")
        assert card.mode == CardMode.SAVE
        api.put_week.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_edit_existing_card_updates(self, board, api):
        await board.open_week(WEEK)
        [card] = board.cards[2]

        assert await card.save("ignored") is None  # still in edit mode
        card.begin_edit()
        mutation = await card.save("saved again", TaskStatus.ABANDONED)

        assert mutation.committed
        api.update_task.assert_awaited_once_with(WEEK, 2, "a", "saved again", TaskStatus.ABANDONED)

    @pytest.mark.asyncio
    async def test_failed_create_keeps_card_in_save_mode(self, board, api):
        await board.open_week(WEEK)
        api.put_week.side_effect = NetworkFailure("offline")
        card = board.add_card(1)

        mutation = await card.save("write report", TaskStatus.IN_PROCESS)

        assert mutation.rolled_back
        assert card.mode == CardMode.SAVE
        assert card.buttons_enabled
        assert board.store.day(WEEK, 1) == []

    @pytest.mark.asyncio
    async def test_busy_card_ignores_clicks_but_others_work(self, board, api):
        await board.open_week(WEEK)
        release = asyncio.Event()

        async def slow_put_week(week_key, days):
            await release.wait()
            return days

        api.put_week.side_effect = slow_put_week
        first = board.add_card(0)
        second = board.add_card(3)

        in_flight = asyncio.create_task(first.save("first"))
        await asyncio.sleep(0)
        assert first.busy and not first.buttons_enabled
        assert await first.save("double click") is None
        assert await first.delete() is None

        other = asyncio.create_task(second.save("second"))
        await asyncio.sleep(0)
        assert second.busy

        release.set()
        results = await asyncio.gather(in_flight, other)
        assert all(result.committed for result in results)
        assert not first.busy and not second.busy

    @pytest.mark.asyncio
    async def test_delete_removes_card(self, board, api):
        await board.open_week(WEEK)
        [card] = board.cards[2]
        await board.delete_card(card)
        assert board.cards[2] == []
        assert card.removed and not card.buttons_enabled
        api.delete_task.assert_awaited_once_with(WEEK, 2, "a")


class TestClear:
    @pytest.mark.asyncio
    async def test_clear_empties_board(self, board, api):
        await board.open_week(WEEK)
        await board.clear()
        api.clear_week.assert_awaited_once_with(WEEK)
        assert board.week_key == WEEK
        assert all(cards == [] for cards in board.cards.values())

    def test_add_card_needs_open_week(self, board):
        with pytest.raises(RuntimeError):
            board.add_card(0)


class TestStandaloneCard:
    def test_defaults(self):
        card = TaskCard(MagicMock(), WEEK, 4)
        assert card.task_id.startswith("task_")
        assert card.status == TaskStatus.UNSET
        assert card.mode == CardMode.SAVE
