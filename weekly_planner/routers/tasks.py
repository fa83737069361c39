"""Week task router."""
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from weekly_planner.db.config import get_session
from weekly_planner.errors import PlannerError
from weekly_planner.schemas.task import (
    ClearResponse,
    TaskDeleteResponse,
    TaskItem,
    TaskResponse,
    TaskUpdate,
    WeekPayload,
    WeekSaveResponse,
)
from weekly_planner.services.week_service import WeekService

router = APIRouter(tags=["Tasks"])  # No prefix since main.py adds /api prefix


def get_week_service(session: Session = Depends(get_session)) -> WeekService:
    """Dependency for getting WeekService instance."""
    return WeekService(session)


def _as_http(error: PlannerError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


@router.get("/tasks/{week_key}", response_model=Dict[str, List[TaskItem]])
async def get_week(week_key: str, service: WeekService = Depends(get_week_service)):
    """Get the day lists of a week. Unknown weeks are empty, never 404."""
    return service.get_week(week_key)


@router.post("/tasks/{week_key}", response_model=WeekSaveResponse)
async def put_week(
    week_key: str,
    payload: WeekPayload,
    service: WeekService = Depends(get_week_service),
):
    """Create or replace the whole week."""
    try:
        days = service.put_week(week_key, payload.days)
    except PlannerError as e:
        raise _as_http(e)
    return WeekSaveResponse(week_key=week_key, days=days)


@router.post(
    "/tasks/{week_key}/{day_index}",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def append_task(
    week_key: str,
    day_index: int,
    task: TaskItem,
    service: WeekService = Depends(get_week_service),
):
    """Add one task to a day without resending the rest of the week."""
    try:
        saved = service.append_task(week_key, day_index, task)
    except PlannerError as e:
        raise _as_http(e)
    return TaskResponse(task=saved)


@router.put("/tasks/{week_key}/{day_index}/{task_id}", response_model=TaskResponse)
async def update_task(
    week_key: str,
    day_index: int,
    task_id: str,
    task_data: TaskUpdate,
    service: WeekService = Depends(get_week_service),
):
    """Update the text and status of an existing task."""
    try:
        task = service.update_task(week_key, day_index, task_id, task_data.text, task_data.status)
    except PlannerError as e:
        raise _as_http(e)
    return TaskResponse(task=task)


@router.delete("/tasks/{week_key}/{day_index}/{task_id}", response_model=TaskDeleteResponse)
async def delete_task(
    week_key: str,
    day_index: int,
    task_id: str,
    service: WeekService = Depends(get_week_service),
):
    """Delete one task. An id missing from an existing day list is not an error."""
    try:
        days = service.delete_task(week_key, day_index, task_id)
    except PlannerError as e:
        raise _as_http(e)
    return TaskDeleteResponse(days=days)


@router.delete("/tasks/{week_key}", response_model=ClearResponse)
async def clear_week(week_key: str, service: WeekService = Depends(get_week_service)):
    """Delete the whole week."""
    try:
        service.clear_week(week_key)
    except PlannerError as e:
        raise _as_http(e)
    return ClearResponse()
