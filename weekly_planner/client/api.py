"""Async HTTP client for the week task endpoints."""
import os
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from weekly_planner.errors import InternalError, InvalidPayload, NetworkFailure, NotFound, PlannerError
from weekly_planner.schemas.task import TaskItem, TaskStatus
from weekly_planner.utils.logger import get_logger

logger = get_logger(__name__)

PLANNER_API_URL = os.environ.get("PLANNER_API_URL", "http://localhost:4000")
PLANNER_API_TIMEOUT = float(os.environ.get("PLANNER_API_TIMEOUT", "10"))

ClientDays = Dict[int, List[TaskItem]]


def decode_days(raw: Any) -> ClientDays:
    """Turn a JSON ``days`` object into ``{day_index: [TaskItem, ...]}``."""
    if not isinstance(raw, dict):
        raise InternalError("Unexpected response: 'days' is not an object")
    try:
        return {
            int(key): [TaskItem.model_validate(task) for task in (tasks or [])]
            for key, tasks in raw.items()
        }
    except (ValidationError, ValueError, TypeError) as e:
        raise InternalError("Unexpected response: malformed task list") from e


def _decode_task(body: Any) -> TaskItem:
    try:
        return TaskItem.model_validate(body["task"])
    except (ValidationError, KeyError, TypeError) as e:
        raise InternalError("Unexpected response: malformed task") from e


def encode_days(days: ClientDays) -> Dict[str, List[Dict[str, str]]]:
    return {str(index): [task.to_document() for task in tasks] for index, tasks in days.items()}


class WeekApi:
    """Thin wrapper over ``httpx.AsyncClient`` that maps failures to planner errors.

    Transport errors and timeouts become ``NetworkFailure``; 400, 404 and 5xx
    responses become ``InvalidPayload``, ``NotFound`` and ``InternalError``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or PLANNER_API_URL,
            timeout=timeout if timeout is not None else PLANNER_API_TIMEOUT,
            transport=transport,
            headers=headers,
        )

    async def __aenter__(self) -> "WeekApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Optional[Any] = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("Request failed", method=method, path=path, error=str(e))
            raise NetworkFailure(f"{method} {path} failed: {e}") from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise InternalError(f"{method} {path} returned an invalid body") from e

        message = self._error_message(response)
        if response.status_code == 400:
            raise InvalidPayload(message)
        if response.status_code == 404:
            raise NotFound(message)
        if response.status_code >= 500:
            raise InternalError(message)
        error = PlannerError(message)
        error.status_code = response.status_code
        raise error

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP {response.status_code}"

    async def get_week(self, week_key: str) -> ClientDays:
        return decode_days(await self._request("GET", f"/api/tasks/{week_key}"))

    async def put_week(self, week_key: str, days: ClientDays) -> ClientDays:
        """Upsert the whole week; returns the days as stored by the server."""
        body = await self._request("POST", f"/api/tasks/{week_key}", json={"days": encode_days(days)})
        return decode_days(body.get("days") if isinstance(body, dict) else None)

    async def append_task(self, week_key: str, day_index: int, task: TaskItem) -> TaskItem:
        body = await self._request("POST", f"/api/tasks/{week_key}/{day_index}", json=task.to_document())
        return _decode_task(body)

    async def update_task(
        self,
        week_key: str,
        day_index: int,
        task_id: str,
        text: str,
        status: TaskStatus = TaskStatus.UNSET,
    ) -> TaskItem:
        body = await self._request(
            "PUT",
            f"/api/tasks/{week_key}/{day_index}/{task_id}",
            json={"text": text, "status": TaskStatus(status).value},
        )
        return _decode_task(body)

    async def delete_task(self, week_key: str, day_index: int, task_id: str) -> ClientDays:
        body = await self._request("DELETE", f"/api/tasks/{week_key}/{day_index}/{task_id}")
        return decode_days(body.get("days") if isinstance(body, dict) else None)

    async def clear_week(self, week_key: str) -> bool:
        body = await self._request("DELETE", f"/api/tasks/{week_key}")
        return isinstance(body, dict) and bool(body.get("cleared"))
