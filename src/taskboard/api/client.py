# src/taskboard/api/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import HttpError, NetworkError, ValidationError
from .models import Task, TaskStats, TaskStatus, tasks_from_json

logger = logging.getLogger(__name__)

_JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def _make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


def _body_text(response: httpx.Response) -> str | None:
    try:
        text = response.text
    except Exception:
        return None
    text = (text or "").strip()
    return text[:500] if text else None


class TaskApiClient:
    """
    Async REST gateway for the task service.

    One method per backend capability. Every call is a single attempt:
    - transport failures (refused, DNS, timeout) -> NetworkError
    - non-2xx responses -> HttpError(status_code, body)
    - undecodable/malformed payloads -> ValidationError

    The client owns an httpx.AsyncClient; call aclose() (or use it as an
    async context manager) when the session ends.
    """

    def __init__(
        self,
        base_url: str,
        *,
        connect_timeout: float = 5.0,
        read_timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base = (base_url or "").strip().rstrip("/")
        if not base:
            raise ValueError("API base URL is not set. Set TASKBOARD_API_URL in your .env.")

        # Resources live under <base>/api, health/info endpoints at the root.
        self.base_url = base
        self._http = httpx.AsyncClient(
            base_url=base,
            headers=_JSON_HEADERS,
            timeout=_make_timeout(connect_timeout, read_timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Any, *, transport: httpx.AsyncBaseTransport | None = None) -> TaskApiClient:
        return cls(
            str(getattr(settings, "api_url", "") or ""),
            connect_timeout=float(getattr(settings, "connect_timeout_seconds", 5.0)),
            read_timeout=float(getattr(settings, "read_timeout_seconds", 15.0)),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- low-level ----

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.info("%s %s timed out", method, path)
            raise NetworkError(f"timeout on {method} {path}") from e
        except httpx.TransportError as e:
            logger.info("%s %s failed: %s", method, path, e.__class__.__name__)
            raise NetworkError(f"{e.__class__.__name__} on {method} {path}") from e

        if not response.is_success:
            logger.info("%s %s -> HTTP %s", method, path, response.status_code)
            raise HttpError(
                response.status_code,
                _body_text(response),
                method=method,
                url=str(response.request.url),
            )

        logger.debug("%s %s -> HTTP %s", method, path, response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ValidationError(f"{method} {path}: response is not valid JSON") from e

    # ---- task resources ----

    async def list_tasks(self) -> list[Task]:
        return tasks_from_json(await self._request("GET", "/api/tasks"))

    async def get_task(self, task_id: int) -> Task:
        return Task.from_json(await self._request("GET", f"/api/tasks/{int(task_id)}"))

    async def list_tasks_by_status(self, status: TaskStatus | str) -> list[Task]:
        st = TaskStatus.parse(status)
        return tasks_from_json(await self._request("GET", f"/api/tasks/status/{st.value}"))

    async def list_active_tasks(self) -> list[Task]:
        return tasks_from_json(await self._request("GET", "/api/tasks/active"))

    async def get_stats(self) -> TaskStats:
        return TaskStats.from_json(await self._request("GET", "/api/tasks/stats"))

    async def create_task(self, task: Task) -> Task:
        created = Task.from_json(await self._request("POST", "/api/tasks", json=task.to_payload()))
        logger.info("Created task id=%s", created.id)
        return created

    async def update_task(self, task_id: int, task: Task) -> Task:
        updated = Task.from_json(
            await self._request("PUT", f"/api/tasks/{int(task_id)}", json=task.to_payload())
        )
        logger.info("Updated task id=%s", task_id)
        return updated

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/api/tasks/{int(task_id)}")
        logger.info("Deleted task id=%s", task_id)

    # ---- service endpoints ----

    async def health(self) -> dict[str, str]:
        data = await self._request("GET", "/health")
        return {str(k): str(v) for k, v in (data or {}).items()} if isinstance(data, dict) else {}

    async def info(self) -> dict[str, str]:
        data = await self._request("GET", "/info")
        return {str(k): str(v) for k, v in (data or {}).items()} if isinstance(data, dict) else {}
