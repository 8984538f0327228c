# tests/test_client.py

from __future__ import annotations

import json

import httpx
import pytest

from taskboard.api.client import TaskApiClient
from taskboard.api.errors import HttpError, NetworkError, ValidationError
from taskboard.api.models import Task, TaskStatus

from .fakes import RestBackend


@pytest.fixture()
def backend() -> RestBackend:
    b = RestBackend()
    b.add(title="Write docs", status="TODO")
    b.add(title="Fix login", status="IN_PROGRESS", priority="URGENT")
    b.add(title="Old idea", status="CANCELLED")
    return b


@pytest.fixture()
def client(backend: RestBackend) -> TaskApiClient:
    return TaskApiClient("http://testserver/", transport=backend.transport())


@pytest.mark.asyncio
async def test_list_and_get(client: TaskApiClient) -> None:
    tasks = await client.list_tasks()
    assert [t.title for t in tasks] == ["Write docs", "Fix login", "Old idea"]

    task = await client.get_task(2)
    assert task.status is TaskStatus.IN_PROGRESS
    await client.aclose()


@pytest.mark.asyncio
async def test_requests_hit_api_paths_with_json_headers(client: TaskApiClient, backend: RestBackend) -> None:
    await client.list_tasks_by_status("in_progress")
    await client.list_active_tasks()
    await client.get_stats()

    paths = [r.url.path for r in backend.requests]
    assert paths == ["/api/tasks/status/IN_PROGRESS", "/api/tasks/active", "/api/tasks/stats"]
    assert all(r.headers["accept"] == "application/json" for r in backend.requests)


@pytest.mark.asyncio
async def test_create_then_get_round_trip(client: TaskApiClient, backend: RestBackend) -> None:
    draft = Task(title="Release", description="tag and publish", status="TODO", priority="HIGH")

    created = await client.create_task(draft)
    fetched = await client.get_task(created.id)

    assert created.id == 4
    assert fetched.same_content(draft)
    body = json.loads(backend.requests[0].content)
    assert "id" not in body
    assert "createdAt" not in body


@pytest.mark.asyncio
async def test_update_sends_client_fields(client: TaskApiClient, backend: RestBackend) -> None:
    updated = await client.update_task(1, Task(id=999, title="Write better docs", status="DONE"))

    assert updated.id == 1
    assert updated.status is TaskStatus.DONE
    request = backend.requests[0]
    assert request.method == "PUT"
    assert request.url.path == "/api/tasks/1"
    assert "id" not in json.loads(request.content)


@pytest.mark.asyncio
async def test_delete_then_missing(client: TaskApiClient) -> None:
    await client.delete_task(1)

    with pytest.raises(HttpError) as excinfo:
        await client.delete_task(1)
    assert excinfo.value.status_code == 404
    assert excinfo.value.method == "DELETE"


@pytest.mark.asyncio
async def test_stats_shape(client: TaskApiClient) -> None:
    stats = await client.get_stats()
    assert (stats.total, stats.todo, stats.in_progress, stats.done, stats.cancelled) == (3, 1, 1, 0, 1)


@pytest.mark.asyncio
async def test_health_and_info(client: TaskApiClient) -> None:
    assert (await client.health())["status"] == "UP"
    assert (await client.info())["version"] == "1.0.0"


@pytest.mark.asyncio
async def test_server_error_carries_status_and_body() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))
    client = TaskApiClient("http://testserver", transport=transport)

    with pytest.raises(HttpError) as excinfo:
        await client.list_tasks()

    assert excinfo.value.status_code == 500
    assert excinfo.value.body == "boom"


@pytest.mark.asyncio
@pytest.mark.parametrize("exc_type", [httpx.ConnectError, httpx.ReadTimeout])
async def test_transport_failures_become_network_error(exc_type) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise exc_type("down", request=request)

    client = TaskApiClient("http://testserver", transport=httpx.MockTransport(handler))

    with pytest.raises(NetworkError):
        await client.get_stats()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_non_json_body_is_validation_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
    client = TaskApiClient("http://testserver", transport=transport)

    with pytest.raises(ValidationError):
        await client.list_tasks()


def test_base_url_is_required() -> None:
    with pytest.raises(ValueError):
        TaskApiClient("  ")
