import json

import pytest
import respx
from conftest import TENANT_URL
from erold_mcp.core.tools import projects as project_tools
from erold_mcp.core.tools.projects import slugify
from httpx import Response


@pytest.mark.asyncio
@respx.mock
async def test_list_projects_exposes_name(client):
    respx.get(f"{TENANT_URL}/projects").mock(
        return_value=Response(
            200,
            json={
                "data": [
                    {"id": "p1", "title": "Alpha", "status": "active", "taskCount": 3},
                ]
            },
        )
    )

    async with client:
        rows = json.loads(await project_tools.list_projects(client))

    assert rows == [
        {
            "id": "p1",
            "name": "Alpha",
            "slug": None,
            "status": "active",
            "taskCount": 3,
            "completedTasks": 0,
        }
    ]


@pytest.mark.asyncio
@respx.mock
async def test_list_projects_empty(client):
    respx.get(f"{TENANT_URL}/projects").mock(return_value=Response(200, json={"data": []}))

    async with client:
        assert await project_tools.list_projects(client) == "No projects found."


@pytest.mark.asyncio
@respx.mock
async def test_get_project_progress(client):
    respx.get(f"{TENANT_URL}/projects/p1").mock(
        return_value=Response(
            200,
            json={"data": {"id": "p1", "title": "Alpha", "taskCount": 8, "completedTasks": 2}},
        )
    )

    async with client:
        detail = json.loads(await project_tools.get_project(client, "p1"))

    assert detail["name"] == "Alpha"
    assert detail["progress"] == "25%"
    assert detail["description"] == "No description"


@pytest.mark.asyncio
@respx.mock
async def test_create_project_derives_slug_and_sends_title(client):
    route = respx.post(f"{TENANT_URL}/projects").mock(
        return_value=Response(
            201,
            json={
                "data": {
                    "id": "p2",
                    "title": "My New App",
                    "slug": "my-new-app",
                    "status": "planning",
                }
            },
        )
    )

    async with client:
        out = json.loads(await project_tools.create_project(client, "My New App!"))

    assert json.loads(route.calls[0].request.content) == {
        "title": "My New App!",
        "slug": "my-new-app",
        "status": "planning",
    }
    assert out["project"]["name"] == "My New App"
    assert out["project"]["status"] == "planning"


@pytest.mark.asyncio
@respx.mock
async def test_update_project_allows_clearing_description(client):
    route = respx.patch(f"{TENANT_URL}/projects/p1").mock(
        return_value=Response(200, json={"data": {"id": "p1", "title": "Renamed"}})
    )

    async with client:
        out = json.loads(
            await project_tools.update_project(
                client, "p1", name="Renamed", description=""
            )
        )

    assert json.loads(route.calls[0].request.content) == {
        "title": "Renamed",
        "description": "",
    }
    assert out["project"]["name"] == "Renamed"


@pytest.mark.asyncio
async def test_update_project_requires_a_field(client):
    out = await project_tools.update_project(client, "p1")
    assert out.startswith("No updates provided")


@pytest.mark.asyncio
@respx.mock
async def test_project_stats_combines_both_calls(client):
    respx.get(f"{TENANT_URL}/projects/p1").mock(
        return_value=Response(200, json={"data": {"id": "p1", "title": "Alpha"}})
    )
    respx.get(f"{TENANT_URL}/projects/p1/stats").mock(
        return_value=Response(
            200,
            json={
                "data": {
                    "totalTasks": 10,
                    "completedTasks": 5,
                    "byStatus": {"done": 5},
                    "totalTimeLogged": 12,
                }
            },
        )
    )

    async with client:
        out = json.loads(await project_tools.get_project_stats(client, "p1"))

    assert out["project"]["name"] == "Alpha"
    assert out["stats"]["progress"] == "50%"
    assert out["stats"]["byStatus"] == {"done": 5}
    assert out["stats"]["totalTimeLogged"] == "12h"


@pytest.mark.asyncio
@respx.mock
async def test_project_tasks(client):
    route = respx.get(f"{TENANT_URL}/projects/p1/tasks").mock(
        return_value=Response(200, json={"data": [{"id": "t1", "title": "A"}]})
    )

    async with client:
        out = json.loads(await project_tools.get_project_tasks(client, "p1", "done"))

    assert out["count"] == 1
    assert out["tasks"][0]["assignee"] == "Unassigned"
    assert dict(route.calls[0].request.url.params) == {"status": "done", "limit": "50"}


def test_slugify():
    assert slugify("  Hello, World  ") == "hello-world"
    assert slugify("API v2") == "api-v2"
