import json

import pytest
import respx
from conftest import API_URL, TENANT_URL
from erold_mcp.core.tools import context as context_tools
from httpx import Response


def _data(payload):
    return Response(200, json={"success": True, "data": payload})


@pytest.mark.asyncio
@respx.mock
async def test_get_context_keeps_present_sections(client):
    respx.get(f"{TENANT_URL}/context").mock(
        return_value=_data(
            {
                "activeProject": {"id": "p1", "title": "Alpha", "status": "active"},
                "currentTasks": [{"id": "t1", "title": "Docs", "status": "todo"}],
                "blockers": [{"id": "t2", "title": "Login"}],
                "recentActivity": [
                    {"description": f"event {i}", "createdAt": "2026-10-01"}
                    for i in range(12)
                ],
                "relevantKnowledge": [],
            }
        )
    )

    async with client:
        out = json.loads(await context_tools.get_context(client))

    assert out["activeProject"]["name"] == "Alpha"
    assert out["activeProject"]["description"] == "No description"
    assert out["currentTasks"][0]["assignee"] == "Unassigned"
    assert out["blockers"][0]["reason"] == "No reason provided"
    assert len(out["recentActivity"]) == 10
    assert "relevantKnowledge" not in out


@pytest.mark.asyncio
@respx.mock
async def test_get_context_empty_workspace(client):
    respx.get(f"{TENANT_URL}/context").mock(return_value=_data({}))

    async with client:
        out = await context_tools.get_context(client)

    assert out.startswith("No context available.")


@pytest.mark.asyncio
@respx.mock
async def test_dashboard_overview_defaults(client):
    respx.get(f"{TENANT_URL}/dashboard").mock(
        return_value=_data(
            {"taskCount": 4, "upcomingDue": [{"id": "t1", "title": "Docs"}]}
        )
    )

    async with client:
        out = json.loads(await context_tools.get_dashboard(client))

    assert out["overview"] == {
        "totalProjects": 0,
        "totalTasks": 4,
        "openTasks": 0,
        "blockedTasks": 0,
    }
    assert out["upcomingDue"][0]["dueDate"] == "No date"
    assert "myTasks" not in out


@pytest.mark.asyncio
@respx.mock
async def test_stats_time_tracking(client):
    respx.get(f"{TENANT_URL}/stats").mock(
        return_value=_data({"totalTasks": 9, "totalTimeLogged": 12.5})
    )

    async with client:
        out = json.loads(await context_tools.get_stats(client))

    assert out["tasks"]["total"] == 9
    assert out["timeTracking"] == {"totalLogged": "12.5h", "thisWeek": None}
    assert out["byStatus"] == {}


@pytest.mark.asyncio
@respx.mock
async def test_workload(client):
    respx.get(f"{TENANT_URL}/workload").mock(
        side_effect=[
            _data(
                {
                    "members": [{"name": "Ada", "assignedTasks": 3, "utilization": 75}],
                    "summary": {"totalTasks": 3, "averageLoad": 75},
                }
            ),
            _data({"members": []}),
        ]
    )

    async with client:
        out = json.loads(await context_tools.get_workload(client))
        empty = await context_tools.get_workload(client)

    assert out["members"][0]["utilization"] == "75%"
    assert out["summary"]["averageLoad"] == "75%"
    assert out["summary"]["unassigned"] == 0
    assert empty == "No workload data available."


@pytest.mark.asyncio
@respx.mock
async def test_list_members_falls_back_to_email(client):
    respx.get(f"{TENANT_URL}/members").mock(
        return_value=_data(
            [{"userId": "u1", "email": "ada@example.com", "role": "owner"}]
        )
    )

    async with client:
        out = json.loads(await context_tools.list_members(client))

    assert out == [
        {"id": "u1", "name": "ada@example.com", "email": "ada@example.com", "role": "owner"}
    ]


@pytest.mark.asyncio
@respx.mock
async def test_list_activity_filters(client):
    route = respx.get(f"{TENANT_URL}/activity").mock(
        return_value=_data(
            [{"type": "created", "entityType": "task", "entityId": "t1"}]
        )
    )

    async with client:
        out = json.loads(
            await context_tools.list_activity(client, entity_type="task", entity_id="t1")
        )

    assert dict(route.calls[0].request.url.params) == {
        "limit": "20",
        "entityType": "task",
        "entityId": "t1",
    }
    assert out[0]["entity"] == {"type": "task", "id": "t1"}


@pytest.mark.asyncio
@respx.mock
async def test_whoami_and_tenants(client):
    respx.get(f"{API_URL}/me").mock(
        return_value=_data({"id": "u1", "name": "Ada", "email": "ada@example.com"})
    )
    respx.get(f"{API_URL}/tenants").mock(
        return_value=_data([{"id": "acme", "name": "Acme", "slug": "acme"}])
    )

    async with client:
        me = json.loads(await context_tools.whoami(client))
        tenants = json.loads(await context_tools.list_tenants(client))

    assert me["tenant"] == "acme"
    assert tenants[0]["slug"] == "acme"


@pytest.mark.asyncio
@respx.mock
async def test_members_error_rendered(client):
    respx.get(f"{TENANT_URL}/members").mock(
        return_value=Response(401, json={"message": "Invalid API key"})
    )

    async with client:
        out = await context_tools.list_members(client)

    assert out == "Error listing members: API Error (401): Invalid API key"
