from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from erold_mcp.core.client import EroldClient

_TOOL = "tasks"


def _task_path(client: EroldClient, task_id: str, suffix: str = "") -> str:
    return client.tenant_path(f"/tasks/{task_id}{suffix}")


async def list_tasks(
    client: EroldClient,
    *,
    project_id: Optional[str] = None,
    status: Optional[str] = None,
    assignee: Optional[str] = None,
    priority: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    params = {
        "projectId": project_id,
        "status": status,
        "assignee": assignee,
        "priority": priority,
        "limit": limit,
    }
    return await client.get(client.tenant_path("/tasks"), params, tool=_TOOL)


async def search_tasks(
    client: EroldClient, query: str, *, limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    return await client.get(
        client.tenant_path("/tasks/search"), {"q": query, "limit": limit}, tool=_TOOL
    )


async def my_tasks(
    client: EroldClient,
    *,
    status: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    return await client.get(
        client.tenant_path("/tasks/mine"),
        {"status": status, "limit": limit},
        tool=_TOOL,
    )


async def blocked_tasks(client: EroldClient) -> List[Dict[str, Any]]:
    return await client.get(client.tenant_path("/tasks/blocked"), tool=_TOOL)


async def get_task(client: EroldClient, task_id: str) -> Dict[str, Any]:
    return await client.get(_task_path(client, task_id), tool=_TOOL)


async def create_task(
    client: EroldClient,
    project_id: str,
    *,
    title: str,
    description: Optional[str] = None,
    priority: Optional[str] = None,
    assigned_to: Optional[str] = None,
) -> Dict[str, Any]:
    body = {
        "title": title,
        "description": description,
        "priority": priority,
        "assignedTo": assigned_to,
    }
    return await client.post(
        client.tenant_path(f"/projects/{project_id}/tasks"),
        {k: v for k, v in body.items() if v is not None},
        tool=_TOOL,
    )


async def update_task(
    client: EroldClient, task_id: str, fields: Mapping[str, Any]
) -> Dict[str, Any]:
    return await client.patch(_task_path(client, task_id), dict(fields), tool=_TOOL)


async def delete_task(client: EroldClient, task_id: str) -> Any:
    return await client.delete(_task_path(client, task_id), tool=_TOOL)


async def start_task(client: EroldClient, task_id: str) -> Dict[str, Any]:
    return await client.post(_task_path(client, task_id, "/start"), tool=_TOOL)


async def complete_task(
    client: EroldClient, task_id: str, summary: Optional[str] = None
) -> Dict[str, Any]:
    body = {"summary": summary} if summary is not None else {}
    return await client.post(
        _task_path(client, task_id, "/complete"), body, tool=_TOOL
    )


async def block_task(client: EroldClient, task_id: str, reason: str) -> Dict[str, Any]:
    return await client.post(
        _task_path(client, task_id, "/block"), {"reason": reason}, tool=_TOOL
    )


async def log_time(
    client: EroldClient, task_id: str, hours: float, notes: Optional[str] = None
) -> Any:
    body: Dict[str, Any] = {"hours": hours}
    if notes is not None:
        body["notes"] = notes
    return await client.post(_task_path(client, task_id, "/log"), body, tool=_TOOL)


async def list_comments(client: EroldClient, task_id: str) -> List[Dict[str, Any]]:
    return await client.get(_task_path(client, task_id, "/comments"), tool=_TOOL)


async def add_comment(client: EroldClient, task_id: str, content: str) -> Dict[str, Any]:
    return await client.post(
        _task_path(client, task_id, "/comments"), {"content": content}, tool=_TOOL
    )
