from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from erold_mcp.core.client import EroldClient
from erold_mcp.core.mappers import (
    project_from_wire,
    project_to_wire,
    projects_from_wire,
)

_TOOL = "projects"


def _project_path(client: EroldClient, project_id: str, suffix: str = "") -> str:
    return client.tenant_path(f"/projects/{project_id}{suffix}")


async def list_projects(
    client: EroldClient, *, status: Optional[str] = None
) -> List[Dict[str, Any]]:
    payload = await client.get(
        client.tenant_path("/projects"), {"status": status}, tool=_TOOL
    )
    return projects_from_wire(payload)


async def get_project(client: EroldClient, project_id: str) -> Dict[str, Any]:
    payload = await client.get(_project_path(client, project_id), tool=_TOOL)
    return project_from_wire(payload)


async def create_project(
    client: EroldClient,
    *,
    name: str,
    description: Optional[str] = None,
    slug: Optional[str] = None,
) -> Dict[str, Any]:
    """New projects always start in the `planning` status."""
    body = project_to_wire(
        {"name": name, "description": description, "slug": slug, "status": "planning"}
    )
    payload = await client.post(client.tenant_path("/projects"), body, tool=_TOOL)
    return project_from_wire(payload)


async def update_project(
    client: EroldClient, project_id: str, fields: Mapping[str, Any]
) -> Dict[str, Any]:
    payload = await client.patch(
        _project_path(client, project_id), project_to_wire(fields), tool=_TOOL
    )
    return project_from_wire(payload)


async def delete_project(client: EroldClient, project_id: str) -> Any:
    return await client.delete(_project_path(client, project_id), tool=_TOOL)


async def project_stats(client: EroldClient, project_id: str) -> Dict[str, Any]:
    return await client.get(_project_path(client, project_id, "/stats"), tool=_TOOL)


async def project_tasks(
    client: EroldClient,
    project_id: str,
    *,
    status: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    return await client.get(
        _project_path(client, project_id, "/tasks"),
        {"status": status, "limit": limit},
        tool=_TOOL,
    )
