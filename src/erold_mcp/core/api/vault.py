from __future__ import annotations

from typing import Any, Dict, List, Mapping

from erold_mcp.core.client import EroldClient

_TOOL = "vault"


def _vault_path(client: EroldClient, project_id: str, entry_id: str = "") -> str:
    suffix = f"/{entry_id}" if entry_id else ""
    return client.tenant_path(f"/projects/{project_id}/vault{suffix}")


async def list_entries(client: EroldClient, project_id: str) -> List[Dict[str, Any]]:
    return await client.get(_vault_path(client, project_id), tool=_TOOL)


async def get_entry(
    client: EroldClient, project_id: str, entry_id: str
) -> Dict[str, Any]:
    return await client.get(_vault_path(client, project_id, entry_id), tool=_TOOL)


async def create_entry(
    client: EroldClient, project_id: str, data: Mapping[str, Any]
) -> Dict[str, Any]:
    body = {k: v for k, v in data.items() if v is not None}
    return await client.post(_vault_path(client, project_id), body, tool=_TOOL)


async def update_entry(
    client: EroldClient, project_id: str, entry_id: str, data: Mapping[str, Any]
) -> Dict[str, Any]:
    return await client.patch(
        _vault_path(client, project_id, entry_id), dict(data), tool=_TOOL
    )


async def delete_entry(client: EroldClient, project_id: str, entry_id: str) -> Any:
    return await client.delete(_vault_path(client, project_id, entry_id), tool=_TOOL)
