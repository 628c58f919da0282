from __future__ import annotations

from typing import Any, Dict, Mapping

from erold_mcp.core.client import EroldClient

_TOOL = "tech_info"


def _tech_info_path(client: EroldClient, project_id: str) -> str:
    return client.tenant_path(f"/projects/{project_id}/tech-info")


async def get_tech_info(client: EroldClient, project_id: str) -> Dict[str, Any]:
    return await client.get(_tech_info_path(client, project_id), tool=_TOOL)


async def update_tech_info(
    client: EroldClient, project_id: str, data: Mapping[str, Any]
) -> Dict[str, Any]:
    """Partial update: only the top-level sections present in `data` change."""
    return await client.patch(
        _tech_info_path(client, project_id), dict(data), tool=_TOOL
    )
