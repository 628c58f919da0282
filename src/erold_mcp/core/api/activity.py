from __future__ import annotations

from typing import Any, Dict, List, Optional

from erold_mcp.core.client import EroldClient


async def list_activity(
    client: EroldClient,
    *,
    limit: Optional[int] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    params = {"limit": limit, "entityType": entity_type, "entityId": entity_id}
    return await client.get(client.tenant_path("/activity"), params, tool="activity")


async def task_activity(client: EroldClient, task_id: str) -> List[Dict[str, Any]]:
    return await client.get(
        client.tenant_path(f"/tasks/{task_id}/activity"), tool="activity"
    )
