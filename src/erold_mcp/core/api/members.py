from __future__ import annotations

from typing import Any, Dict, List

from erold_mcp.core.client import EroldClient


async def list_members(client: EroldClient) -> List[Dict[str, Any]]:
    return await client.get(client.tenant_path("/members"), tool="members")


async def get_member(client: EroldClient, uid: str) -> Dict[str, Any]:
    return await client.get(client.tenant_path(f"/members/{uid}"), tool="members")
