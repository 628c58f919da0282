from __future__ import annotations

from typing import Any, Dict

from erold_mcp.core.client import EroldClient

_TOOL = "context"


async def get_context(client: EroldClient) -> Dict[str, Any]:
    return await client.get(client.tenant_path("/context"), tool=_TOOL)


async def get_dashboard(client: EroldClient) -> Dict[str, Any]:
    return await client.get(client.tenant_path("/dashboard"), tool=_TOOL)


async def get_stats(client: EroldClient) -> Dict[str, Any]:
    return await client.get(client.tenant_path("/stats"), tool=_TOOL)


async def get_workload(client: EroldClient) -> Dict[str, Any]:
    return await client.get(client.tenant_path("/workload"), tool=_TOOL)
