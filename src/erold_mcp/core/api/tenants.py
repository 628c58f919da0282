"""Tenant lookups. These paths are not tenant-scoped."""

from __future__ import annotations

from typing import Any, Dict, List

from erold_mcp.core.client import EroldClient


async def list_tenants(client: EroldClient) -> List[Dict[str, Any]]:
    return await client.get("/tenants", tool="tenants")


async def get_tenant(client: EroldClient, tenant_id: str) -> Dict[str, Any]:
    return await client.get(f"/tenants/{tenant_id}", tool="tenants")
