from __future__ import annotations

from typing import Any, Dict

from erold_mcp.core.client import EroldClient


async def me(client: EroldClient) -> Dict[str, Any]:
    """The user owning the API key."""
    return await client.get("/me", tool="user")
