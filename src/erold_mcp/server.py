from __future__ import annotations

from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from erold_mcp.core.client import EroldClient
from erold_mcp.core.guidelines import GuidelineService
from erold_mcp.core.registry import register_discovered_tools
from erold_mcp.core.tools import context as context_tools
from erold_mcp.core.tools import guidelines as guideline_tools
from erold_mcp.core.tools import projects as project_tools

SERVER_NAME = "erold"

RESOURCES = (
    ("erold://context", "context", "AI-ready context for the current workspace"),
    ("erold://projects", "projects", "All projects in the workspace"),
    ("erold://guidelines", "guidelines", "Erold coding guideline topics"),
)


def register_resources(
    app: FastMCP, client: EroldClient, guidelines: GuidelineService
) -> List[str]:
    """Expose read-only views that reuse the tool renderers."""

    @app.resource("erold://context", name="context", description=RESOURCES[0][2])
    async def context_resource() -> str:
        return await context_tools.get_context(client)

    @app.resource("erold://projects", name="projects", description=RESOURCES[1][2])
    async def projects_resource() -> str:
        return await project_tools.list_projects(client)

    @app.resource(
        "erold://guidelines", name="guidelines", description=RESOURCES[2][2]
    )
    async def guidelines_resource() -> str:
        return await guideline_tools.list_guidelines(guidelines)

    return [uri for uri, _, _ in RESOURCES]


def create_server(
    client: Optional[EroldClient] = None,
    guidelines: Optional[GuidelineService] = None,
) -> FastMCP:
    """Build the MCP app with every tool and resource registered."""
    client = client or EroldClient()
    guidelines = guidelines or GuidelineService()

    app = FastMCP(SERVER_NAME)
    register_discovered_tools(app, client, guidelines_provider=guidelines)
    register_resources(app, client, guidelines)
    return app


__all__ = ["create_server", "register_resources", "SERVER_NAME"]
