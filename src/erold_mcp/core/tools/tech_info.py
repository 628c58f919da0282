"""
Project tech info: stack, deployment, commands and notes.

Stack and command edits are read-modify-write against the whole section;
the backend only merges at the top level.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import Field

from erold_mcp.core.api import tech_info as tech_info_api
from erold_mcp.core.client import EroldClient
from erold_mcp.core.errors import format_error
from erold_mcp.core.tools._render import to_json

StackCategory = Literal["frontend", "backend", "database", "languages", "tools", "other"]
DeploymentProvider = Literal[
    "vercel",
    "aws",
    "gcp",
    "azure",
    "digitalocean",
    "heroku",
    "netlify",
    "railway",
    "render",
    "fly",
    "other",
]

ProjectId = Annotated[str, Field(description="The project ID")]
DeploymentUrl = Annotated[str, Field(pattern=r"^https?://\S+$")]

NOTES_PREVIEW_LENGTH = 100


def _as_dict(payload: Any) -> Dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def _commands(info: Dict[str, Any]) -> List[Any]:
    commands = info.get("commands")
    return list(commands) if isinstance(commands, list) else []


async def get_tech_info(client: EroldClient, project_id: ProjectId) -> str:
    """
    Get the technical information for a project including tech stack,
    deployment details, useful commands, infrastructure and notes.
    """
    try:
        info = _as_dict(await tech_info_api.get_tech_info(client, project_id))
        return to_json(
            {
                "projectId": project_id,
                "stack": info.get("stack") or {},
                "deployment": info.get("deployment") or {},
                "commands": info.get("commands") or [],
                "infrastructure": info.get("infrastructure") or {},
                "repositories": info.get("repositories") or [],
                "notes": info.get("notes") or "",
                "updatedAt": info.get("updatedAt"),
            }
        )
    except Exception as exc:
        return f"Error getting tech info: {format_error(exc)}"


async def update_tech_stack(
    client: EroldClient,
    project_id: ProjectId,
    category: StackCategory,
    items: Annotated[
        List[str], Field(description="List of technologies to set for this category")
    ],
) -> str:
    """Replace the technologies listed under one tech stack category."""
    try:
        current = _as_dict(await tech_info_api.get_tech_info(client, project_id))
        stack = dict(_as_dict(current.get("stack")))
        stack[category] = items
        await tech_info_api.update_tech_info(client, project_id, {"stack": stack})
        return to_json(
            {
                "success": True,
                "message": f"Updated {category} stack",
                "category": category,
                "items": items,
            }
        )
    except Exception as exc:
        return f"Error updating tech stack: {format_error(exc)}"


def build_deployment(
    provider: Optional[str] = None,
    region: Optional[str] = None,
    production_url: Optional[str] = None,
    staging_url: Optional[str] = None,
    cicd: Optional[str] = None,
    production_branch: Optional[str] = None,
    staging_branch: Optional[str] = None,
) -> Dict[str, Any]:
    deployment: Dict[str, Any] = {}
    if provider:
        deployment["provider"] = provider
    if region:
        deployment["region"] = region
    if cicd:
        deployment["cicd"] = cicd

    urls = {k: v for k, v in (("production", production_url), ("staging", staging_url)) if v}
    if urls:
        deployment["urls"] = urls

    branches = {
        k: v
        for k, v in (("production", production_branch), ("staging", staging_branch))
        if v
    }
    if branches:
        deployment["branch"] = branches

    return deployment


async def set_deployment_info(
    client: EroldClient,
    project_id: ProjectId,
    provider: Optional[DeploymentProvider] = None,
    region: Annotated[
        Optional[str], Field(description="Cloud region (e.g. us-east-1)")
    ] = None,
    production_url: Annotated[
        Optional[DeploymentUrl], Field(description="Production URL (http or https)")
    ] = None,
    staging_url: Annotated[
        Optional[DeploymentUrl], Field(description="Staging URL (http or https)")
    ] = None,
    cicd: Annotated[
        Optional[str], Field(description="CI/CD system (e.g. GitHub Actions)")
    ] = None,
    production_branch: Optional[str] = None,
    staging_branch: Optional[str] = None,
) -> str:
    """Set deployment configuration: provider, region, URLs, CI/CD and branches."""
    deployment = build_deployment(
        provider,
        region,
        production_url,
        staging_url,
        cicd,
        production_branch,
        staging_branch,
    )
    if not deployment:
        return "No deployment info provided. Specify at least one field."
    try:
        await tech_info_api.update_tech_info(
            client, project_id, {"deployment": deployment}
        )
        return to_json(
            {
                "success": True,
                "message": "Deployment info updated",
                "deployment": deployment,
            }
        )
    except Exception as exc:
        return f"Error setting deployment info: {format_error(exc)}"


async def add_tech_command(
    client: EroldClient,
    project_id: ProjectId,
    name: Annotated[
        str,
        Field(min_length=1, max_length=50, description="Command name (e.g. Build, Test)"),
    ],
    command: Annotated[
        str, Field(min_length=1, max_length=500, description="The command to run")
    ],
    description: Annotated[Optional[str], Field(max_length=200)] = None,
) -> str:
    """Add a useful command (build, test, deploy...) to the project tech info."""
    try:
        current = _as_dict(await tech_info_api.get_tech_info(client, project_id))
        commands = _commands(current)
        new_command = {
            "name": name,
            "command": command,
            "description": description or "",
        }
        await tech_info_api.update_tech_info(
            client, project_id, {"commands": commands + [new_command]}
        )
        return to_json(
            {
                "success": True,
                "message": "Command added",
                "command": new_command,
                "totalCommands": len(commands) + 1,
            }
        )
    except Exception as exc:
        return f"Error adding command: {format_error(exc)}"


async def remove_tech_command(
    client: EroldClient,
    project_id: ProjectId,
    index: Annotated[int, Field(ge=0, description="The command index (0-based)")],
) -> str:
    """Remove a command from the project tech info by its index."""
    try:
        current = _as_dict(await tech_info_api.get_tech_info(client, project_id))
        commands = _commands(current)
        if index >= len(commands):
            return (
                f"Error: Invalid index. There are only {len(commands)} commands "
                f"(0-{len(commands) - 1})."
            )
        removed = commands.pop(index)
        await tech_info_api.update_tech_info(
            client, project_id, {"commands": commands}
        )
        return to_json(
            {
                "success": True,
                "message": "Command removed",
                "removedCommand": removed,
                "remainingCommands": len(commands),
            }
        )
    except Exception as exc:
        return f"Error removing command: {format_error(exc)}"


async def set_tech_notes(
    client: EroldClient,
    project_id: ProjectId,
    notes: Annotated[
        str, Field(max_length=10000, description="Technical notes (markdown supported)")
    ],
) -> str:
    """Set free-form technical notes (setup steps, environment variables...)."""
    try:
        await tech_info_api.update_tech_info(client, project_id, {"notes": notes})
        preview = notes[:NOTES_PREVIEW_LENGTH] + (
            "..." if len(notes) > NOTES_PREVIEW_LENGTH else ""
        )
        return to_json(
            {"success": True, "message": "Notes updated", "preview": preview}
        )
    except Exception as exc:
        return f"Error setting notes: {format_error(exc)}"
