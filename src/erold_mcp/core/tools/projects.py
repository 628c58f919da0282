from __future__ import annotations

import asyncio
import re
from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import Field

from erold_mcp.core.api import projects as projects_api
from erold_mcp.core.client import EroldClient
from erold_mcp.core.errors import format_error
from erold_mcp.core.models import (
    Project,
    ProjectStats,
    Task,
    parse_model,
    parse_models,
)
from erold_mcp.core.tools._render import hours, percent, to_json

ProjectStatus = Literal["planning", "active", "on_hold", "completed", "cancelled"]
ProjectTaskStatus = Literal["todo", "in_progress", "in_review", "blocked", "done"]

ProjectId = Annotated[str, Field(description="The project ID")]

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, collapse non-alphanumerics to '-', trim edge dashes."""
    return _SLUG_STRIP_RE.sub("-", name.lower()).strip("-")


def _progress(project: Project) -> str:
    return percent(project.completed_tasks, project.task_count)


async def list_projects(
    client: EroldClient,
    status: Annotated[
        Optional[ProjectStatus], Field(description="Filter by project status")
    ] = None,
) -> str:
    """List all projects in the workspace with status and task counts."""
    try:
        projects = parse_models(
            Project, await projects_api.list_projects(client, status=status)
        )
        if not projects:
            return "No projects found."
        return to_json(
            [
                {
                    "id": p.id,
                    "name": p.name,
                    "slug": p.slug or None,
                    "status": p.status,
                    "taskCount": p.task_count or 0,
                    "completedTasks": p.completed_tasks or 0,
                }
                for p in projects
            ]
        )
    except Exception as exc:
        return f"Error listing projects: {format_error(exc)}"


async def get_project(client: EroldClient, project_id: ProjectId) -> str:
    """Get project details including description and progress."""
    try:
        project = parse_model(
            Project, await projects_api.get_project(client, project_id)
        )
        return to_json(
            {
                "id": project.id,
                "name": project.name,
                "slug": project.slug or None,
                "description": project.description or "No description",
                "status": project.status,
                "taskCount": project.task_count or 0,
                "completedTasks": project.completed_tasks or 0,
                "progress": _progress(project),
                "createdAt": project.created_at,
                "updatedAt": project.updated_at,
            }
        )
    except Exception as exc:
        return f"Error getting project: {format_error(exc)}"


async def create_project(
    client: EroldClient,
    name: Annotated[str, Field(min_length=1, max_length=100)],
    description: Optional[str] = None,
    slug: Annotated[
        Optional[str],
        Field(
            pattern=r"^[a-z0-9-]+$",
            description="URL-friendly slug (lowercase letters, numbers, hyphens)",
        ),
    ] = None,
) -> str:
    """Create a new project. The slug is derived from the name when omitted."""
    try:
        payload = await projects_api.create_project(
            client,
            name=name,
            description=description,
            slug=slug or slugify(name),
        )
        project = parse_model(Project, payload)
        return to_json(
            {
                "success": True,
                "message": "Project created successfully",
                "project": {
                    "id": project.id,
                    "name": project.name,
                    "slug": project.slug,
                    "status": project.status,
                },
            }
        )
    except Exception as exc:
        return f"Error creating project: {format_error(exc)}"


async def update_project(
    client: EroldClient,
    project_id: ProjectId,
    name: Annotated[Optional[str], Field(min_length=1, max_length=100)] = None,
    description: Optional[str] = None,
    status: Optional[ProjectStatus] = None,
) -> str:
    """Update a project's name, description, or status."""
    updates: Dict[str, Any] = {}
    if name:
        updates["name"] = name
    # an empty description is a deliberate clear
    if description is not None:
        updates["description"] = description
    if status:
        updates["status"] = status

    if not updates:
        return "No updates provided. Specify at least one field to update."

    try:
        project = parse_model(
            Project, await projects_api.update_project(client, project_id, updates)
        )
        return to_json(
            {
                "success": True,
                "message": "Project updated successfully",
                "project": {
                    "id": project.id,
                    "name": project.name,
                    "status": project.status,
                },
            }
        )
    except Exception as exc:
        return f"Error updating project: {format_error(exc)}"


async def get_project_stats(client: EroldClient, project_id: ProjectId) -> str:
    """Get task breakdown by status and priority for a project."""
    try:
        project_payload, stats_payload = await asyncio.gather(
            projects_api.get_project(client, project_id),
            projects_api.project_stats(client, project_id),
        )
        project = parse_model(Project, project_payload)
        stats = parse_model(ProjectStats, stats_payload)
        return to_json(
            {
                "project": {
                    "id": project.id,
                    "name": project.name,
                    "status": project.status,
                },
                "stats": {
                    "totalTasks": stats.total_tasks,
                    "completedTasks": stats.completed_tasks,
                    "openTasks": stats.open_tasks,
                    "blockedTasks": stats.blocked_tasks,
                    "progress": percent(stats.completed_tasks, stats.total_tasks),
                    "byStatus": stats.by_status,
                    "byPriority": stats.by_priority,
                    "totalTimeLogged": hours(stats.total_time_logged),
                },
            }
        )
    except Exception as exc:
        return f"Error getting project stats: {format_error(exc)}"


async def get_project_tasks(
    client: EroldClient,
    project_id: ProjectId,
    status: Optional[ProjectTaskStatus] = None,
    limit: Annotated[int, Field(ge=1, le=100)] = 50,
) -> str:
    """Get all tasks in a specific project, optionally filtered by status."""
    try:
        task_list = parse_models(
            Task,
            await projects_api.project_tasks(
                client, project_id, status=status, limit=limit
            ),
        )
        if not task_list:
            return "No tasks found in this project."
        return to_json(
            {
                "projectId": project_id,
                "count": len(task_list),
                "tasks": [
                    {
                        "id": t.id,
                        "title": t.title,
                        "status": t.status,
                        "priority": t.priority,
                        "assignee": t.assignee_label,
                    }
                    for t in task_list
                ],
            }
        )
    except Exception as exc:
        return f"Error getting project tasks: {format_error(exc)}"
