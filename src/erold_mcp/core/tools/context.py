"""
Workspace-level tools: AI context, dashboard, stats, workload, members.

get_context is the entry point for an assistant starting work.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import Field

from erold_mcp.core.api import activity as activity_api
from erold_mcp.core.api import context as context_api
from erold_mcp.core.api import members as members_api
from erold_mcp.core.api import tenants as tenants_api
from erold_mcp.core.api import user as user_api
from erold_mcp.core.client import EroldClient
from erold_mcp.core.errors import format_error
from erold_mcp.core.models import (
    Activity,
    KnowledgeArticle,
    Member,
    Project,
    Task,
    Tenant,
    parse_model,
    parse_models,
)
from erold_mcp.core.tools._render import hours, to_json

RECENT_ACTIVITY_LIMIT = 10


def _as_dict(payload: Any) -> Dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def summarize_context(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce the raw /context payload to the sections that are present."""
    result: Dict[str, Any] = {}

    if isinstance(ctx.get("activeProject"), dict):
        project = parse_model(Project, ctx["activeProject"])
        result["activeProject"] = {
            "id": project.id,
            "name": project.name or ctx["activeProject"].get("title"),
            "status": project.status,
            "description": project.description or "No description",
        }

    current = parse_models(Task, ctx.get("currentTasks"))
    if current:
        result["currentTasks"] = [
            {
                "id": t.id,
                "title": t.title,
                "status": t.status,
                "priority": t.priority,
                "assignee": t.assignee_label,
            }
            for t in current
        ]

    blockers = parse_models(Task, ctx.get("blockers"))
    if blockers:
        result["blockers"] = [
            {
                "id": t.id,
                "title": t.title,
                "reason": t.blocked_reason or "No reason provided",
            }
            for t in blockers
        ]

    recent = parse_models(Activity, ctx.get("recentActivity"))
    if recent:
        result["recentActivity"] = [
            {"description": a.description, "timestamp": a.created_at}
            for a in recent[:RECENT_ACTIVITY_LIMIT]
        ]

    knowledge = parse_models(KnowledgeArticle, ctx.get("relevantKnowledge"))
    if knowledge:
        result["relevantKnowledge"] = [
            {"id": k.id, "title": k.title, "category": k.category} for k in knowledge
        ]

    return result


async def get_context(client: EroldClient) -> str:
    """
    Get AI-ready context for the current workspace: active project, current
    tasks, blockers, recent activity and relevant knowledge. Use this first
    when starting work on a project.
    """
    try:
        result = summarize_context(_as_dict(await context_api.get_context(client)))
        if not result:
            return (
                "No context available. The workspace may be empty or you may "
                "need to create a project first."
            )
        return to_json(result)
    except Exception as exc:
        return f"Error getting context: {format_error(exc)}"


async def get_dashboard(client: EroldClient) -> str:
    """Get quick stats, your tasks, upcoming due dates and recent completions."""
    try:
        dashboard = _as_dict(await context_api.get_dashboard(client))
        result: Dict[str, Any] = {
            "overview": {
                "totalProjects": dashboard.get("projectCount") or 0,
                "totalTasks": dashboard.get("taskCount") or 0,
                "openTasks": dashboard.get("openTasks") or 0,
                "blockedTasks": dashboard.get("blockedTasks") or 0,
            }
        }

        mine = parse_models(Task, dashboard.get("myTasks"))
        if mine:
            result["myTasks"] = [
                {
                    "id": t.id,
                    "title": t.title,
                    "status": t.status,
                    "priority": t.priority,
                }
                for t in mine
            ]

        upcoming = parse_models(Task, dashboard.get("upcomingDue"))
        if upcoming:
            result["upcomingDue"] = [
                {"id": t.id, "title": t.title, "dueDate": t.due_date or "No date"}
                for t in upcoming
            ]

        completed = parse_models(Task, dashboard.get("recentCompleted"))
        if completed:
            result["recentCompleted"] = [
                {"id": t.id, "title": t.title} for t in completed
            ]

        return to_json(result)
    except Exception as exc:
        return f"Error getting dashboard: {format_error(exc)}"


async def get_stats(client: EroldClient) -> str:
    """Get workspace statistics including task counts by status and priority."""
    try:
        stats = _as_dict(await context_api.get_stats(client))
        return to_json(
            {
                "tasks": {
                    "total": stats.get("totalTasks") or 0,
                    "completed": stats.get("completedTasks") or 0,
                    "open": stats.get("openTasks") or 0,
                    "blocked": stats.get("blockedTasks") or 0,
                },
                "projects": {
                    "total": stats.get("totalProjects") or 0,
                    "active": stats.get("activeProjects") or 0,
                },
                "byStatus": stats.get("byStatus") or {},
                "byPriority": stats.get("byPriority") or {},
                "timeTracking": {
                    "totalLogged": hours(stats.get("totalTimeLogged")),
                    "thisWeek": hours(stats.get("timeThisWeek")),
                },
            }
        )
    except Exception as exc:
        return f"Error getting stats: {format_error(exc)}"


async def get_workload(client: EroldClient) -> str:
    """Get team workload distribution showing task assignments per member."""
    try:
        workload = _as_dict(await context_api.get_workload(client))
        members = [m for m in workload.get("members") or [] if isinstance(m, dict)]
        if not members:
            return "No workload data available."

        result: Dict[str, Any] = {
            "members": [
                {
                    "name": m.get("name") or "Unknown",
                    "assignedTasks": m.get("assignedTasks") or 0,
                    "inProgress": m.get("inProgress") or 0,
                    "completed": m.get("completed") or 0,
                    "utilization": f"{m.get('utilization') or 0}%",
                }
                for m in members
            ]
        }

        summary = workload.get("summary")
        if isinstance(summary, dict):
            result["summary"] = {
                "totalTasks": summary.get("totalTasks") or 0,
                "unassigned": summary.get("unassigned") or 0,
                "averageLoad": f"{summary.get('averageLoad') or 0}%",
            }

        return to_json(result)
    except Exception as exc:
        return f"Error getting workload: {format_error(exc)}"


async def list_members(client: EroldClient) -> str:
    """List all team members in the workspace with their roles."""
    try:
        members = parse_models(Member, await members_api.list_members(client))
        if not members:
            return "No team members found."
        return to_json(
            [
                {
                    "id": m.user_id,
                    "name": m.name or m.email,
                    "email": m.email,
                    "role": m.role,
                }
                for m in members
            ]
        )
    except Exception as exc:
        return f"Error listing members: {format_error(exc)}"


async def list_activity(
    client: EroldClient,
    limit: Annotated[int, Field(ge=1, le=100)] = 20,
    entity_type: Optional[Literal["task", "project", "knowledge", "member"]] = None,
    entity_id: Annotated[
        Optional[str], Field(description="Only activity for this entity")
    ] = None,
) -> str:
    """List recent workspace activity, optionally for a single entity."""
    try:
        entries = parse_models(
            Activity,
            await activity_api.list_activity(
                client, limit=limit, entity_type=entity_type, entity_id=entity_id
            ),
        )
        if not entries:
            return "No recent activity."
        return to_json(
            [
                {
                    "type": a.type,
                    "description": a.description,
                    "entity": {"type": a.entity_type, "id": a.entity_id},
                    "user": a.user_name,
                    "timestamp": a.created_at,
                }
                for a in entries
            ]
        )
    except Exception as exc:
        return f"Error listing activity: {format_error(exc)}"


async def whoami(client: EroldClient) -> str:
    """Show which user and tenant the configured API key acts as."""
    try:
        me = _as_dict(await user_api.me(client))
        return to_json(
            {
                "id": me.get("id"),
                "name": me.get("name"),
                "email": me.get("email"),
                "tenant": client.config.tenant,
            }
        )
    except Exception as exc:
        return f"Error getting current user: {format_error(exc)}"


async def list_tenants(client: EroldClient) -> str:
    """List the tenants (workspaces) the API key can access."""
    try:
        tenants = parse_models(Tenant, await tenants_api.list_tenants(client))
        if not tenants:
            return "No tenants found."
        return to_json(
            [
                {"id": t.id, "name": t.name, "slug": t.slug, "plan": t.plan}
                for t in tenants
            ]
        )
    except Exception as exc:
        return f"Error listing tenants: {format_error(exc)}"
