from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import Field

from erold_mcp.core.api import activity as activity_api
from erold_mcp.core.api import tasks as tasks_api
from erold_mcp.core.client import EroldClient
from erold_mcp.core.errors import format_error
from erold_mcp.core.models import Activity, Task, TaskComment, parse_model, parse_models
from erold_mcp.core.tools._render import hours, to_json

TaskStatus = Literal[
    "backlog",
    "analysis",
    "todo",
    "in-progress",
    "in-review",
    "bug",
    "blocked",
    "done",
]
TaskPriority = Literal["low", "medium", "high", "urgent", "critical"]

TaskId = Annotated[str, Field(description="The task ID")]


def _task_row(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "status": task.status,
        "priority": task.priority,
        "project": task.project_label,
        "assignee": task.assignee_label,
        "dueDate": task.due_date or "No due date",
    }


def _task_brief(task: Task) -> Dict[str, Any]:
    return {"id": task.id, "title": task.title, "status": task.status}


async def list_tasks(
    client: EroldClient,
    project_id: Annotated[
        Optional[str], Field(description="Filter by project ID")
    ] = None,
    status: Annotated[
        Optional[TaskStatus], Field(description="Filter by status")
    ] = None,
    assignee: Annotated[
        Optional[str], Field(description="Filter by assignee user ID")
    ] = None,
    priority: Annotated[
        Optional[TaskPriority], Field(description="Filter by priority")
    ] = None,
    limit: Annotated[
        int, Field(ge=1, le=100, description="Maximum number of tasks to return")
    ] = 20,
) -> str:
    """
    List tasks. Can filter by project, status, assignee, or priority.
    Returns an array of tasks with their details.
    """
    try:
        payload = await tasks_api.list_tasks(
            client,
            project_id=project_id,
            status=status,
            assignee=assignee,
            priority=priority,
            limit=limit,
        )
        task_list = parse_models(Task, payload)
        if not task_list:
            return "No tasks found matching the criteria."
        return to_json([_task_row(t) for t in task_list])
    except Exception as exc:
        return f"Error listing tasks: {format_error(exc)}"


async def get_task(client: EroldClient, task_id: TaskId) -> str:
    """
    Get detailed information about a specific task by ID, including
    description, time logged and blocked reason.
    """
    try:
        task = parse_model(Task, await tasks_api.get_task(client, task_id))
        return to_json(
            {
                "id": task.id,
                "title": task.title,
                "description": task.description or "No description",
                "status": task.status,
                "priority": task.priority,
                "project": task.project_label,
                "assignee": task.assignee_label,
                "dueDate": task.due_date or "No due date",
                "tags": task.tags or [],
                "progress": task.progress or 0,
                "timeEstimate": hours(task.time_estimate) or "Not estimated",
                "timeLogged": hours(task.time_logged) or "No time logged",
                "blockedReason": task.blocked_reason or None,
                "createdAt": task.created_at,
                "updatedAt": task.updated_at,
            }
        )
    except Exception as exc:
        return f"Error getting task: {format_error(exc)}"


async def create_task(
    client: EroldClient,
    project_id: Annotated[
        str, Field(description="The project ID to create the task in")
    ],
    title: Annotated[str, Field(min_length=1, max_length=200)],
    description: Optional[str] = None,
    priority: TaskPriority = "medium",
    assignee: Annotated[
        Optional[str], Field(description="User ID to assign the task to")
    ] = None,
) -> str:
    """Create a new task in a project. Requires project ID and title."""
    try:
        payload = await tasks_api.create_task(
            client,
            project_id,
            title=title,
            description=description,
            priority=priority,
            assigned_to=assignee,
        )
        task = parse_model(Task, payload)
        return to_json(
            {
                "success": True,
                "message": "Task created successfully",
                "task": {
                    "id": task.id,
                    "title": task.title,
                    "status": task.status,
                    "priority": task.priority,
                    "projectId": task.project_id,
                },
            }
        )
    except Exception as exc:
        return f"Error creating task: {format_error(exc)}"


async def update_task(
    client: EroldClient,
    task_id: TaskId,
    title: Annotated[Optional[str], Field(min_length=1, max_length=200)] = None,
    description: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assignee: Annotated[
        Optional[str], Field(description="New assignee user ID")
    ] = None,
) -> str:
    """Update an existing task. Only provided fields will be updated."""
    updates: Dict[str, Any] = {}
    if title:
        updates["title"] = title
    if description:
        updates["description"] = description
    if status:
        updates["status"] = status
    if priority:
        updates["priority"] = priority
    if assignee:
        updates["assignedTo"] = assignee

    if not updates:
        return "No updates provided. Specify at least one field to update."

    try:
        task = parse_model(Task, await tasks_api.update_task(client, task_id, updates))
        return to_json(
            {
                "success": True,
                "message": "Task updated successfully",
                "task": {
                    "id": task.id,
                    "title": task.title,
                    "status": task.status,
                    "priority": task.priority,
                },
            }
        )
    except Exception as exc:
        return f"Error updating task: {format_error(exc)}"


async def start_task(client: EroldClient, task_id: TaskId) -> str:
    """Start working on a task. Changes status to in-progress."""
    try:
        task = parse_model(Task, await tasks_api.start_task(client, task_id))
        return to_json(
            {
                "success": True,
                "message": f"Started task: {task.title}",
                "task": _task_brief(task),
            }
        )
    except Exception as exc:
        return f"Error starting task: {format_error(exc)}"


async def complete_task(
    client: EroldClient,
    task_id: TaskId,
    summary: Annotated[
        Optional[str], Field(description="Optional completion summary")
    ] = None,
) -> str:
    """Mark a task as complete (status done), with an optional summary."""
    try:
        payload = await tasks_api.complete_task(client, task_id, summary)
        task = parse_model(Task, payload)
        return to_json(
            {
                "success": True,
                "message": f"Completed task: {task.title}",
                "task": _task_brief(task),
            }
        )
    except Exception as exc:
        return f"Error completing task: {format_error(exc)}"


async def block_task(
    client: EroldClient,
    task_id: TaskId,
    reason: Annotated[
        str, Field(min_length=1, description="Why the task is blocked")
    ],
) -> str:
    """Mark a task as blocked with a reason."""
    try:
        task = parse_model(Task, await tasks_api.block_task(client, task_id, reason))
        return to_json(
            {
                "success": True,
                "message": f"Blocked task: {task.title}",
                "reason": reason,
                "task": _task_brief(task),
            }
        )
    except Exception as exc:
        return f"Error blocking task: {format_error(exc)}"


async def search_tasks(
    client: EroldClient,
    query: Annotated[str, Field(min_length=1, description="Search query")],
    limit: Annotated[int, Field(ge=1, le=50)] = 20,
) -> str:
    """Search tasks by keyword in titles and descriptions."""
    try:
        results = parse_models(
            Task, await tasks_api.search_tasks(client, query, limit=limit)
        )
        if not results:
            return f'No tasks found matching "{query}"'
        return to_json(
            {
                "query": query,
                "count": len(results),
                "results": [
                    {
                        "id": t.id,
                        "title": t.title,
                        "status": t.status,
                        "project": t.project_label,
                    }
                    for t in results
                ],
            }
        )
    except Exception as exc:
        return f"Error searching tasks: {format_error(exc)}"


async def add_task_comment(
    client: EroldClient,
    task_id: TaskId,
    content: Annotated[str, Field(min_length=1, description="The comment content")],
) -> str:
    """Add a comment to a task to document progress, decisions, or notes."""
    try:
        payload = await tasks_api.add_comment(client, task_id, content)
        comment = parse_model(TaskComment, payload)
        return to_json(
            {
                "success": True,
                "message": "Comment added successfully",
                "comment": {
                    "id": comment.id,
                    "content": comment.content,
                    "createdAt": comment.created_at,
                },
            }
        )
    except Exception as exc:
        return f"Error adding comment: {format_error(exc)}"


async def get_task_comments(client: EroldClient, task_id: TaskId) -> str:
    """Get all comments on a task."""
    try:
        comments = parse_models(
            TaskComment, await tasks_api.list_comments(client, task_id)
        )
        if not comments:
            return "No comments on this task."
        return to_json(
            [
                {
                    "id": c.id,
                    "author": c.author_name or c.author_id,
                    "content": c.content,
                    "createdAt": c.created_at,
                }
                for c in comments
            ]
        )
    except Exception as exc:
        return f"Error getting comments: {format_error(exc)}"


async def get_blocked_tasks(client: EroldClient) -> str:
    """Get all tasks that are currently blocked."""
    try:
        blocked = parse_models(Task, await tasks_api.blocked_tasks(client))
        if not blocked:
            return "No blocked tasks. All clear!"
        return to_json(
            {
                "count": len(blocked),
                "blockedTasks": [
                    {
                        "id": t.id,
                        "title": t.title,
                        "project": t.project_label,
                        "blockedReason": t.blocked_reason or "No reason provided",
                    }
                    for t in blocked
                ],
            }
        )
    except Exception as exc:
        return f"Error getting blocked tasks: {format_error(exc)}"


async def get_my_tasks(
    client: EroldClient,
    status: Optional[TaskStatus] = None,
    limit: Annotated[int, Field(ge=1, le=100)] = 20,
) -> str:
    """Get tasks assigned to the API key's user."""
    try:
        payload = await tasks_api.my_tasks(client, status=status, limit=limit)
        task_list = parse_models(Task, payload)
        if not task_list:
            return "No tasks assigned to you."
        return to_json([_task_row(t) for t in task_list])
    except Exception as exc:
        return f"Error getting your tasks: {format_error(exc)}"


async def log_task_time(
    client: EroldClient,
    task_id: TaskId,
    hours_spent: Annotated[
        float, Field(gt=0, le=24, description="Hours worked on the task")
    ],
    notes: Optional[str] = None,
) -> str:
    """Log time spent on a task."""
    try:
        await tasks_api.log_time(client, task_id, hours_spent, notes)
        return to_json(
            {
                "success": True,
                "message": f"Logged {hours(hours_spent)} on task",
                "taskId": task_id,
            }
        )
    except Exception as exc:
        return f"Error logging time: {format_error(exc)}"


async def get_task_activity(client: EroldClient, task_id: TaskId) -> str:
    """Get the activity history of a task."""
    try:
        entries = parse_models(
            Activity, await activity_api.task_activity(client, task_id)
        )
        if not entries:
            return "No activity recorded for this task."
        return to_json(
            [
                {
                    "type": a.type,
                    "description": a.description,
                    "user": a.user_name,
                    "timestamp": a.created_at,
                }
                for a in entries
            ]
        )
    except Exception as exc:
        return f"Error getting task activity: {format_error(exc)}"
