from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

T = TypeVar("T", bound=BaseModel)


class WireModel(BaseModel):
    """
    Base for API payloads. The backend speaks camelCase and omits fields
    freely, so everything is optional and unknown keys are ignored.
    """

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


class Task(WireModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    project_id: Optional[str] = Field(default=None, alias="projectId")
    project_name: Optional[str] = Field(default=None, alias="projectName")
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")
    assignee_name: Optional[str] = Field(default=None, alias="assigneeName")
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    tags: Optional[List[str]] = None
    progress: Optional[float] = None
    time_estimate: Optional[float] = Field(default=None, alias="timeEstimate")
    time_logged: Optional[float] = Field(default=None, alias="timeLogged")
    blocked_reason: Optional[str] = Field(default=None, alias="blockedReason")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @property
    def project_label(self) -> Optional[str]:
        return self.project_name or self.project_id

    @property
    def assignee_label(self) -> str:
        return self.assignee_name or self.assigned_to or "Unassigned"


class TaskComment(WireModel):
    id: Optional[str] = None
    task_id: Optional[str] = Field(default=None, alias="taskId")
    content: Optional[str] = None
    author_id: Optional[str] = Field(default=None, alias="authorId")
    author_name: Optional[str] = Field(default=None, alias="authorName")
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class Project(WireModel):
    """Tool-facing project: `name` is already mapped from the wire `title`."""

    id: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    task_count: Optional[int] = Field(default=None, alias="taskCount")
    completed_tasks: Optional[int] = Field(default=None, alias="completedTasks")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class ProjectStats(WireModel):
    total_tasks: Optional[int] = Field(default=0, alias="totalTasks")
    completed_tasks: Optional[int] = Field(default=0, alias="completedTasks")
    open_tasks: Optional[int] = Field(default=0, alias="openTasks")
    blocked_tasks: Optional[int] = Field(default=0, alias="blockedTasks")
    by_status: Optional[Dict[str, Any]] = Field(
        default_factory=dict, alias="byStatus"
    )
    by_priority: Optional[Dict[str, Any]] = Field(
        default_factory=dict, alias="byPriority"
    )
    total_time_logged: Optional[float] = Field(
        default=None, alias="totalTimeLogged"
    )


class KnowledgeArticle(WireModel):
    id: Optional[str] = None
    title: Optional[str] = None
    category: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    project_id: Optional[str] = Field(default=None, alias="projectId")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @property
    def scope(self) -> str:
        return "project" if self.project_id else "global"

    def preview(self, length: int) -> str:
        text = self.content or ""
        return text[:length] + ("..." if len(text) > length else "")


class VaultEntry(WireModel):
    id: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    environment: Optional[str] = None
    scope: Optional[str] = None
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class Member(WireModel):
    id: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class Activity(WireModel):
    id: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    entity_type: Optional[str] = Field(default=None, alias="entityType")
    entity_id: Optional[str] = Field(default=None, alias="entityId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class Tenant(WireModel):
    id: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    plan: Optional[str] = None


def parse_model(model: Type[T], payload: Any) -> T:
    """Validate a single payload; non-dict payloads become an empty model."""
    if not isinstance(payload, dict):
        payload = {}
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(
            f"Response did not match model {model.__name__}: {exc}"
        ) from exc


def parse_models(model: Type[T], payload: Any) -> List[T]:
    """Validate a list payload, skipping non-dict elements."""
    if not isinstance(payload, list):
        return []
    return [parse_model(model, item) for item in payload if isinstance(item, dict)]


__all__ = [
    "WireModel",
    "Task",
    "TaskComment",
    "Project",
    "ProjectStats",
    "KnowledgeArticle",
    "VaultEntry",
    "Member",
    "Activity",
    "Tenant",
    "parse_model",
    "parse_models",
]
