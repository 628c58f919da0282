"""
Resource accessors: one module per API area, each a set of stateless
coroutines that build a path and delegate to EroldClient.
"""

from . import (
    activity,
    context,
    knowledge,
    members,
    projects,
    tasks,
    tech_info,
    tenants,
    user,
    vault,
)

__all__ = [
    "activity",
    "context",
    "knowledge",
    "members",
    "projects",
    "tasks",
    "tech_info",
    "tenants",
    "user",
    "vault",
]
