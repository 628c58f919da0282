"""
Project vault tools. Listing returns metadata only; reading a single entry
reveals the secret value and is audited server-side.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import Field

from erold_mcp.core.api import vault as vault_api
from erold_mcp.core.client import EroldClient
from erold_mcp.core.errors import format_error
from erold_mcp.core.models import VaultEntry, parse_model, parse_models
from erold_mcp.core.tools._render import to_json

VaultCategory = Literal["database", "api", "cloud", "service", "credential", "other"]
VaultEnvironment = Literal["all", "production", "staging", "development"]

ProjectId = Annotated[str, Field(description="The project ID")]
EntryId = Annotated[str, Field(description="The vault entry ID")]

KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")
INVALID_KEY_MESSAGE = (
    "Error: Key must start with a letter and contain only uppercase letters, "
    "numbers, and underscores."
)
AUDIT_WARNING = "This access has been logged for security audit."


def normalize_key(key: str) -> Optional[str]:
    """Uppercase and replace anything outside [A-Z0-9_]; None if still invalid."""
    formatted = re.sub(r"[^A-Z0-9_]", "_", key.upper())
    return formatted if KEY_PATTERN.match(formatted) else None


def _entry_brief(entry: VaultEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "key": entry.key,
        "category": entry.category,
        "environment": entry.environment,
    }


async def list_vault(client: EroldClient, project_id: ProjectId) -> str:
    """
    List vault entries for a project. Returns metadata only (not secret
    values). Use get_vault_secret to retrieve actual values. Requires
    admin/owner role.
    """
    try:
        entries = parse_models(
            VaultEntry, await vault_api.list_entries(client, project_id)
        )
        if not entries:
            return "No vault entries found for this project."
        return to_json(
            {
                "projectId": project_id,
                "count": len(entries),
                "entries": [
                    {
                        **_entry_brief(e),
                        "description": e.description or "",
                        "updatedAt": e.updated_at,
                    }
                    for e in entries
                ],
            }
        )
    except Exception as exc:
        return f"Error listing vault entries: {format_error(exc)}"


async def get_vault_secret(
    client: EroldClient, project_id: ProjectId, entry_id: EntryId
) -> str:
    """
    Get a vault entry including its secret value. WARNING: This reveals
    sensitive data and is logged for security audit.
    """
    try:
        entry = parse_model(
            VaultEntry, await vault_api.get_entry(client, project_id, entry_id)
        )
        return to_json(
            {
                "id": entry.id,
                "key": entry.key,
                "value": entry.value,
                "category": entry.category,
                "environment": entry.environment,
                "description": entry.description or "",
                "warning": AUDIT_WARNING,
            }
        )
    except Exception as exc:
        return f"Error getting vault entry: {format_error(exc)}"


async def create_vault_secret(
    client: EroldClient,
    project_id: ProjectId,
    key: Annotated[
        str,
        Field(
            min_length=1,
            max_length=100,
            description="Secret key in UPPERCASE_WITH_UNDERSCORES format (e.g. DATABASE_URL)",
        ),
    ],
    value: Annotated[str, Field(min_length=1, description="The secret value to store")],
    category: Optional[VaultCategory] = None,
    environment: Optional[VaultEnvironment] = None,
    description: Annotated[Optional[str], Field(max_length=500)] = None,
) -> str:
    """
    Create a new vault entry to store a secret. Keys must be uppercase with
    underscores (e.g. DATABASE_URL, API_KEY).
    """
    formatted = normalize_key(key)
    if formatted is None:
        return INVALID_KEY_MESSAGE
    try:
        entry = parse_model(
            VaultEntry,
            await vault_api.create_entry(
                client,
                project_id,
                {
                    "key": formatted,
                    "value": value,
                    "category": category or "other",
                    "description": description,
                    "environment": environment or "all",
                },
            ),
        )
        return to_json(
            {
                "success": True,
                "message": "Vault entry created successfully",
                "entry": _entry_brief(entry),
            }
        )
    except Exception as exc:
        return f"Error creating vault entry: {format_error(exc)}"


async def update_vault_secret(
    client: EroldClient,
    project_id: ProjectId,
    entry_id: EntryId,
    value: Annotated[Optional[str], Field(description="New secret value")] = None,
    category: Optional[VaultCategory] = None,
    description: Annotated[Optional[str], Field(max_length=500)] = None,
    environment: Optional[VaultEnvironment] = None,
) -> str:
    """Update an existing vault entry (value, category, description or environment)."""
    updates = {
        k: v
        for k, v in {
            "value": value,
            "category": category,
            "description": description,
            "environment": environment,
        }.items()
        if v is not None
    }
    if not updates:
        return "No updates provided. Specify at least one field to update."
    try:
        entry = parse_model(
            VaultEntry,
            await vault_api.update_entry(client, project_id, entry_id, updates),
        )
        return to_json(
            {
                "success": True,
                "message": "Vault entry updated successfully",
                "entry": _entry_brief(entry),
            }
        )
    except Exception as exc:
        return f"Error updating vault entry: {format_error(exc)}"


async def delete_vault_secret(
    client: EroldClient, project_id: ProjectId, entry_id: EntryId
) -> str:
    """Delete a vault entry. WARNING: This permanently removes the secret."""
    try:
        await vault_api.delete_entry(client, project_id, entry_id)
        return to_json(
            {
                "success": True,
                "message": "Vault entry deleted successfully",
                "entryId": entry_id,
            }
        )
    except Exception as exc:
        return f"Error deleting vault entry: {format_error(exc)}"
