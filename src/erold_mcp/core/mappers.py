"""
Field mapping between the Erold wire vocabulary and the tool-facing one.

Projects are stored with a `title` on the API side but are exposed to tools
as `name`. Each entity gets an explicit from_wire/to_wire pair so the two
directions stay symmetrical.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

# tool-facing key -> wire key
PROJECT_FIELD_MAP: Dict[str, str] = {"name": "title"}


def _reverse(mapping: Mapping[str, str]) -> Dict[str, str]:
    return {wire: tool for tool, wire in mapping.items()}


def project_from_wire(payload: Any) -> Any:
    """Rename wire keys to tool keys. A tool key already present wins."""
    if not isinstance(payload, dict):
        return payload

    out: Dict[str, Any] = {}
    renames = _reverse(PROJECT_FIELD_MAP)
    for key, value in payload.items():
        target = renames.get(key, key)
        if target != key and target in payload:
            continue
        out[target] = value
    return out


def project_to_wire(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename tool keys to wire keys, dropping unset (None) values."""
    return {
        PROJECT_FIELD_MAP.get(key, key): value
        for key, value in fields.items()
        if value is not None
    }


def projects_from_wire(payload: Any) -> Any:
    if isinstance(payload, list):
        return [project_from_wire(p) for p in payload]
    return project_from_wire(payload)


__all__ = [
    "PROJECT_FIELD_MAP",
    "project_from_wire",
    "project_to_wire",
    "projects_from_wire",
]
