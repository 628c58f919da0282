"""
Coding guideline tools backed by the public erold.dev catalogue.

These take a GuidelineService instead of the tenant client; they need no
API key.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from erold_mcp.core.errors import format_error
from erold_mcp.core.guidelines import (
    GUIDELINE_TOPICS,
    GUIDELINES_SITE_URL,
    GuidelineService,
)
from erold_mcp.core.tools._render import to_json

SEARCH_RESULT_LIMIT = 20
SNIPPET_LENGTH = 200
EXAMPLES_PER_TOPIC = 3


def _compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


def _ai(item: Dict[str, Any]) -> Dict[str, Any]:
    ai = item.get("ai")
    return ai if isinstance(ai, dict) else {}


def _snippet(item: Dict[str, Any]) -> Optional[str]:
    text = _ai(item).get("prompt_snippet")
    return str(text)[:SNIPPET_LENGTH] if text else None


def _guideline_detail(item: Dict[str, Any]) -> Dict[str, Any]:
    ai = _ai(item)
    return _compact(
        {
            "id": item.get("id"),
            "title": item.get("title"),
            "description": item.get("description"),
            "difficulty": item.get("difficulty"),
            "tags": item.get("tags"),
            "ai": _compact(
                {
                    "snippet": ai.get("prompt_snippet"),
                    "applies_when": ai.get("applies_when"),
                    "does_not_apply_when": ai.get("does_not_apply_when"),
                }
            )
            if ai
            else None,
        }
    )


async def get_guidelines(
    guidelines: GuidelineService,
    topic: Annotated[
        str,
        Field(
            description="The topic to fetch guidelines for. Available: "
            + ", ".join(GUIDELINE_TOPICS)
        ),
    ],
) -> str:
    """
    Fetch coding guidelines for a specific technology topic from erold.dev
    (e.g. nextjs, fastapi, security, testing, typescript, patterns).
    Returns guidelines with AI-optimized snippets for quick reference.
    """
    try:
        matches = await guidelines.by_topic(topic)
        if not matches:
            return to_json(
                {
                    "error": f"No guidelines found for topic: {topic}",
                    "availableTopics": await guidelines.topics(),
                    "suggestion": "Use list_guidelines to see all available guidelines",
                }
            )
        return to_json(
            {
                "topic": topic,
                "count": len(matches),
                "guidelines": [_guideline_detail(g) for g in matches],
                "url": f"{GUIDELINES_SITE_URL}?topic={topic}",
            }
        )
    except Exception as exc:
        return f"Error fetching guidelines: {format_error(exc)}"


async def list_guidelines(guidelines: GuidelineService) -> str:
    """
    List all available coding guidelines from erold.dev grouped by topic.
    Use get_guidelines with a topic for the full entries.
    """
    try:
        items = await guidelines.fetch_all()
        by_topic: Dict[str, Dict[str, Any]] = {}
        for item in items:
            group = by_topic.setdefault(
                str(item.get("topic") or ""), {"count": 0, "titles": []}
            )
            group["count"] += 1
            if len(group["titles"]) < EXAMPLES_PER_TOPIC:
                group["titles"].append(item.get("title"))

        ranked = sorted(by_topic.items(), key=lambda kv: kv[1]["count"], reverse=True)
        return to_json(
            {
                "totalCount": len(items),
                "topics": [
                    {"topic": topic, "count": data["count"], "examples": data["titles"]}
                    for topic, data in ranked
                ],
                "url": GUIDELINES_SITE_URL,
            }
        )
    except Exception as exc:
        return f"Error listing guidelines: {format_error(exc)}"


async def search_guidelines(
    guidelines: GuidelineService,
    query: Annotated[
        str, Field(min_length=2, description="Search query (minimum 2 characters)")
    ],
    topics: Annotated[
        Optional[List[str]], Field(description="Filter by specific topics")
    ] = None,
) -> str:
    """
    Search across all Erold coding guidelines for cross-cutting concerns
    such as "error handling", "authentication" or "caching".
    """
    try:
        results = await guidelines.search(query, topics)
        scope: Any = topics or "all"
        if not results:
            return to_json(
                {
                    "query": query,
                    "topics": scope,
                    "count": 0,
                    "results": [],
                    "suggestion": "Try broader search terms or use list_guidelines "
                    "to see available topics",
                }
            )
        return to_json(
            {
                "query": query,
                "topics": scope,
                "count": len(results),
                "results": [
                    _compact(
                        {
                            "id": g.get("id"),
                            "topic": g.get("topic"),
                            "title": g.get("title"),
                            "description": g.get("description"),
                            "snippet": _snippet(g),
                        }
                    )
                    for g in results[:SEARCH_RESULT_LIMIT]
                ],
                "truncated": len(results) > SEARCH_RESULT_LIMIT,
            }
        )
    except Exception as exc:
        return f"Error searching guidelines: {format_error(exc)}"
