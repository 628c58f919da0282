from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import Field

from erold_mcp.core.api import knowledge as knowledge_api
from erold_mcp.core.client import EroldClient
from erold_mcp.core.errors import format_error
from erold_mcp.core.models import KnowledgeArticle, parse_model, parse_models
from erold_mcp.core.tools._render import to_json

KnowledgeCategory = Literal[
    "architecture",
    "api",
    "deployment",
    "testing",
    "security",
    "performance",
    "workflow",
    "conventions",
    "troubleshooting",
    "vision",
    "spec",
    "research",
    "decision",
    "design",
    "other",
]
KnowledgeScope = Literal["all", "global", "project", "combined"]

SEARCH_PREVIEW_CHARS = 150
PROJECT_PREVIEW_CHARS = 200
PROJECT_KNOWLEDGE_LIMIT = 50

ArticleId = Annotated[str, Field(description="The knowledge article ID")]


async def search_knowledge(
    client: EroldClient,
    query: Annotated[str, Field(min_length=1, description="Search query")],
) -> str:
    """
    Search the knowledge base for documentation, architecture decisions,
    troubleshooting guides, and other team knowledge.
    """
    try:
        articles = parse_models(
            KnowledgeArticle, await knowledge_api.search_articles(client, query)
        )
        if not articles:
            return f'No knowledge articles found matching "{query}"'
        return to_json(
            {
                "query": query,
                "count": len(articles),
                "articles": [
                    {
                        "id": a.id,
                        "title": a.title,
                        "category": a.category,
                        "preview": a.preview(SEARCH_PREVIEW_CHARS),
                        "updatedAt": a.updated_at,
                    }
                    for a in articles
                ],
            }
        )
    except Exception as exc:
        return f"Error searching knowledge: {format_error(exc)}"


async def get_knowledge(client: EroldClient, article_id: ArticleId) -> str:
    """Get the full content of a knowledge article by ID."""
    try:
        article = parse_model(
            KnowledgeArticle, await knowledge_api.get_article(client, article_id)
        )
        return to_json(
            {
                "id": article.id,
                "title": article.title,
                "category": article.category,
                "content": article.content,
                "tags": article.tags or [],
                "projectId": article.project_id or None,
                "scope": article.scope,
                "createdAt": article.created_at,
                "updatedAt": article.updated_at,
            }
        )
    except Exception as exc:
        return f"Error getting article: {format_error(exc)}"


async def list_knowledge(
    client: EroldClient,
    category: Optional[KnowledgeCategory] = None,
    project_id: Annotated[
        Optional[str], Field(description="Filter by project ID")
    ] = None,
    scope: Annotated[
        Optional[KnowledgeScope],
        Field(
            description=(
                '"all" (everything), "global" (only global), "project" '
                '(only project-specific), "combined" (global + project_id)'
            )
        ),
    ] = None,
    limit: Annotated[int, Field(ge=1, le=50)] = 20,
) -> str:
    """List knowledge articles, optionally filtered by category and project."""
    try:
        articles = parse_models(
            KnowledgeArticle,
            await knowledge_api.list_articles(
                client,
                category=category,
                project_id=project_id,
                scope=scope,
                limit=limit,
            ),
        )
        if not articles:
            if category:
                return f'No articles found in category "{category}"'
            return "No knowledge articles found."
        return to_json(
            [
                {
                    "id": a.id,
                    "title": a.title,
                    "category": a.category,
                    "projectId": a.project_id or None,
                    "scope": a.scope,
                    "updatedAt": a.updated_at,
                }
                for a in articles
            ]
        )
    except Exception as exc:
        return f"Error listing knowledge: {format_error(exc)}"


async def get_project_knowledge(
    client: EroldClient,
    project_id: Annotated[str, Field(description="The project ID")],
    include_content: Annotated[
        bool, Field(description="Include full content instead of a preview")
    ] = False,
) -> str:
    """
    Get all knowledge for a project (project-specific and global) in one
    call, grouped by category. Use this when starting work on a project.
    """
    try:
        articles = parse_models(
            KnowledgeArticle,
            await knowledge_api.list_articles(
                client,
                project_id=project_id,
                scope="combined",
                limit=PROJECT_KNOWLEDGE_LIMIT,
            ),
        )
        if not articles:
            return "No knowledge articles found for this project."

        by_category: Dict[str, List[Dict[str, Any]]] = {}
        for a in articles:
            entry: Dict[str, Any] = {
                "id": a.id,
                "title": a.title,
                "scope": a.scope,
                "tags": a.tags or [],
            }
            if include_content:
                entry["content"] = a.content
            else:
                entry["preview"] = a.preview(PROJECT_PREVIEW_CHARS)
            entry["updatedAt"] = a.updated_at
            by_category.setdefault(a.category or "other", []).append(entry)

        return to_json(
            {
                "projectId": project_id,
                "totalArticles": len(articles),
                "byCategory": by_category,
            }
        )
    except Exception as exc:
        return f"Error getting project knowledge: {format_error(exc)}"


async def create_knowledge(
    client: EroldClient,
    title: Annotated[str, Field(min_length=1, max_length=200)],
    category: KnowledgeCategory,
    content: Annotated[
        str, Field(min_length=1, description="Article content (markdown)")
    ],
    project_id: Annotated[
        Optional[str],
        Field(description="Project to attach to; omit for global knowledge"),
    ] = None,
) -> str:
    """Create a knowledge article, global or project-specific."""
    try:
        article = parse_model(
            KnowledgeArticle,
            await knowledge_api.create_article(
                client,
                title=title,
                category=category,
                content=content,
                project_id=project_id,
            ),
        )
        return to_json(
            {
                "success": True,
                "message": "Knowledge article created successfully",
                "article": {
                    "id": article.id,
                    "title": article.title,
                    "category": article.category,
                    "projectId": article.project_id or None,
                    "scope": article.scope,
                },
            }
        )
    except Exception as exc:
        return f"Error creating article: {format_error(exc)}"


async def update_knowledge(
    client: EroldClient,
    article_id: ArticleId,
    title: Annotated[Optional[str], Field(min_length=1, max_length=200)] = None,
    category: Optional[KnowledgeCategory] = None,
    content: Optional[str] = None,
) -> str:
    """Update an existing knowledge article."""
    updates: Dict[str, Any] = {}
    if title:
        updates["title"] = title
    if category:
        updates["category"] = category
    if content:
        updates["content"] = content

    if not updates:
        return "No updates provided. Specify at least one field to update."

    try:
        article = parse_model(
            KnowledgeArticle,
            await knowledge_api.update_article(client, article_id, updates),
        )
        return to_json(
            {
                "success": True,
                "message": "Knowledge article updated successfully",
                "article": {
                    "id": article.id,
                    "title": article.title,
                    "category": article.category,
                },
            }
        )
    except Exception as exc:
        return f"Error updating article: {format_error(exc)}"
