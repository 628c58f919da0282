from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from erold_mcp.core.client import EroldClient

_TOOL = "knowledge"


def _article_path(client: EroldClient, article_id: str) -> str:
    return client.tenant_path(f"/knowledge/{article_id}")


async def list_articles(
    client: EroldClient,
    *,
    category: Optional[str] = None,
    project_id: Optional[str] = None,
    scope: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    params = {
        "category": category,
        "projectId": project_id,
        "scope": scope,
        "limit": limit,
    }
    return await client.get(client.tenant_path("/knowledge"), params, tool=_TOOL)


async def get_article(client: EroldClient, article_id: str) -> Dict[str, Any]:
    return await client.get(_article_path(client, article_id), tool=_TOOL)


async def articles_by_category(
    client: EroldClient, category: str
) -> List[Dict[str, Any]]:
    return await client.get(
        client.tenant_path(f"/knowledge/category/{category}"), tool=_TOOL
    )


async def create_article(
    client: EroldClient,
    *,
    title: str,
    category: str,
    content: str,
    project_id: Optional[str] = None,
) -> Dict[str, Any]:
    # projectId is always sent; null marks a global article
    body = {
        "title": title,
        "category": category,
        "content": content,
        "projectId": project_id or None,
    }
    return await client.post(client.tenant_path("/knowledge"), body, tool=_TOOL)


async def update_article(
    client: EroldClient, article_id: str, fields: Mapping[str, Any]
) -> Dict[str, Any]:
    return await client.patch(
        _article_path(client, article_id), dict(fields), tool=_TOOL
    )


async def delete_article(client: EroldClient, article_id: str) -> Any:
    return await client.delete(_article_path(client, article_id), tool=_TOOL)


async def search_articles(client: EroldClient, query: str) -> List[Dict[str, Any]]:
    return await client.get(
        client.tenant_path("/knowledge"), {"search": query}, tool=_TOOL
    )
