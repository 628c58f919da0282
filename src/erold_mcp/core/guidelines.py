"""
Coding-guideline lookup against the public erold.dev catalogue.

The full list is small and changes rarely, so it is fetched once and kept
for a fixed TTL. The cache belongs to a GuidelineService instance rather
than the module.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from .client import USER_AGENT
from .errors import EroldClientError, format_error
from .observability import log_event

GUIDELINES_API_URL = "https://erold.dev/api/v1"
GUIDELINES_SITE_URL = "https://erold.dev/guidelines"
DEFAULT_TTL_SECONDS = 5 * 60

GUIDELINE_TOPICS = (
    "ai",
    "api",
    "backend",
    "cloud",
    "data",
    "database",
    "desktop",
    "devops",
    "erold",
    "fastapi",
    "mobile",
    "nextjs",
    "observability",
    "patterns",
    "performance",
    "quality",
    "react",
    "security",
    "servers",
    "systems",
    "tailwind",
    "testing",
    "typescript",
    "uiux",
)


class GuidelineFetchError(EroldClientError):
    pass


@dataclass
class GuidelineCache:
    entries: Optional[List[Dict[str, Any]]] = None
    fetched_at: float = 0.0

    def fresh(self, now: float, ttl_seconds: float) -> bool:
        return self.entries is not None and (now - self.fetched_at) < ttl_seconds

    def store(self, entries: List[Dict[str, Any]], now: float) -> None:
        self.entries = entries
        self.fetched_at = now


def _topic(item: Dict[str, Any]) -> str:
    return str(item.get("topic") or "")


def _search_text(item: Dict[str, Any]) -> str:
    ai = item.get("ai") if isinstance(item.get("ai"), dict) else {}
    tags = item.get("tags") if isinstance(item.get("tags"), list) else []
    parts = [
        item.get("title"),
        item.get("description"),
        " ".join(str(t) for t in tags),
        ai.get("prompt_snippet"),
    ]
    return " ".join(str(p) for p in parts if p).casefold()


@dataclass
class GuidelineService:
    base_url: str = GUIDELINES_API_URL
    ttl_seconds: float = DEFAULT_TTL_SECONDS
    http: Optional[httpx.AsyncClient] = None
    clock: Callable[[], float] = time.monotonic
    cache: GuidelineCache = field(default_factory=GuidelineCache)
    log: logging.Logger = field(
        default_factory=lambda: logging.getLogger("erold_mcp.guidelines")
    )

    async def fetch_all(self) -> List[Dict[str, Any]]:
        now = self.clock()
        if self.cache.fresh(now, self.ttl_seconds):
            return self.cache.entries or []

        try:
            payload = await self._get_json(f"{self.base_url.rstrip('/')}/guidelines")
        except (httpx.HTTPError, ValueError) as exc:
            raise GuidelineFetchError(
                f"Failed to fetch guidelines: {format_error(exc)}"
            ) from exc

        raw = payload.get("guidelines") if isinstance(payload, dict) else None
        entries = [g for g in (raw or []) if isinstance(g, dict)]
        self.cache.store(entries, now)
        log_event("guidelines_fetched", self.log, count=len(entries))
        return entries

    async def _get_json(self, url: str) -> Any:
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if self.http is not None:
            resp = await self.http.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=30.0) as http:
                resp = await http.get(url, headers=headers)
        if not resp.is_success:
            raise ValueError(f"HTTP {resp.status_code}")
        return resp.json()

    async def by_topic(self, topic: str) -> List[Dict[str, Any]]:
        needle = topic.casefold()
        return [g for g in await self.fetch_all() if _topic(g).casefold() == needle]

    async def topics(self) -> List[str]:
        return sorted({_topic(g) for g in await self.fetch_all() if _topic(g)})

    async def search(
        self, query: str, topics: Optional[Iterable[str]] = None
    ) -> List[Dict[str, Any]]:
        items = await self.fetch_all()
        wanted = {t.casefold() for t in topics or []}
        if wanted:
            items = [g for g in items if _topic(g).casefold() in wanted]
        needle = query.casefold()
        return [g for g in items if needle in _search_text(g)]


__all__ = [
    "GuidelineService",
    "GuidelineCache",
    "GuidelineFetchError",
    "GUIDELINE_TOPICS",
    "GUIDELINES_API_URL",
    "GUIDELINES_SITE_URL",
]
