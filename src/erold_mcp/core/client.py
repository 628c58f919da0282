import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from .config import ClientConfig, get_config
from .errors import (
    ApiError,
    ConfigurationError,
    EroldClientError,
    EroldParseError,
    is_retryable,
)
from .observability import log_event

CLIENT_VERSION = "0.1.0"
USER_AGENT = f"erold-mcp/{CLIENT_VERSION}"
API_KEY_HEADER = "X-API-Key"
DEFAULT_TIMEOUT_SECONDS = 30.0
NETWORK_ERROR_STATUS = 503


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3  # first try included
    backoff_base_seconds: float = 1.0  # 1.0, 2.0, ...

    def delay_for(self, attempt: int) -> float:
        return self.backoff_base_seconds * attempt


def build_query_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop None/"" values and coerce the rest to strings, preserving order."""
    query: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


def unwrap_envelope(body: Any) -> Any:
    """Return body["data"] when the key is present (even if falsy), else body."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _retry_after_seconds(resp: httpx.Response) -> Optional[int]:
    raw = resp.headers.get("retry-after")
    if not raw:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


class EroldClient:
    """
    Shared HTTP client for the tenant-scoped Erold REST API.
    - Resolves configuration on every request (env changes apply immediately)
    - Handles auth header, timeouts, retries and envelope unwrapping
    - No business logic; accessors and tools own domain decisions
    """

    def __init__(
        self,
        *,
        config_provider: Callable[[], ClientConfig] = get_config,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        retry: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
        user_agent: str = USER_AGENT,
    ):
        self.config_provider = config_provider
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.user_agent = user_agent
        self.log = logger or logging.getLogger("erold_mcp.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout_seconds)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "EroldClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        # Uncached: environment changes apply to the next request.
        return self.config_provider()

    def tenant_path(self, suffix: str = "") -> str:
        return f"/tenants/{self.config.tenant}{suffix}"

    def _headers(
        self, config: ClientConfig, overrides: Optional[Mapping[str, str]]
    ) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }
        for key, value in (overrides or {}).items():
            if key.lower() == API_KEY_HEADER.lower():
                continue
            headers[key] = value
        headers[API_KEY_HEADER] = config.api_key
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        tool: Optional[str] = None,
    ) -> Any:
        """
        Core request method.
        - Retries 5xx, 429 and timeouts with linear backoff (max 3 attempts)
        - Each attempt is bounded by `timeout_seconds` end to end
        - Raises ApiError immediately for other 4xx responses
        - Raises ConfigurationError before any network I/O if config is missing
        - Returns the unwrapped logical result on success
        """
        method = method.upper()
        config = self.config
        url = f"{config.api_url}{path}"
        query = build_query_params(params)
        req_headers = self._headers(config, headers)

        attempt = 1
        while True:
            start = time.perf_counter()
            try:
                # Deadline covers the whole exchange, not each socket step
                resp = await asyncio.wait_for(
                    self.http.request(
                        method,
                        url,
                        params=query or None,
                        json=json,
                        headers=req_headers,
                    ),
                    self.timeout_seconds,
                )
            except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
                error = ApiError.timeout()
                error.__cause__ = exc
                self._log_call(tool, method, path, "timeout", start, attempt, exc)
            except httpx.TransportError as exc:
                error = ApiError(f"Network error: {exc}", NETWORK_ERROR_STATUS)
                error.__cause__ = exc
                self._log_call(tool, method, path, "exception", start, attempt, exc)
            else:
                self._log_call(tool, method, path, resp.status_code, start, attempt)
                if resp.status_code == 429:
                    error = ApiError.rate_limited(_retry_after_seconds(resp))
                elif not resp.is_success:
                    error = self._to_api_error(resp)
                else:
                    return unwrap_envelope(self._parse_body(resp, strict=True))

            if not self._should_retry(error, attempt):
                raise error

            delay = self.retry.delay_for(attempt)
            log_event(
                "op_retry",
                self.log,
                level=logging.WARNING,
                tool=tool,
                method=method,
                endpoint=path,
                status=error.status_code,
                attempt=attempt,
                delay_s=delay,
            )
            await asyncio.sleep(delay)
            attempt += 1

    def _should_retry(self, error: Exception, attempt: int) -> bool:
        if (
            isinstance(error, ApiError)
            and not error.timed_out
            and 400 <= error.status_code < 500
            and error.status_code != 429
        ):
            return False
        if not is_retryable(error):
            return False
        return attempt < self.retry.max_attempts

    def _log_call(
        self,
        tool: Optional[str],
        method: str,
        path: str,
        status: Any,
        start: float,
        attempt: int,
        exc: Optional[BaseException] = None,
    ) -> None:
        log_event(
            "op_call",
            self.log,
            tool=tool,
            method=method,
            endpoint=path,
            status=status,
            duration_ms=int((time.perf_counter() - start) * 1000),
            attempt=attempt,
            error_type=type(exc).__name__ if exc is not None else None,
        )

    @staticmethod
    def _parse_body(resp: httpx.Response, *, strict: bool) -> Any:
        if not resp.content:
            return None

        content_type = resp.headers.get("content-type", "")
        if "application/json" not in content_type:
            return resp.text

        try:
            return resp.json()
        except ValueError as exc:
            if not strict:
                return resp.text
            snippet = (resp.text or "")[:500]
            raise EroldParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got body snippet: {snippet!r}"
            ) from exc

    def _to_api_error(self, resp: httpx.Response) -> ApiError:
        body = self._parse_body(resp, strict=False)
        message = None
        details = None

        if isinstance(body, dict):
            err = body.get("error")
            if isinstance(err, dict):
                message = err.get("message")
                details = err.get("details")
            message = message or body.get("message")

        if not isinstance(message, str) or not message:
            message = f"HTTP {resp.status_code}"

        return ApiError(message, resp.status_code, details)

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        tool: Optional[str] = None,
    ) -> Any:
        return await self.request("GET", path, params=params, tool=tool)

    async def post(
        self, path: str, json: Any = None, *, tool: Optional[str] = None
    ) -> Any:
        return await self.request(
            "POST", path, json={} if json is None else json, tool=tool
        )

    async def patch(
        self, path: str, json: Any = None, *, tool: Optional[str] = None
    ) -> Any:
        return await self.request(
            "PATCH", path, json={} if json is None else json, tool=tool
        )

    async def delete(self, path: str, *, tool: Optional[str] = None) -> Any:
        return await self.request("DELETE", path, tool=tool)


__all__ = [
    "EroldClient",
    "RetryConfig",
    "build_query_params",
    "unwrap_envelope",
    "EroldClientError",
    "ApiError",
    "ConfigurationError",
    "EroldParseError",
    "API_KEY_HEADER",
    "USER_AGENT",
]
