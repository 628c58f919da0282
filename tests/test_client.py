import asyncio
import time

import httpx
import pytest
import respx
from conftest import API_URL, TENANT_URL
from erold_mcp.core import client as client_module
from erold_mcp.core.client import (
    EroldClient,
    RetryConfig,
    build_query_params,
    unwrap_envelope,
)
from erold_mcp.core.errors import ApiError, ConfigurationError, EroldParseError
from httpx import Response


@pytest.mark.asyncio
@respx.mock
async def test_get_unwraps_data_envelope(client):
    respx.get(f"{TENANT_URL}/tasks").mock(
        return_value=Response(200, json={"success": True, "data": [{"id": "t1"}]})
    )

    async with client:
        data = await client.get(client.tenant_path("/tasks"))

    assert data == [{"id": "t1"}]


@pytest.mark.asyncio
@respx.mock
async def test_falsy_data_is_still_unwrapped(client):
    respx.get(f"{TENANT_URL}/tasks").mock(
        return_value=Response(200, json={"data": []})
    )

    async with client:
        assert await client.get(client.tenant_path("/tasks")) == []


@pytest.mark.asyncio
@respx.mock
async def test_body_without_envelope_returned_as_is(client):
    respx.get(f"{API_URL}/me").mock(
        return_value=Response(200, json={"id": "u1", "name": "Ada"})
    )

    async with client:
        assert await client.get("/me") == {"id": "u1", "name": "Ada"}


@pytest.mark.asyncio
@respx.mock
async def test_required_headers_sent(client):
    route = respx.get(f"{TENANT_URL}/projects").mock(
        return_value=Response(200, json={"data": []})
    )

    async with client:
        await client.get(client.tenant_path("/projects"))

    sent = route.calls[0].request.headers
    assert sent["X-API-Key"] == "test-key"
    assert sent["Content-Type"] == "application/json"
    assert sent["User-Agent"] == "erold-mcp/0.1.0"


@pytest.mark.asyncio
@respx.mock
async def test_caller_headers_cannot_replace_api_key(client):
    route = respx.get(f"{API_URL}/me").mock(return_value=Response(200, json={}))

    async with client:
        await client.request(
            "GET", "/me", headers={"x-api-key": "stolen", "X-Trace": "abc"}
        )

    sent = route.calls[0].request.headers
    assert sent["X-API-Key"] == "test-key"
    assert sent["X-Trace"] == "abc"


@pytest.mark.asyncio
@respx.mock
async def test_query_drops_empty_values(client):
    route = respx.get(f"{TENANT_URL}/tasks").mock(
        return_value=Response(200, json={"data": []})
    )

    async with client:
        await client.get(
            client.tenant_path("/tasks"),
            {"status": "todo", "assignee": None, "priority": "", "limit": 5},
        )

    params = route.calls[0].request.url.params
    assert params["status"] == "todo"
    assert params["limit"] == "5"
    assert "assignee" not in params
    assert "priority" not in params


@pytest.mark.asyncio
@respx.mock
async def test_config_is_reread_between_calls(client, monkeypatch):
    first = respx.get(f"{TENANT_URL}/tasks").mock(
        return_value=Response(200, json={"data": []})
    )
    second = respx.get(f"{API_URL}/tenants/other/tasks").mock(
        return_value=Response(200, json={"data": []})
    )

    async with client:
        await client.get(client.tenant_path("/tasks"))
        monkeypatch.setenv("EROLD_TENANT", "other")
        monkeypatch.setenv("EROLD_API_KEY", "rotated-key")
        await client.get(client.tenant_path("/tasks"))

    assert first.call_count == 1
    assert second.call_count == 1
    assert second.calls[0].request.headers["X-API-Key"] == "rotated-key"


@pytest.mark.asyncio
@respx.mock
async def test_missing_config_raises_before_network(monkeypatch):
    monkeypatch.delenv("EROLD_API_KEY", raising=False)
    monkeypatch.setenv("EROLD_TENANT", "acme")

    client = EroldClient()
    async with client:
        with pytest.raises(ConfigurationError):
            await client.get("/me")

    assert not respx.calls


@pytest.mark.asyncio
@respx.mock
async def test_404_raises_without_retry(client):
    route = respx.get(f"{TENANT_URL}/tasks/missing").mock(
        return_value=Response(
            404, json={"success": False, "error": {"message": "Task not found"}}
        )
    )

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.get(client.tenant_path("/tasks/missing"))

    assert exc.value.status_code == 404
    assert exc.value.message == "Task not found"
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_400_raises_once_with_server_message(client):
    route = respx.post(f"{TENANT_URL}/projects").mock(
        return_value=Response(
            400,
            json={
                "error": {
                    "message": "Validation failed",
                    "details": {"title": "required"},
                }
            },
        )
    )

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.post(client.tenant_path("/projects"), {})

    assert exc.value.status_code == 400
    assert exc.value.details == {"title": "required"}
    assert exc.value.message == "Validation failed"
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_error_message_falls_back_to_status(client):
    respx.get(f"{API_URL}/me").mock(return_value=Response(403, text="nope"))

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.get("/me")

    assert exc.value.message == "HTTP 403"


@pytest.mark.asyncio
@respx.mock
async def test_5xx_retried_then_succeeds(client):
    route = respx.get(f"{API_URL}/me").mock(
        side_effect=[
            Response(502, json={"message": "bad gateway"}),
            Response(200, json={"data": {"id": "u1"}}),
        ]
    )

    async with client:
        assert await client.get("/me") == {"id": "u1"}

    assert route.call_count == 2


@pytest.mark.asyncio
@respx.mock
async def test_5xx_gives_up_after_three_attempts(client):
    route = respx.get(f"{API_URL}/me").mock(
        return_value=Response(500, json={"message": "boom"})
    )

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.get("/me")

    assert exc.value.status_code == 500
    assert route.call_count == 3


@pytest.mark.asyncio
@respx.mock
async def test_429_uses_retry_after_in_message(client):
    route = respx.get(f"{API_URL}/me").mock(
        return_value=Response(429, headers={"Retry-After": "17"})
    )

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.get("/me")

    assert exc.value.status_code == 429
    assert exc.value.message == "Rate limited. Try again in 17 seconds."
    assert route.call_count == 3


@pytest.mark.asyncio
@respx.mock
async def test_429_then_success_returns_result(client):
    route = respx.get(f"{TENANT_URL}/tasks").mock(
        side_effect=[
            Response(429, headers={"Retry-After": "5"}),
            Response(200, json={"data": [{"id": "t1"}]}),
        ]
    )

    async with client:
        data = await client.get(client.tenant_path("/tasks"))

    assert data == [{"id": "t1"}]
    assert route.call_count == 2


@pytest.mark.asyncio
@respx.mock
async def test_429_without_retry_after_defaults_to_60(client):
    respx.get(f"{API_URL}/me").mock(
        side_effect=[Response(429), Response(429), Response(429)]
    )

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.get("/me")

    assert "60 seconds" in exc.value.message


@pytest.mark.asyncio
@respx.mock
async def test_timeout_retried_then_raises_408(client):
    route = respx.get(f"{API_URL}/me").mock(
        side_effect=httpx.ReadTimeout("slow")
    )

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.get("/me")

    assert exc.value.status_code == 408
    assert exc.value.timed_out is True
    assert route.call_count == 3


@pytest.mark.asyncio
async def test_slow_response_hits_whole_request_deadline(erold_env):
    attempts = []

    async def slow_handler(request):
        attempts.append(request)
        await asyncio.sleep(1)
        return Response(200, json={"data": "too late"})

    http = httpx.AsyncClient(transport=httpx.MockTransport(slow_handler))
    client = EroldClient(
        timeout_seconds=0.05,
        retry=RetryConfig(max_attempts=2, backoff_base_seconds=0),
        http=http,
    )

    started = time.perf_counter()
    async with http:
        with pytest.raises(ApiError) as exc:
            await client.get("/me")

    assert exc.value.status_code == 408
    assert exc.value.timed_out is True
    assert len(attempts) == 2
    assert time.perf_counter() - started < 0.9


@pytest.mark.asyncio
@respx.mock
async def test_network_error_is_retried(client):
    route = respx.get(f"{API_URL}/me").mock(
        side_effect=[httpx.ConnectError("refused"), Response(200, json={"ok": 1})]
    )

    async with client:
        assert await client.get("/me") == {"ok": 1}

    assert route.call_count == 2


@pytest.mark.asyncio
@respx.mock
async def test_network_error_surfaces_as_503(client):
    respx.get(f"{API_URL}/me").mock(side_effect=httpx.ConnectError("refused"))

    async with client:
        with pytest.raises(ApiError) as exc:
            await client.get("/me")

    assert exc.value.status_code == 503
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
@respx.mock
async def test_backoff_is_linear(erold_env, monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(client_module.asyncio, "sleep", fake_sleep)
    respx.get(f"{API_URL}/me").mock(return_value=Response(503))

    client = EroldClient(retry=RetryConfig(backoff_base_seconds=1.5))
    async with client:
        with pytest.raises(ApiError):
            await client.get("/me")

    assert delays == [1.5, 3.0]


@pytest.mark.asyncio
@respx.mock
async def test_empty_body_returns_none(client):
    respx.delete(f"{TENANT_URL}/tasks/t1").mock(return_value=Response(204))

    async with client:
        assert await client.delete(client.tenant_path("/tasks/t1")) is None


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_raises_parse_error(client):
    route = respx.get(f"{API_URL}/me").mock(
        return_value=Response(
            200,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
    )

    async with client:
        with pytest.raises(EroldParseError):
            await client.get("/me")

    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_post_defaults_to_empty_body(client):
    route = respx.post(f"{TENANT_URL}/tasks/t1/start").mock(
        return_value=Response(200, json={"data": {"id": "t1"}})
    )

    async with client:
        await client.post(client.tenant_path("/tasks/t1/start"))

    assert route.calls[0].request.content == b"{}"


def test_build_query_params_renders_booleans():
    assert build_query_params({"a": True, "b": False, "c": None, "d": 0}) == {
        "a": "true",
        "b": "false",
        "d": "0",
    }


def test_unwrap_envelope_only_for_dicts_with_data():
    assert unwrap_envelope({"data": None}) is None
    assert unwrap_envelope({"items": [1]}) == {"items": [1]}
    assert unwrap_envelope([1, 2]) == [1, 2]


def test_retry_delay_grows_with_attempt():
    retry = RetryConfig()
    assert [retry.delay_for(n) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]
