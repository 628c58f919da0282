import json

import httpx
import pytest
import respx
from conftest import TENANT_URL
from erold_mcp import server as server_module
from erold_mcp.core.guidelines import GuidelineService
from erold_mcp.server import create_server
from erold_mcp.transports.stdio import main as stdio_main
from httpx import Response

EXPECTED_TOOLS = {
    # tasks
    "list_tasks",
    "get_task",
    "create_task",
    "update_task",
    "start_task",
    "complete_task",
    "block_task",
    "search_tasks",
    "add_task_comment",
    "get_task_comments",
    "get_blocked_tasks",
    "get_my_tasks",
    "log_task_time",
    "get_task_activity",
    # projects
    "list_projects",
    "get_project",
    "create_project",
    "update_project",
    "get_project_stats",
    "get_project_tasks",
    # knowledge
    "search_knowledge",
    "get_knowledge",
    "list_knowledge",
    "get_project_knowledge",
    "create_knowledge",
    "update_knowledge",
    # context
    "get_context",
    "get_dashboard",
    "get_stats",
    "get_workload",
    "list_members",
    "list_activity",
    "whoami",
    "list_tenants",
    # vault
    "list_vault",
    "get_vault_secret",
    "create_vault_secret",
    "update_vault_secret",
    "delete_vault_secret",
    # tech info
    "get_tech_info",
    "update_tech_stack",
    "set_deployment_info",
    "add_tech_command",
    "remove_tech_command",
    "set_tech_notes",
    # guidelines
    "get_guidelines",
    "list_guidelines",
    "search_guidelines",
}


@pytest.mark.asyncio
async def test_server_registers_full_catalogue(client):
    app = create_server(client=client)

    tools = {t.name: t for t in await app.list_tools()}

    assert set(tools) == EXPECTED_TOOLS
    for tool in tools.values():
        props = tool.inputSchema.get("properties", {})
        assert "client" not in props
        assert "guidelines" not in props
        assert tool.description


@pytest.mark.asyncio
async def test_enum_parameters_are_in_schema(client):
    app = create_server(client=client)

    tools = {t.name: t for t in await app.list_tools()}
    schema = tools["create_vault_secret"].inputSchema

    assert set(schema["required"]) == {"project_id", "key", "value"}
    assert "credential" in json.dumps(schema["properties"]["category"])


@pytest.mark.asyncio
async def test_parameters_use_snake_case_names(client):
    app = create_server(client=client)

    tools = {t.name: t for t in await app.list_tools()}

    knowledge = tools["get_project_knowledge"].inputSchema["properties"]
    assert {"project_id", "include_content"} <= set(knowledge)
    assert "projectId" not in knowledge
    deployment = tools["set_deployment_info"].inputSchema["properties"]
    assert {"production_url", "staging_url", "production_branch"} <= set(deployment)


@pytest.mark.asyncio
async def test_deployment_urls_carry_pattern(client):
    app = create_server(client=client)

    tools = {t.name: t for t in await app.list_tools()}
    prop = tools["set_deployment_info"].inputSchema["properties"]["production_url"]

    assert "^https?://" in json.dumps(prop)


@pytest.mark.asyncio
async def test_resources_registered(client):
    app = create_server(client=client)

    uris = {str(r.uri) for r in await app.list_resources()}

    assert uris == {"erold://context", "erold://projects", "erold://guidelines"}


@pytest.mark.asyncio
@respx.mock
async def test_projects_resource_reads_through_client(client):
    respx.get(f"{TENANT_URL}/projects").mock(
        return_value=Response(200, json={"data": [{"id": "p1", "title": "Alpha"}]})
    )
    app = create_server(client=client, guidelines=GuidelineService(http=httpx.AsyncClient()))

    contents = list(await app.read_resource("erold://projects"))

    assert json.loads(contents[0].content)[0]["name"] == "Alpha"


def test_run_exits_1_on_startup_failure(monkeypatch, erold_env, caplog):
    def boom():
        raise RuntimeError("cannot bind")

    monkeypatch.setattr(stdio_main, "create_server", boom)
    monkeypatch.setattr(stdio_main, "setup_logging", lambda level: None)

    with caplog.at_level("ERROR", logger="erold_mcp.transports.stdio"):
        with pytest.raises(SystemExit) as exc:
            stdio_main.run()

    assert exc.value.code == 1
    assert any(
        "Failed to start MCP server: cannot bind" in r.getMessage()
        for r in caplog.records
    )


def test_run_exits_1_on_missing_config(monkeypatch, capsys):
    monkeypatch.setattr("erold_mcp.core.config.load_dotenv", lambda *a, **k: None)
    monkeypatch.delenv("EROLD_API_KEY", raising=False)

    with pytest.raises(SystemExit) as exc:
        stdio_main.run()

    assert exc.value.code == 1
    assert "Configuration Error" in capsys.readouterr().err


def test_server_name():
    assert server_module.SERVER_NAME == "erold"
