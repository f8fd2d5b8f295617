import json

import httpx
import pytest
from starlette.testclient import TestClient

from tools.da_admin import mcp_server

client = TestClient(mcp_server.starlette_app)


def test_health_lists_tools():
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert "da_admin_upload_asset" in data["tools"]


@pytest.mark.anyio
async def test_list_tools_advertises_registry():
    tools = await mcp_server.list_tools()
    assert {t.name for t in tools} >= {"da_admin_get_source", "da_admin_upload_asset"}


@pytest.mark.anyio
async def test_call_tool_uses_shared_client(monkeypatch, make_client):
    fake = make_client(lambda r: httpx.Response(200, json={"ok": True}))
    monkeypatch.setattr(mcp_server, "da_client", fake)

    contents = await mcp_server.call_tool(
        "da_admin_list_sources", {"org": "acme", "repo": "site"}
    )

    assert json.loads(contents[0].text) == {"ok": True}
