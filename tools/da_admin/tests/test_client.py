import re

import httpx
import pytest

from tools.da_admin.src.exceptions import ErrorKind, HTTPStatusError, TransportError

pytestmark = pytest.mark.anyio


async def test_request_injects_user_agent_and_bearer_token(make_client):
    seen = {}

    def handler(request: httpx.Request):
        seen["headers"] = request.headers
        return httpx.Response(200, json={"ok": True})

    client = make_client(handler)
    body = await client.request("https://admin.example/source/acme/site/index.html")

    assert body == {"ok": True}
    assert seen["headers"]["user-agent"] == "da-admin-mcp/test"
    assert seen["headers"]["authorization"] == "Bearer test-token"


async def test_request_without_token_sends_no_authorization(make_client):
    seen = {}

    def handler(request: httpx.Request):
        seen["headers"] = request.headers
        return httpx.Response(200, text="hello")

    client = make_client(handler, da_admin_api_token=None)
    await client.request("https://admin.example/source/acme/site/a.html")

    assert "authorization" not in seen["headers"]


async def test_text_body_is_returned_as_string(make_client):
    client = make_client(lambda r: httpx.Response(200, text="<body>hi</body>", headers={"content-type": "text/html"}))
    assert await client.request("https://admin.example/source/a/b/c.html") == "<body>hi</body>"


async def test_empty_json_body_becomes_empty_dict(make_client):
    client = make_client(lambda r: httpx.Response(201, content=b"", headers={"content-type": "application/json"}))
    assert await client.request("https://admin.example/source/a/b/c.json", method="POST") == {}


async def test_invalid_json_body_becomes_empty_dict(make_client):
    client = make_client(lambda r: httpx.Response(200, content=b"{not json", headers={"content-type": "application/json; charset=utf-8"}))
    assert await client.request("https://admin.example/source/a/b/c.json") == {}


async def test_non_2xx_raises_with_status_and_body(make_client):
    client = make_client(lambda r: httpx.Response(404, text="not found"))

    with pytest.raises(HTTPStatusError) as exc_info:
        await client.request("https://admin.example/source/a/b/missing.html")

    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == "404: not found"


async def test_non_2xx_json_body_is_serialized_in_message(make_client):
    client = make_client(lambda r: httpx.Response(400, json={"error": "bad path"}))

    with pytest.raises(HTTPStatusError, match=re.escape('400: {"error": "bad path"}')):
        await client.request("https://admin.example/source/a/b/c.html")


async def test_network_failure_is_raised_with_structured_kind(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(TransportError) as exc_info:
        await client.request("https://admin.example/source/a/b/c.html")

    assert exc_info.value.kind == ErrorKind.NETWORK
    assert exc_info.value.transient


async def test_request_with_retry_recovers_from_timeouts(make_client, sleeper):
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        if calls["n"] < 3:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json={"done": True})

    client = make_client(handler)
    body = await client.request_with_retry("https://admin.example/list/a/b", max_retries=3, initial_delay_ms=100)

    assert body == {"done": True}
    assert calls["n"] == 3
    assert sleeper.calls == [0.1, 0.2]


@pytest.mark.parametrize(
    "path, ext, expected",
    [
        ("docs/page", "html", "https://admin.example/source/acme/site/docs/page.html"),
        ("/docs/page", "html", "https://admin.example/source/acme/site/docs/page.html"),
        ("docs/page.html", "html", "https://admin.example/source/acme/site/docs/page.html"),
        ("data/sheet", "json", "https://admin.example/source/acme/site/data/sheet.json"),
        ("media/img.png", None, "https://admin.example/source/acme/site/media/img.png"),
    ],
)
def test_format_url(make_client, path, ext, expected):
    client = make_client(lambda r: httpx.Response(200))
    assert client.format_url("source", "acme", "site", path, ext) == expected


def test_helix_and_public_urls(make_client):
    client = make_client(lambda r: httpx.Response(200))
    assert client.helix_url("preview", "acme", "site", "/assets/img.png") == \
        "https://helix.example/preview/acme/site/main/assets/img.png"
    assert client.public_url(client.settings.live_url_template, "acme", "site", "assets/img.png") == \
        "https://main--site--acme.aem.live/assets/img.png"
