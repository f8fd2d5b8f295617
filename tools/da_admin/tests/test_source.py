import httpx
import pytest

from tools.da_admin.src.exceptions import HTTPStatusError
from tools.da_admin.src.operations.source import create_source, delete_source, get_source, list_sources

pytestmark = pytest.mark.anyio


class Recorder:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.response


async def test_get_source_returns_html_text(make_client):
    rec = Recorder(httpx.Response(200, text="<body><main>Hi</main></body>", headers={"content-type": "text/html"}))
    client = make_client(rec)

    body = await get_source(client, "acme", "site", "docs/index", "html")

    assert body == "<body><main>Hi</main></body>"
    assert rec.requests[0].method == "GET"
    assert str(rec.requests[0].url) == "https://admin.example/source/acme/site/docs/index.html"


async def test_create_html_source_posts_multipart_html(make_client):
    rec = Recorder(httpx.Response(201, json={"source": {"editUrl": "https://da.live/edit#/acme/site/docs/new"}}))
    client = make_client(rec)

    body = await create_source(client, "acme", "site", "docs/new", "html", "<body><main>x</main></body>")

    request = rec.requests[0]
    assert body["source"]["editUrl"].endswith("docs/new")
    assert request.method == "POST"
    assert str(request.url) == "https://admin.example/source/acme/site/docs/new.html"
    assert b'name="data"' in request.content
    assert b"Content-Type: text/html" in request.content
    assert b"<body><main>x</main></body>" in request.content


async def test_create_json_source_uses_json_content_type(make_client):
    rec = Recorder(httpx.Response(201, json={}))
    client = make_client(rec)

    await create_source(client, "acme", "site", "data/sheet", "json", '{":type": "multi-sheet"}')

    assert b"Content-Type: application/json" in rec.requests[0].content


async def test_delete_source_uses_delete(make_client):
    rec = Recorder(httpx.Response(204))
    client = make_client(rec)

    assert await delete_source(client, "acme", "site", "/docs/old.html", "html") == ""
    assert rec.requests[0].method == "DELETE"
    assert str(rec.requests[0].url) == "https://admin.example/source/acme/site/docs/old.html"


async def test_list_sources_hits_list_api(make_client):
    rec = Recorder(httpx.Response(200, json=[{"name": "index", "ext": "html", "path": "/acme/site/index.html"}]))
    client = make_client(rec)

    listing = await list_sources(client, "acme", "site")

    assert listing[0]["name"] == "index"
    assert str(rec.requests[0].url) == "https://admin.example/list/acme/site"


async def test_source_errors_are_reraised(make_client):
    client = make_client(Recorder(httpx.Response(401, text="unauthorized")))

    with pytest.raises(HTTPStatusError, match="401: unauthorized"):
        await get_source(client, "acme", "site", "docs/index", "html")
