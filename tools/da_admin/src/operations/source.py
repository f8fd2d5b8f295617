from typing import Any

from ..client import DAAdminClient
from ..logging import jlog


def _source_content_type(ext: str) -> str:
    return "text/html" if ext == "html" else "application/json"


async def get_source(client: DAAdminClient, org: str, repo: str, path: str, ext: str) -> Any:
    """Fetch an html or json source document."""
    url = client.format_url("source", org, repo, path, ext)
    try:
        return await client.request(url)
    except Exception as e:
        jlog(event="get_source_failed", severity="ERROR", url=url, error=str(e))
        raise


async def create_source(client: DAAdminClient, org: str, repo: str, path: str, ext: str, content: str) -> Any:
    """
    Create (or overwrite) a source document.

    The content is sent as the `data` part of a multipart body, typed
    text/html for html documents and application/json otherwise.
    """
    url = client.format_url("source", org, repo, path, ext)
    filename = url.rsplit("/", 1)[-1]
    files = {"data": (filename, content.encode("utf-8"), _source_content_type(ext))}
    try:
        return await client.request(url, method="POST", files=files)
    except Exception as e:
        jlog(event="create_source_failed", severity="ERROR", url=url, error=str(e))
        raise


async def delete_source(client: DAAdminClient, org: str, repo: str, path: str, ext: str) -> Any:
    url = client.format_url("source", org, repo, path, ext)
    try:
        return await client.request(url, method="DELETE")
    except Exception as e:
        jlog(event="delete_source_failed", severity="ERROR", url=url, error=str(e))
        raise


async def list_sources(client: DAAdminClient, org: str, repo: str, path: str = "") -> Any:
    url = client.format_url("list", org, repo, path).rstrip("/")
    try:
        return await client.request(url)
    except Exception as e:
        jlog(event="list_sources_failed", severity="ERROR", url=url, error=str(e))
        raise
