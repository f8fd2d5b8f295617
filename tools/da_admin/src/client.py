import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from .config import Settings
from .exceptions import HTTPStatusError, TransportError
from .logging import jlog
from .retry import kind_from_httpx, with_retry


async def parse_response_body(response: httpx.Response, url: Optional[str] = None) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            # empty body or invalid JSON
            jlog(
                event="response_json_invalid",
                severity="WARNING",
                url=url,
                status=response.status_code,
                length=len(response.content),
            )
            return {}
    return response.text


class DAAdminClient:
    """
    Thin async client for the DA admin API and the preview/publish admin endpoints.

    Settings (token, base URLs, user agent) are passed in explicitly; nothing is
    read from the environment here.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self.sleep = sleep
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout_s, connect=10.0),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "DAAdminClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -----------------------
    # URLs
    # -----------------------

    def format_url(self, api: str, org: str, repo: str, path: str, ext: Optional[str] = None) -> str:
        clean_path = path[1:] if path.startswith("/") else path
        if ext:
            expected = f".{ext}"
            if not clean_path.endswith(expected):
                clean_path = f"{clean_path}{expected}"
        return f"{self.settings.admin_api_url}/{api}/{org}/{repo}/{clean_path}"

    def helix_url(self, stage: str, org: str, repo: str, path: str) -> str:
        clean_path = path.lstrip("/")
        return f"{self.settings.helix_admin_url}/{stage}/{org}/{repo}/{self.settings.branch}/{clean_path}"

    def public_url(self, template: str, org: str, repo: str, path: str) -> str:
        return template.format(branch=self.settings.branch, org=org, repo=repo, path=path.lstrip("/"))

    # -----------------------
    # Requests
    # -----------------------

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"User-Agent": self.settings.user_agent}
        if extra:
            headers.update(extra)
        if self.settings.da_admin_api_token:
            headers["Authorization"] = f"Bearer {self.settings.da_admin_api_token}"
        return headers

    async def request(
        self,
        url: str,
        method: str = "GET",
        files: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Issue one request and return the parsed body.

        Raises:
            TransportError: the request never got a response (kind tells why).
            HTTPStatusError: the response status was not 2xx.
        """
        try:
            response = await self._http.request(method, url, headers=self._headers(headers), files=files)
        except httpx.TransportError as e:
            kind = kind_from_httpx(e)
            if kind is None:
                raise
            raise TransportError(kind, f"{kind.value} error calling {method} {url}: {e}") from e

        body = await parse_response_body(response, url=url)

        if not response.is_success:
            raise HTTPStatusError(response.status_code, body, url=url)

        return body

    async def request_with_retry(
        self,
        url: str,
        method: str = "GET",
        files: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        max_retries: int = 3,
        initial_delay_ms: int = 1000,
    ) -> Any:
        return await with_retry(
            lambda: self.request(url, method=method, files=files, headers=headers),
            max_retries=max_retries,
            initial_delay_ms=initial_delay_ms,
            sleep=self.sleep,
            label=f"{method} {url}",
        )
