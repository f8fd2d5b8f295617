import os
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from anyio import to_thread

from ..client import DAAdminClient
from ..exceptions import AssetReadError, AssetUploadError, HTTPStatusError
from ..logging import jlog
from ..retry import is_transient
from ..schemas import StepResult, UploadResult

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
    "mp4": "video/mp4",
    "webm": "video/webm",
}

NETWORK_FAILURE_HINT = (
    "network error persisted after retries. Probable causes: "
    "SSL/TLS handshake failure, network connectivity problems, "
    "rate limiting by the server, or too many concurrent connections"
)


def resolve_content_type(filename: str) -> str:
    _, ext = os.path.splitext(filename)
    return CONTENT_TYPES.get(ext.lstrip(".").lower(), DEFAULT_CONTENT_TYPE)


async def read_local_file(file_path: str) -> bytes:
    return await to_thread.run_sync(Path(file_path).read_bytes)


async def _trigger_stage(
    client: DAAdminClient,
    step: str,
    stage: str,
    org: str,
    repo: str,
    path: str,
    settle_ms: int,
) -> StepResult:
    """Run a preview/publish trigger. Failures are logged and reported as skipped, never raised."""
    url = client.helix_url(stage, org, repo, path)
    settings = client.settings
    try:
        await client.request_with_retry(
            url,
            method="POST",
            max_retries=settings.trigger_max_retries,
            initial_delay_ms=settings.trigger_initial_delay_ms,
        )
        result = StepResult(step=step, status="success")
        jlog(event=f"{step}_ok", url=url)
    except Exception as e:
        status_code = e.status_code if isinstance(e, HTTPStatusError) else None
        result = StepResult(step=step, status="skipped", reason=str(e), status_code=status_code)
        jlog(event=f"{step}_skipped", severity="WARNING", url=url, status_code=status_code, error=str(e))

    # let the remote pipeline converge before the next dependent call
    await client.sleep(settle_ms / 1000.0)
    return result


async def upload_asset(
    client: DAAdminClient,
    org: str,
    repo: str,
    path: str,
    file_path: str,
    content_type: Optional[str] = None,
    read_bytes: Callable[[str], Awaitable[bytes]] = read_local_file,
) -> UploadResult:
    """
    Upload a local asset, then trigger preview and publish for it.

    Reading the file and uploading it are fatal steps: any failure there raises
    and preview/publish are not attempted. Preview and publish failures are
    recorded in `steps` with status "skipped" and the result is still returned.

    Raises:
        AssetReadError: the local file could not be read.
        AssetUploadError: the upload failed (after retries, for network errors).
    """
    settings = client.settings
    clean_path = path.lstrip("/")

    try:
        data = await read_bytes(file_path)
    except Exception as e:
        jlog(event="asset_read_failed", severity="ERROR", file_path=file_path, error=str(e))
        raise AssetReadError(f"Failed to read asset file {file_path}: {e}") from e

    resolved_type = content_type or resolve_content_type(file_path)
    upload_url = client.format_url("source", org, repo, clean_path)
    files = {"data": (os.path.basename(clean_path), data, resolved_type)}

    jlog(event="asset_upload", url=upload_url, content_type=resolved_type, size=len(data))

    try:
        await client.request_with_retry(
            upload_url,
            method="POST",
            files=files,
            max_retries=settings.upload_max_retries,
            initial_delay_ms=settings.upload_initial_delay_ms,
        )
    except Exception as e:
        status_code = e.status_code if isinstance(e, HTTPStatusError) else None
        jlog(event="asset_upload_failed", severity="ERROR", url=upload_url,
             status_code=status_code, transient=is_transient(e), error=str(e))
        if is_transient(e):
            raise AssetUploadError(
                f"Failed to upload asset to {upload_url}: {NETWORK_FAILURE_HINT}. Original error: {e}",
            ) from e
        raise AssetUploadError(f"Failed to upload asset to {upload_url}: {e}", status_code=status_code) from e

    steps = [
        StepResult(step="upload", status="success"),
        await _trigger_stage(client, "preview", "preview", org, repo, clean_path, settings.preview_settle_ms),
        await _trigger_stage(client, "publish", "live", org, repo, clean_path, settings.publish_settle_ms),
    ]

    result = UploadResult(
        success=True,
        path=clean_path,
        preview_url=client.public_url(settings.preview_url_template, org, repo, clean_path),
        live_url=client.public_url(settings.live_url_template, org, repo, clean_path),
        content_type=resolved_type,
        size=len(data),
        steps=steps,
    )
    jlog(event="asset_upload_done", path=clean_path, steps=[s.model_dump() for s in steps])
    return result


async def preview_resource(client: DAAdminClient, org: str, repo: str, path: str) -> Any:
    settings = client.settings
    return await client.request_with_retry(
        client.helix_url("preview", org, repo, path),
        method="POST",
        max_retries=settings.trigger_max_retries,
        initial_delay_ms=settings.trigger_initial_delay_ms,
    )


async def publish_resource(client: DAAdminClient, org: str, repo: str, path: str) -> Any:
    settings = client.settings
    return await client.request_with_retry(
        client.helix_url("live", org, repo, path),
        method="POST",
        max_retries=settings.trigger_max_retries,
        initial_delay_ms=settings.trigger_initial_delay_ms,
    )
