import httpx
import pytest

from tools.da_admin.src.client import DAAdminClient
from tools.da_admin.src.config import Settings


@pytest.fixture
def anyio_backend():
    return "asyncio"


class SleepRecorder:
    """Stands in for asyncio.sleep; records requested waits in seconds."""
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        da_admin_api_token="test-token",
        admin_api_url="https://admin.example",
        helix_admin_url="https://helix.example",
        user_agent="da-admin-mcp/test",
    )


@pytest.fixture
def make_client(settings, sleeper):
    def _make(handler, **overrides):
        s = settings.model_copy(update=overrides) if overrides else settings
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return DAAdminClient(s, http_client=http, sleep=sleeper)
    return _make
