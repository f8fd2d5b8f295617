from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

# -----------------------
# Settings and constants
# -----------------------

class Settings(BaseSettings):

    # DA admin API (token is optional; anonymous calls work on public orgs)
    da_admin_api_token: Optional[str] = None
    admin_api_url: str = "https://admin.da.live"
    user_agent: str = "da-admin-mcp/1.0.0"
    request_timeout_s: float = 60

    # Preview / publish (helix admin)
    helix_admin_url: str = "https://admin.hlx.page"
    branch: str = "main"
    preview_url_template: str = "https://{branch}--{repo}--{org}.aem.page/{path}"
    live_url_template: str = "https://{branch}--{repo}--{org}.aem.live/{path}"

    # Retry tuning for the upload workflow
    upload_max_retries: int = 3
    upload_initial_delay_ms: int = 1000
    trigger_max_retries: int = 2
    trigger_initial_delay_ms: int = 500

    # Settle delays after preview / publish triggers
    preview_settle_ms: int = 1000
    publish_settle_ms: int = 800

    # Server
    app_host: str = "0.0.0.0"
    app_port: int = 8080
    service_name: str = "da-admin-mcp"

    # Global settings configuration (Pydantic v2)
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
