from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for the external sessions API

    # Static bearer token for the external (Claude Code) sessions/applications API
    claude_code_api_token: Optional[str] = None

    # Provider APIs
    vercel_api_base: str = "https://api.vercel.com"
    cloudflare_api_base: str = "https://api.cloudflare.com/client/v4"
    github_api_base: str = "https://api.github.com"
    provider_http_timeout: float = 30.0
    sync_max_workers: int = 8

    # App
    app_name: str = "cloud-tracker"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
