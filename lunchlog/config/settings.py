from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # Completion service (OpenAI-compatible chat completions API)
    openai_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None  # e.g. a proxy or an OpenAI-compatible gateway
    llm_model: str = "gpt-4o-mini"
    llm_vision_model: Optional[str] = None  # falls back to llm_model

    # AWS S3 (will read from uppercase env vars automatically)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "ap-northeast-1"
    s3_bucket_name: Optional[str] = None
    s3_public_base_url: Optional[str] = None  # CDN / public bucket URL prefix for meal photos

    # Auth
    owner_open_id: Optional[str] = None  # this identity is upserted with role=admin

    # Retry policy for external calls (completion service, object storage)
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0

    # App
    app_name: str = "lunchlog-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:8081,http://localhost:19006,http://127.0.0.1:8081,http://127.0.0.1:19006"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    ai_rate_limit: str = "20/minute"  # recommendation / image analysis / report endpoints

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def database_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
