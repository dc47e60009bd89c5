"""
Service configuration, read from the environment and `.env`.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DUMMY_API_KEY = "dummy-key-for-test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"], case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field("DevBoard API", alias="APP_NAME")
    version: str = Field("1.0.0", alias="APP_VERSION")

    # Environment
    environment: str = Field("development", alias="ENVIRONMENT")
    debug: bool = Field(False, alias="DEBUG")
    disable_auth: bool = Field(False, alias="DISABLE_AUTH")
    dev_subject: str = Field("devboard-dev", alias="DEV_SUBJECT")

    # Server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")

    # CORS
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    # JWT Authentication
    jwt_secret_key: str = Field(
        "dev-secret-key-change-in-production", alias="JWT_SECRET_KEY"
    )
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")

    # LLM
    llm_provider: str = Field("openai", alias="LLM_PROVIDER")
    openai_api_key: str = Field(DUMMY_API_KEY, alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: str | None = Field(None, alias="OPENAI_BASE_URL")
    gemini_api_key: str = Field(DUMMY_API_KEY, alias="GEMINI_API_KEY")
    gemini_model: str = Field("gemini-2.0-flash", alias="GEMINI_MODEL")
    llm_temperature: float = Field(0.7, alias="LLM_TEMPERATURE")
    llm_max_tokens: int = Field(4000, alias="LLM_MAX_TOKENS")
    llm_timeout_sec: float = Field(120.0, gt=0, alias="LLM_TIMEOUT_SEC")

    # Streaming
    stream_chunk_size: int = Field(10, ge=1, alias="STREAM_CHUNK_SIZE")
    stream_chunk_delay_ms: int = Field(50, ge=0, alias="STREAM_CHUNK_DELAY_MS")

    # GitHub
    github_api_url: str = Field("https://api.github.com", alias="GITHUB_API_URL")
    github_token: str | None = Field(None, alias="GITHUB_TOKEN")

    # Observability
    prometheus_metrics_enabled: bool = Field(True, alias="PROMETHEUS_METRICS_ENABLED")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")

    def get_cors_origins(self) -> list[str]:
        """Comma-separated ``CORS_ORIGINS`` as a list; ``*`` allows any origin."""
        origins = [origin.strip() for origin in self.cors_origins.split(",")]
        return [origin for origin in origins if origin] or ["*"]

    def active_api_key(self) -> str:
        if self.llm_provider.lower() == "gemini":
            return self.gemini_api_key
        return self.openai_api_key

    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings; also used as a FastAPI dependency."""
    return Settings()
