"""Runtime configuration for the chat stream relay."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = """You are Abhijit Behera's professional portfolio assistant. Answer all questions strictly based on the provided context of his skills, projects, and case studies. Do not generate information outside of this professional scope.

Context:
Abhijit Behera is a Full Stack Developer.
"""


class Settings(BaseSettings):
    """Runtime configuration for the chat stream relay.

    Built once per process and never mutated, so every request task reads the
    same credential and system directive.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Upstream provider
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    openai_model: str = Field(default="gpt-3.5-turbo", alias="OPENAI_MODEL")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, alias="SYSTEM_PROMPT")

    # Streaming behaviour
    fallback_chunk_delay_ms: int = Field(default=20, ge=0, alias="FALLBACK_CHUNK_DELAY_MS")
    upstream_connect_timeout: float = Field(default=10.0, gt=0, alias="UPSTREAM_CONNECT_TIMEOUT")
    # Non-positive disables the deadline and leaves it to the host
    request_deadline_seconds: float = Field(default=120.0, alias="REQUEST_DEADLINE_SECONDS")

    # FastAPI configuration
    chat_path: str = Field(default="/api/chat-stream", alias="CHAT_PATH")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8080, alias="APP_PORT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def has_credential(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())

    @property
    def fallback_chunk_delay(self) -> float:
        return self.fallback_chunk_delay_ms / 1000.0

    @property
    def request_deadline(self) -> float | None:
        if self.request_deadline_seconds <= 0:
            return None
        return self.request_deadline_seconds


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings so multiple imports share a single instance."""

    return Settings()
