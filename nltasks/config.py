from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime options for the task parser service.

    The rule-based engine needs no configuration at all; everything here
    either switches on the Claude backend or tunes the HTTP surface. Each
    field can be set from the environment (``AI_PARSER_ENABLED=true``) or
    from a ``.env`` file next to the working directory. A missing ``.env``
    is not an error.
    """

    # Claude backend, off unless explicitly enabled and keyed
    ai_parser_enabled: bool = False
    anthropic_api_key: str = ""
    llm_model: str = "claude-sonnet-4-20250514"
    ai_max_tokens: int = 2048

    # HTTP service
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()


settings = get_settings()
