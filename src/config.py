"""
Project-wide configuration using Pydantic Settings.
Upstream API settings, retry/backoff policy, cache TTL and logging live here.
"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class JolpicaConfig(BaseSettings):
    base_url: str = "https://api.jolpi.ca/ergast/f1"
    timeout_ms: int = Field(default=10_000, gt=0)
    max_retries: int = Field(default=2, ge=0)
    base_retry_delay_ms: int = Field(default=1_000, ge=0)
    default_cache_ttl_ms: int = Field(default=300_000, ge=0)
    user_agent: str = "f1-stats-client/1.0"

    model_config = {"env_prefix": "JOLPICA_"}

    @property
    def timeout(self) -> float:
        """Per-attempt timeout in seconds."""
        return self.timeout_ms / 1000

    @property
    def base_retry_delay(self) -> float:
        return self.base_retry_delay_ms / 1000

    @property
    def default_cache_ttl(self) -> float:
        return self.default_cache_ttl_ms / 1000


class LogConfig(BaseSettings):
    level: str = "INFO"
    dir: Optional[Path] = None  # file sink disabled unless set

    model_config = {"env_prefix": "F1_LOG_"}


class Config:
    """Unified project configuration."""

    api: JolpicaConfig = JolpicaConfig()
    log: LogConfig = LogConfig()


# Singleton instance
cfg = Config()
