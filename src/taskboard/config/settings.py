"""Application settings."""

from functools import lru_cache
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "taskboard"
    app_env: str = "dev"
    log_level: str = "INFO"
    apper_project_id: str = ""
    apper_public_key: str = ""
    sdk_factory: str = ""
    task_table: str = "task_c"
    file_table: str = "files_c"
    sdk_poll_interval_s: float = Field(default=0.1, gt=0.0)
    sdk_poll_max_attempts: int = Field(default=50, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        extra="ignore",
        env_file=(PROJECT_ROOT / ".env", PROJECT_ROOT / ".env.local"),
        env_file_encoding="utf-8",
    )

    def resolved_project_id(self) -> str:
        return self.apper_project_id or os.getenv("VITE_APPER_PROJECT_ID", "")

    def resolved_public_key(self) -> str:
        return self.apper_public_key or os.getenv("VITE_APPER_PUBLIC_KEY", "")

    def sdk_ready_timeout_s(self) -> float:
        """Readiness budget for the vendor SDK: interval times attempts (5s by default)."""
        return self.sdk_poll_interval_s * self.sdk_poll_max_attempts


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
