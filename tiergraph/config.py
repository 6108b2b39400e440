"""Runtime settings, overridable through ``TIERGRAPH_*`` environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATE_KEY = "node-graph-editor-state"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TIERGRAPH_", extra="ignore")

    state_path: Path = Field(default_factory=lambda: Path.home() / ".tiergraph" / "state.json")
    state_key: str = DEFAULT_STATE_KEY
    max_input_bytes: int = 10 * 1024 * 1024  # 10 MB


def get_settings() -> Settings:
    """Read settings fresh from the environment."""
    return Settings()
