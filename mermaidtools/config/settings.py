from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

MERMAID_CDN_URL = "https://cdn.jsdelivr.net/npm/mermaid/dist/mermaid.min.js"


class BrowserSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MERMAIDTOOLS_", case_sensitive=False)

    mermaid_url: str = MERMAID_CDN_URL
    chromium_executable: Path | None = None


@lru_cache(maxsize=1)
def get_settings() -> BrowserSettings:
    return BrowserSettings()
