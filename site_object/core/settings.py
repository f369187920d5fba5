"""
Centralized configuration (environment variables / .env), keeps tests and
local runs reproducible.
"""
# @file purpose: Centralized settings using Pydantic Settings.

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SITE_OBJECT_", env_file=".env", extra="ignore")

    base_url: str = ""
    platform: Literal["playwright", "selenium"] = "playwright"
    browser_type: str = "chromium"
    headless: bool = True
    slow_mo_ms: int = 0
    default_timeout_ms: int = 30_000
    log_level: str = "INFO"


settings = Settings()


class BrowserOptions(BaseModel):
    """Launch options accepted by open_browser(); unset fields come from settings."""

    model_config = ConfigDict(extra="forbid")

    headless: bool = Field(default_factory=lambda: settings.headless)
    slow_mo_ms: int = Field(default_factory=lambda: settings.slow_mo_ms, ge=0)
    default_timeout_ms: int = Field(default_factory=lambda: settings.default_timeout_ms, gt=0)
