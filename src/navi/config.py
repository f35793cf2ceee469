"""Settings for navi.

Later sources lose to earlier ones: constructor arguments, then NAVI__*
environment variables (NAVI__NOTION__TOKEN=secret_...), then navi.yaml from the
current directory or the platform config dir, then the defaults below.

The config file is optional, but a Notion token must come from somewhere
before a crawl can run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> str | None:
    local = Path("navi.yaml")
    user = Path(platformdirs.user_config_dir("navi")) / "navi.yaml"
    found = next((path for path in (local, user) if path.is_file()), None)
    return str(found) if found else None


class NotionSettings(BaseModel):
    token: str = ""
    base_url: str = "https://api.notion.com/v1"
    api_version: str = "2022-06-28"
    page_size: int = Field(default=100, ge=1, le=100)
    timeout_seconds: float = 30.0


class CrawlSettings(BaseModel):
    lookback_days: int = Field(default=7, ge=1)
    # Wall-clock budget for scanning a single page for edit roots.
    scan_budget_seconds: float = Field(default=30.0, gt=0)


class ExclusionSettings(BaseModel):
    # Regexes matched against page titles and URLs.
    page_patterns: list[str] = []


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: NAVI__CRAWL__LOOKBACK_DAYS=1
        env_prefix="NAVI__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    notion: NotionSettings = NotionSettings()
    crawl: CrawlSettings = CrawlSettings()
    exclusions: ExclusionSettings = ExclusionSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # No .env or secrets-dir support
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))
