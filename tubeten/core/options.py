# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""ServiceOptions settings model for tubeten."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource
from pydantic_settings import YamlConfigSettingsSource


class ServiceOptions(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TUBETEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        yaml_file="tubeten.yaml",
        yaml_file_encoding="utf-8",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    yt_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("yt_api_key", "TUBETEN_YT_API_KEY", "YOUTUBE_API_KEY"),
    )

    # Filtering
    filter_policy: Literal["strict", "basic"] = "strict"
    min_duration_seconds: int = 5
    max_duration_seconds: int = 1800

    # Quota bounds
    max_items: int = Field(default=2000, ge=1)
    max_detail_lookups: int | None = Field(default=None, ge=1)
    request_timeout: float = Field(default=10.0, gt=0)

    # Pool shaping
    shuffle_pool: bool = False
    max_pool_size: int | None = Field(default=None, ge=1)

    # Cache
    cache_backend: Literal["memory", "file"] = "memory"
    cache_dir: Path = Path("./.tubeten-cache")
    pool_ttl_hours: float = Field(default=48, gt=0)

    # Service
    allowed_origin: str = "*"
    host: str = "127.0.0.1"
    port: int = 4000
    verbose: bool = False
    log_jsonl: Path | None = None

    @property
    def pool_ttl_seconds(self) -> int:
        return int(self.pool_ttl_hours * 3600)
