# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pydantic data models for tubeten."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for models that travel over the wire with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RawItem(BaseModel):
    video_id: str
    title: str = ""
    thumbnails: dict | None = None


class VideoDetail(BaseModel):
    video_id: str
    duration_seconds: int = 0
    duration: str | None = None
    embeddable: bool | None = None
    # Open strings: unexpected upstream values are judged by the filters.
    privacy_status: str | None = None
    upload_status: str | None = None


class PoolEntry(CamelModel):
    video_id: str
    title: str
    thumbnails: dict | None = None
    duration_seconds: int
    duration: str | None = None
    added_at: datetime


class Pool(CamelModel):
    playlist_id: str
    entries: list[PoolEntry] = []
    fetched_count: int = 0
    created_at: datetime

    @property
    def count(self) -> int:
        return len(self.entries)


class ImportSummary(CamelModel):
    identifier: str
    count: int
    fetched: int
    sample: list[PoolEntry]
    served_from_cache: bool

    @classmethod
    def from_pool(cls, pool: Pool, served_from_cache: bool, preview: int = 6) -> ImportSummary:
        return cls(
            identifier=pool.playlist_id,
            count=pool.count,
            fetched=pool.fetched_count,
            sample=pool.entries[:preview],
            served_from_cache=served_from_cache,
        )


class PoolItems(CamelModel):
    identifier: str
    count: int
    items: list[PoolEntry]
