# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Upstream catalog access (YouTube Data API v3)."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from tubeten.core.errors import (
    CatalogError,
    CatalogHttpError,
    CatalogTimeoutError,
    MissingCredentialError,
)
from tubeten.core.options import ServiceOptions

logger = logging.getLogger("tubeten")

# Upstream limit for both maxResults on playlistItems.list and ids per videos.list.
PAGE_SIZE = 50


class CatalogClient(Protocol):
    """The two read endpoints the importer needs.

    Both return the decoded JSON response body. Implementations must map
    transport failures to :class:`~tubeten.core.errors.CatalogError`
    subclasses.
    """

    def list_playlist_items(self, playlist_id: str, page_token: str | None = None) -> dict:
        ...  # pragma: no cover

    def list_videos(self, video_ids: Sequence[str]) -> dict:
        ...  # pragma: no cover


class YouTubeCatalogClient:
    """CatalogClient backed by google-api-python-client.

    Every request is executed once (no retries) over an ``httplib2.Http``
    configured with ``timeout`` seconds.
    """

    def __init__(self, api_key: str | None, *, timeout: float = 10.0, youtube=None) -> None:
        if not api_key:
            raise MissingCredentialError(
                "YouTube Data API key is not configured. "
                "Set YOUTUBE_API_KEY or TUBETEN_YT_API_KEY."
            )
        self._timeout = timeout
        if youtube is None:
            youtube = build(
                "youtube",
                "v3",
                developerKey=api_key,
                http=httplib2.Http(timeout=timeout),
                cache_discovery=False,
            )
        self._youtube = youtube

    @classmethod
    def from_options(cls, options: ServiceOptions) -> YouTubeCatalogClient:
        return cls(options.yt_api_key, timeout=options.request_timeout)

    def list_playlist_items(self, playlist_id: str, page_token: str | None = None) -> dict:
        params = {
            "part": "snippet",
            "playlistId": playlist_id,
            "maxResults": PAGE_SIZE,
        }
        if page_token:
            params["pageToken"] = page_token
        request = self._youtube.playlistItems().list(**params)
        return self._execute("playlistItems", request)

    def list_videos(self, video_ids: Sequence[str]) -> dict:
        if len(video_ids) > PAGE_SIZE:
            raise ValueError(f"videos.list accepts at most {PAGE_SIZE} ids, got {len(video_ids)}")
        request = self._youtube.videos().list(
            part="contentDetails,status",
            id=",".join(video_ids),
            maxResults=PAGE_SIZE,
        )
        return self._execute("videos", request)

    def _execute(self, stage: str, request) -> dict:
        try:
            return request.execute(num_retries=0)
        except HttpError as exc:
            status = exc.resp.status
            reason = getattr(exc, "reason", "") or ""
            logger.debug("%s returned HTTP %s: %s", stage, status, reason)
            raise CatalogHttpError(stage, int(status), str(reason)) from exc
        except TimeoutError as exc:
            raise CatalogTimeoutError(stage, self._timeout) from exc
        except (httplib2.HttpLib2Error, OSError) as exc:
            raise CatalogError(f"{stage} request failed: {exc}", stage=stage) from exc
