# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Playlist import pipeline: page items, fetch details, filter into a pool."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Sequence

from tubeten.core.errors import CatalogError, EmptyPlaylistError
from tubeten.core.filters import DetailPredicate, has_playable_title, is_playable, predicates_for
from tubeten.core.logging import log_event
from tubeten.core.models import Pool, PoolEntry, RawItem, VideoDetail
from tubeten.core.options import ServiceOptions
from tubeten.services.catalog import PAGE_SIZE, CatalogClient
from tubeten.utils.duration import parse_iso8601_duration

logger = logging.getLogger("tubeten")

DEFAULT_MAX_ITEMS = 2000


def fetch_all_playlist_items(
    client: CatalogClient,
    playlist_id: str,
    *,
    max_items: int = DEFAULT_MAX_ITEMS,
) -> list[RawItem]:
    """Page through playlistItems.list until no continuation token remains.

    Items without a resolvable video ID are dropped. Paging stops once
    ``max_items`` items have been collected; the collected items are
    returned rather than raising. Upstream failures propagate as
    CatalogError.
    """
    items: list[RawItem] = []
    page_token: str | None = None
    pages = 0

    while True:
        page = client.list_playlist_items(playlist_id, page_token)
        pages += 1
        for raw in page.get("items") or []:
            item = _map_playlist_item(raw)
            if item is not None:
                items.append(item)

        if len(items) >= max_items:
            logger.warning(
                "Playlist %s hit the %d item ceiling after %d pages; truncating",
                playlist_id,
                max_items,
                pages,
            )
            return items[:max_items]

        page_token = page.get("nextPageToken")
        if not page_token:
            break

    logger.debug("Fetched %d items for %s in %d pages", len(items), playlist_id, pages)
    return items


def _map_playlist_item(raw: dict) -> RawItem | None:
    """Map a playlistItems.list resource to RawItem, or None if it has no video."""
    snippet = raw.get("snippet") or {}
    video_id = (snippet.get("resourceId") or {}).get("videoId")
    if not video_id:
        return None
    return RawItem(
        video_id=video_id,
        title=snippet.get("title") or "",
        thumbnails=snippet.get("thumbnails") or None,
    )


def fetch_video_details(
    client: CatalogClient,
    video_ids: Sequence[str],
) -> dict[str, VideoDetail]:
    """Fetch status and duration for ``video_ids`` in batches of 50.

    IDs the upstream does not return are absent from the mapping.
    """
    details: dict[str, VideoDetail] = {}
    for start in range(0, len(video_ids), PAGE_SIZE):
        batch = list(video_ids[start:start + PAGE_SIZE])
        response = client.list_videos(batch)
        for raw in response.get("items") or []:
            detail = _map_video_resource(raw)
            if detail is not None:
                details[detail.video_id] = detail
    return details


def _map_video_resource(raw: dict) -> VideoDetail | None:
    """Map a videos.list resource to VideoDetail."""
    video_id = raw.get("id")
    if not video_id:
        return None
    content_details = raw.get("contentDetails") or {}
    status = raw.get("status") or {}
    duration_iso = content_details.get("duration")

    return VideoDetail(
        video_id=video_id,
        duration_seconds=parse_iso8601_duration(duration_iso),
        duration=duration_iso,
        embeddable=status.get("embeddable"),
        privacy_status=status.get("privacyStatus"),
        upload_status=status.get("uploadStatus"),
    )


def build_pool(
    raw_items: Sequence[RawItem],
    details: dict[str, VideoDetail],
    predicates: list[DetailPredicate],
    *,
    now: datetime | None = None,
) -> list[PoolEntry]:
    """Keep the items whose detail exists and passes every predicate.

    Surviving entries keep the input order.
    """
    added_at = now or datetime.now(timezone.utc)
    entries: list[PoolEntry] = []
    for item in raw_items:
        if not has_playable_title(item):
            continue
        detail = details.get(item.video_id)
        if not is_playable(detail, predicates):
            continue
        entries.append(
            PoolEntry(
                video_id=item.video_id,
                title=item.title,
                thumbnails=item.thumbnails,
                duration_seconds=detail.duration_seconds,
                duration=detail.duration,
                added_at=added_at,
            )
        )
    return entries


def import_playlist(
    client: CatalogClient,
    playlist_id: str,
    options: ServiceOptions,
    *,
    rng: random.Random | None = None,
) -> Pool:
    """Run the full import for one playlist.

    Steps, strictly in sequence:
    1. Page all playlist items (bounded by ``max_items``)
    2. Fetch video details (optionally only for the first ``max_detail_lookups``)
    3. Filter with the configured policy
    4. Optionally shuffle and truncate to ``max_pool_size``

    Raises EmptyPlaylistError when the playlist lists no items at all. A
    playlist whose items are all filtered out yields an empty Pool.
    """
    now = datetime.now(timezone.utc)
    log_event(logging.INFO, f"Importing playlist {playlist_id}", playlist_id=playlist_id, event="import_started")

    try:
        raw_items = fetch_all_playlist_items(client, playlist_id, max_items=options.max_items)
    except CatalogError as exc:
        _log_catalog_failure(playlist_id, exc)
        raise
    if not raw_items:
        log_event(logging.INFO, f"Playlist {playlist_id} is empty", playlist_id=playlist_id, event="empty_playlist")
        raise EmptyPlaylistError(playlist_id)

    lookup_ids = [item.video_id for item in raw_items if has_playable_title(item)]
    if options.max_detail_lookups is not None:
        lookup_ids = lookup_ids[:options.max_detail_lookups]
    try:
        details = fetch_video_details(client, lookup_ids)
    except CatalogError as exc:
        _log_catalog_failure(playlist_id, exc)
        raise

    entries = build_pool(raw_items, details, predicates_for(options), now=now)

    if options.shuffle_pool:
        (rng or random).shuffle(entries)
    if options.max_pool_size is not None:
        entries = entries[:options.max_pool_size]

    log_event(
        logging.INFO,
        f"Imported {len(entries)} of {len(raw_items)} items for {playlist_id}",
        playlist_id=playlist_id,
        event="import_completed",
        details=f"policy={options.filter_policy} fetched={len(raw_items)} kept={len(entries)}",
    )
    return Pool(
        playlist_id=playlist_id,
        entries=entries,
        fetched_count=len(raw_items),
        created_at=now,
    )


def _log_catalog_failure(playlist_id: str, exc: CatalogError) -> None:
    log_event(
        logging.ERROR,
        f"Import of {playlist_id} failed at {exc.stage}",
        playlist_id=playlist_id,
        event="import_failed",
        error=str(exc),
        stage=exc.stage,
        status=exc.status,
    )
