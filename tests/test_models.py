"""Tests for tubeten.core.models and tubeten.core.errors."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from tubeten.core.errors import (
    CatalogHttpError,
    CatalogTimeoutError,
    EmptyPlaylistError,
    InvalidReferenceError,
    MissingCredentialError,
    PoolNotFoundError,
    TubeTenError,
)
from tubeten.core.models import ImportSummary, Pool, PoolEntry, VideoDetail

ADDED = datetime(2026, 2, 14, 12, 0, tzinfo=timezone.utc)


def _entry(video_id: str = "dQw4w9WgXcQ") -> PoolEntry:
    return PoolEntry(
        video_id=video_id,
        title="Never Gonna Give You Up",
        thumbnails={"default": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/default.jpg"}},
        duration_seconds=212,
        duration="PT3M32S",
        added_at=ADDED,
    )


class TestPoolEntry:
    def test_camel_case_dump(self):
        data = _entry().model_dump(mode="json", by_alias=True)
        assert data["videoId"] == "dQw4w9WgXcQ"
        assert data["durationSeconds"] == 212
        assert data["addedAt"].startswith("2026-02-14T12:00:00")

    def test_accepts_either_key_style(self):
        camel = PoolEntry.model_validate(
            {"videoId": "a", "title": "t", "durationSeconds": 10, "addedAt": ADDED.isoformat()}
        )
        snake = PoolEntry(video_id="a", title="t", duration_seconds=10, added_at=ADDED)
        assert camel == snake


class TestPool:
    def test_json_round_trip(self):
        pool = Pool(playlist_id="PL1", entries=[_entry("a"), _entry("b")], fetched_count=5, created_at=ADDED)
        restored = Pool.model_validate_json(pool.model_dump_json(by_alias=True))
        assert restored == pool
        assert restored.count == 2

    def test_count_is_not_serialized(self):
        pool = Pool(playlist_id="PL1", created_at=ADDED)
        assert "count" not in pool.model_dump()

    def test_missing_fields_rejected(self):
        with pytest.raises(ValidationError):
            Pool.model_validate_json('{"playlistId": "PL1"}')


class TestVideoDetail:
    def test_unknown_statuses_accepted(self):
        detail = VideoDetail(video_id="a", privacy_status="secret", upload_status="quarantined")
        assert detail.privacy_status == "secret"
        assert detail.upload_status == "quarantined"


class TestImportSummary:
    def test_from_pool_previews_first_entries(self):
        pool = Pool(
            playlist_id="PL1",
            entries=[_entry(f"v{i}") for i in range(9)],
            fetched_count=12,
            created_at=ADDED,
        )
        summary = ImportSummary.from_pool(pool, served_from_cache=True)
        assert summary.identifier == "PL1"
        assert summary.count == 9
        assert summary.fetched == 12
        assert [e.video_id for e in summary.sample] == [f"v{i}" for i in range(6)]
        assert summary.model_dump(by_alias=True)["servedFromCache"] is True


class TestErrors:
    @pytest.mark.parametrize(
        "exc, kind, status",
        [
            (InvalidReferenceError("x"), "invalid_reference", 400),
            (MissingCredentialError("x"), "missing_credential", 500),
            (EmptyPlaylistError("PL1"), "empty_result", 404),
            (PoolNotFoundError("PL1"), "not_found", 404),
            (CatalogHttpError("videos", 500), "upstream_http_error", 502),
            (CatalogTimeoutError("videos", 5), "upstream_timeout", 504),
        ],
    )
    def test_kinds(self, exc, kind, status):
        assert isinstance(exc, TubeTenError)
        assert exc.kind == kind
        assert exc.http_status == status
        assert exc.to_dict()["error"] == kind

    def test_catalog_error_body(self):
        body = CatalogHttpError("playlistItems", 403, "quotaExceeded").to_dict()
        assert body["stage"] == "playlistItems"
        assert body["status"] == 403
        assert "quotaExceeded" in body["detail"]
