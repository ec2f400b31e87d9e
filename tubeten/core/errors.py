# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Exception hierarchy for tubeten.

Every error that leaves the library carries a machine-readable ``kind`` and
the HTTP status the service surface answers with.

TubeTenError
├── InvalidReferenceError
├── MissingCredentialError
├── EmptyPlaylistError
├── PoolNotFoundError
└── CatalogError
    ├── CatalogHttpError
    └── CatalogTimeoutError
"""

from __future__ import annotations


class TubeTenError(Exception):
    """Base exception for all tubeten errors."""

    kind = "internal_error"
    http_status = 500

    def to_dict(self) -> dict:
        """Render the error as the JSON body returned to API clients."""
        return {"error": self.kind, "detail": str(self)}


class InvalidReferenceError(TubeTenError):
    """Raised when a playlist reference is neither a known ID nor a list= URL."""

    kind = "invalid_reference"
    http_status = 400


class MissingCredentialError(TubeTenError):
    """Raised when no YouTube Data API key is configured."""

    kind = "missing_credential"
    http_status = 500


class EmptyPlaylistError(TubeTenError):
    """Raised when a playlist resolves but the upstream lists zero items."""

    kind = "empty_result"
    http_status = 404

    def __init__(self, playlist_id: str) -> None:
        super().__init__(f"Playlist {playlist_id} has no items")
        self.playlist_id = playlist_id


class PoolNotFoundError(TubeTenError):
    """Raised when no cached pool exists (or it expired) for a playlist."""

    kind = "not_found"
    http_status = 404

    def __init__(self, playlist_id: str) -> None:
        super().__init__(f"No pool cached for {playlist_id}")
        self.playlist_id = playlist_id


class CatalogError(TubeTenError):
    """Raised when a call to the upstream catalog fails.

    ``stage`` names the upstream endpoint (``playlistItems`` or ``videos``).
    """

    kind = "upstream_http_error"
    http_status = 502

    def __init__(self, message: str, *, stage: str, status: int | None = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.status = status

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["stage"] = self.stage
        body["status"] = self.status
        return body


class CatalogHttpError(CatalogError):
    """Raised when the upstream answers with a non-2xx status."""

    def __init__(self, stage: str, status: int, reason: str = "") -> None:
        message = f"{stage} failed with HTTP {status}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, stage=stage, status=status)


class CatalogTimeoutError(CatalogError):
    """Raised when an upstream call exceeds the configured timeout."""

    kind = "upstream_timeout"
    http_status = 504

    def __init__(self, stage: str, timeout: float | None = None) -> None:
        message = f"{stage} timed out"
        if timeout is not None:
            message = f"{message} after {timeout:g}s"
        super().__init__(message, stage=stage)
