# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Playlist reference parsing and validation."""

from __future__ import annotations

import re

PLAYLIST_PREFIXES = ("PL", "UU", "FL", "LL", "RD", "OL")

_PLAYLIST_ID_RE = re.compile(
    r"^(?:" + "|".join(PLAYLIST_PREFIXES) + r")[A-Za-z0-9_-]+$"
)
_LIST_PARAM_RE = re.compile(r"[?&]list=([A-Za-z0-9_-]+)")


def is_playlist_id(candidate: str) -> bool:
    """Check if a string looks like a bare YouTube playlist ID."""
    return bool(_PLAYLIST_ID_RE.match(candidate))


def resolve_playlist_id(reference: str | None) -> str | None:
    """Extract a playlist ID from a bare ID or a URL with a ``list=`` parameter.

    Returns None if input cannot be parsed.
    """
    if not reference:
        return None
    text = str(reference).strip()
    if not text:
        return None

    if is_playlist_id(text):
        return text

    match = _LIST_PARAM_RE.search(text)
    if match:
        return match.group(1)
    return None
