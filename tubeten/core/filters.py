# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Playability predicates applied when building a pool."""

from __future__ import annotations

from typing import Callable

from tubeten.core.models import RawItem, VideoDetail
from tubeten.core.options import ServiceOptions

DetailPredicate = Callable[[VideoDetail], bool]

# Titles the upstream substitutes for entries whose video is gone.
PLACEHOLDER_TITLES = frozenset({"deleted video", "private video", "not available"})


def has_playable_title(item: RawItem) -> bool:
    title = (item.title or "").strip().lower()
    return bool(title) and title not in PLACEHOLDER_TITLES


def is_not_private(detail: VideoDetail) -> bool:
    return detail.privacy_status != "private"


def is_processed(detail: VideoDetail) -> bool:
    return detail.upload_status is None or detail.upload_status == "processed"


def is_embeddable(detail: VideoDetail) -> bool:
    return detail.embeddable is not False


def duration_within(min_seconds: int, max_seconds: int) -> DetailPredicate:
    """Admit videos longer than ``min_seconds`` and at most ``max_seconds``."""

    def _check(detail: VideoDetail) -> bool:
        return min_seconds < detail.duration_seconds <= max_seconds

    _check.__name__ = f"duration_within_{min_seconds}_{max_seconds}"
    return _check


BASIC_PREDICATES: tuple[DetailPredicate, ...] = (is_not_private, is_processed, is_embeddable)


def predicates_for(options: ServiceOptions) -> list[DetailPredicate]:
    """Build the predicate set for the configured filter policy.

    ``strict`` adds the duration bound on top of the ``basic`` checks.
    """
    predicates = list(BASIC_PREDICATES)
    if options.filter_policy == "strict":
        predicates.append(
            duration_within(options.min_duration_seconds, options.max_duration_seconds)
        )
    return predicates


def is_playable(detail: VideoDetail | None, predicates: list[DetailPredicate]) -> bool:
    """A video with no detail could not be validated and is never playable."""
    if detail is None:
        return False
    return all(predicate(detail) for predicate in predicates)
