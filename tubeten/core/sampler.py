# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Random session sampling from a pool."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")

DEFAULT_SESSION_SIZE = 10
MIN_SESSION_SIZE = 1
MAX_SESSION_SIZE = 50


def clamp_count(
    requested: int | None,
    *,
    default: int = DEFAULT_SESSION_SIZE,
    lower: int = MIN_SESSION_SIZE,
    upper: int = MAX_SESSION_SIZE,
) -> int:
    """Clamp a requested session size into ``[lower, upper]``."""
    if requested is None:
        requested = default
    return max(lower, min(upper, requested))


def sample(entries: Sequence[T], count: int, rng: random.Random | None = None) -> list[T]:
    """Draw ``min(count, len(entries))`` entries uniformly without replacement.

    The result order is random too, so asking for at least ``len(entries)``
    returns a shuffled copy of the whole pool. Callers clamp ``count``
    beforehand; zero or negative yields an empty list.
    """
    k = min(max(count, 0), len(entries))
    if k == 0:
        return []
    return (rng or random).sample(list(entries), k)
