# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""ISO 8601 duration parsing."""

from __future__ import annotations

import re

_ISO_DURATION_RE = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$"
)


def parse_iso8601_duration(duration: str | None) -> int:
    """Parse an ISO 8601 duration (e.g. PT4M13S, P1DT2H) to whole seconds.

    Missing or malformed values parse to 0.
    """
    if not duration:
        return 0
    match = _ISO_DURATION_RE.match(duration.strip())
    if not match:
        return 0
    days, hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds
