# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Key-value pool stores with per-key expiry."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import threading
import time
from pathlib import Path
from typing import Callable, Protocol

from tubeten.core.options import ServiceOptions

logger = logging.getLogger("tubeten")

Clock = Callable[[], float]

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class PoolStore(Protocol):
    """String key-value store where every write sets a time-to-live."""

    def get(self, key: str) -> str | None:
        ...  # pragma: no cover

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        ...  # pragma: no cover


class MemoryPoolStore:
    """Process-local store. Expired keys are evicted lazily on read."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._data: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            hit = self._data.get(key)
            if hit is None:
                return None
            expires_at, value = hit
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._data[key] = (self._clock() + ttl_seconds, value)


class FilePoolStore:
    """One JSON envelope per key under ``directory``.

    Envelope: ``{"key": ..., "expires_at": <epoch seconds>, "payload": ...}``.
    Writes are atomic (temp file, then rename).
    """

    def __init__(self, directory: Path, clock: Clock = time.time) -> None:
        self._dir = Path(directory)
        self._clock = clock

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        return self._dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            envelope = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Unreadable cache file %s: %s", path, exc)
            return None

        if not isinstance(envelope, dict):
            logger.warning("Malformed cache envelope in %s", path)
            return None
        if envelope.get("key") != key:
            return None
        try:
            expires_at = float(envelope.get("expires_at", 0))
        except (TypeError, ValueError):
            logger.warning("Malformed expiry in cache file %s", path)
            return None
        if self._clock() >= expires_at:
            logger.debug("Cache entry %s expired", key)
            path.unlink(missing_ok=True)
            return None
        return envelope.get("payload")

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        envelope = {
            "key": key,
            "expires_at": self._clock() + ttl_seconds,
            "payload": value,
        }
        _atomic_write_json(self.path_for(key), envelope)


def build_store(options: ServiceOptions) -> PoolStore:
    """Create the cache backend named by ``options.cache_backend``."""
    if options.cache_backend == "file":
        return FilePoolStore(options.cache_dir)
    return MemoryPoolStore()


def _atomic_write_json(dest: Path, data: dict) -> None:
    """Write JSON atomically: write to temp file, then rename."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=dest.parent, suffix=".tmp", prefix=".tubeten_"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, dest)
    except BaseException:
        os.unlink(tmp_path)
        raise
