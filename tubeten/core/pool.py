# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pool cache orchestration: serve cached pools, import on miss, sample."""

from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import Future
from typing import Callable

from pydantic import ValidationError

from tubeten.core.importer import import_playlist
from tubeten.core.logging import log_event
from tubeten.core.models import Pool, PoolEntry
from tubeten.core.options import ServiceOptions
from tubeten.core.sampler import sample
from tubeten.services.catalog import CatalogClient, YouTubeCatalogClient
from tubeten.services.store import PoolStore, build_store

logger = logging.getLogger("tubeten")

# Bump when PoolEntry/Pool change shape so old payloads are never decoded.
POOL_KEY_VERSION = "v1"


def pool_key(playlist_id: str) -> str:
    return f"pool:{POOL_KEY_VERSION}:{playlist_id}"


class PoolService:
    """Caches imported pools in a PoolStore and serves them for play.

    Args:
        store: Cache backend receiving serialized pools.
        options: Service configuration (TTL, filter policy, quota bounds).
        client_factory: Builds the catalog client on a cache miss. Defaults
            to a YouTubeCatalogClient, which raises MissingCredentialError
            when no API key is configured.
        rng: Random source for sampling and optional pre-shuffle.
    """

    def __init__(
        self,
        store: PoolStore,
        options: ServiceOptions,
        *,
        client_factory: Callable[[], CatalogClient] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._options = options
        self._client_factory = client_factory or (lambda: YouTubeCatalogClient.from_options(options))
        self._rng = rng or random.Random()
        self._inflight: dict[str, Future] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_options(cls, options: ServiceOptions) -> PoolService:
        return cls(build_store(options), options)

    @property
    def options(self) -> ServiceOptions:
        return self._options

    def get_or_import(self, playlist_id: str, force_refresh: bool = False) -> tuple[Pool, bool]:
        """Return ``(pool, served_from_cache)``.

        A cached pool is returned untouched unless ``force_refresh`` is set;
        otherwise the playlist is imported and written with the pool TTL.
        """
        if not force_refresh:
            cached = self.get_full(playlist_id)
            if cached is not None:
                log_event(
                    logging.INFO,
                    f"Serving cached pool for {playlist_id}",
                    playlist_id=playlist_id,
                    event="cache_hit",
                    details=f"count={cached.count}",
                )
                return cached, True

        return self._import_once(playlist_id), False

    def get_full(self, playlist_id: str) -> Pool | None:
        """Return the stored pool, or None if absent or expired."""
        payload = self._store.get(pool_key(playlist_id))
        if payload is None:
            return None
        try:
            return Pool.model_validate_json(payload)
        except ValidationError as exc:
            logger.warning("Discarding undecodable cached pool for %s: %s", playlist_id, exc)
            return None

    def play(self, playlist_id: str, count: int) -> list[PoolEntry] | None:
        """Sample ``count`` entries from the stored pool, or None if absent."""
        pool = self.get_full(playlist_id)
        if pool is None:
            return None
        return sample(pool.entries, count, self._rng)

    def _import_once(self, playlist_id: str) -> Pool:
        """Import, letting concurrent callers for the same ID share one run."""
        with self._lock:
            pending = self._inflight.get(playlist_id)
            owner = pending is None
            if owner:
                pending = Future()
                self._inflight[playlist_id] = pending

        if not owner:
            logger.debug("Joining in-flight import for %s", playlist_id)
            return pending.result()

        try:
            pool = self._import_and_store(playlist_id)
        except BaseException as exc:
            pending.set_exception(exc)
            raise
        else:
            pending.set_result(pool)
            return pool
        finally:
            with self._lock:
                self._inflight.pop(playlist_id, None)

    def _import_and_store(self, playlist_id: str) -> Pool:
        client = self._client_factory()
        pool = import_playlist(client, playlist_id, self._options, rng=self._rng)
        self._store.put(
            pool_key(playlist_id),
            pool.model_dump_json(by_alias=True),
            self._options.pool_ttl_seconds,
        )
        logger.debug(
            "Cached %d entries under %s for %.0fh",
            pool.count,
            pool_key(playlist_id),
            self._options.pool_ttl_hours,
        )
        return pool
