# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""HTTP service surface (FastAPI)."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Query, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tubeten import __version__
from tubeten.core.errors import (
    CatalogError,
    InvalidReferenceError,
    PoolNotFoundError,
    TubeTenError,
)
from tubeten.core.logging import log_event
from tubeten.core.models import ImportSummary, PoolItems
from tubeten.core.options import ServiceOptions
from tubeten.core.pool import PoolService
from tubeten.core.sampler import clamp_count
from tubeten.services.playlist_ref import resolve_playlist_id

logger = logging.getLogger("tubeten")

# Number of entries echoed back by POST /import.
PREVIEW_SIZE = 6

NO_STORE = {"cache-control": "no-store"}


class ImportRequest(BaseModel):
    url: str | None = None
    force: bool = False


def create_app(
    options: ServiceOptions | None = None,
    service: PoolService | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        options: Configuration. Uses defaults (env / YAML) if not provided.
        service: Pool service to serve from. Built from ``options`` if not provided.
    """
    if options is None:
        options = service.options if service is not None else ServiceOptions()
    if service is None:
        service = PoolService.from_options(options)

    app = FastAPI(title="tubeten", version=__version__)
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[options.allowed_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["content-type"],
    )

    @app.exception_handler(TubeTenError)
    async def _tubeten_error(request: Request, exc: TubeTenError) -> JSONResponse:
        if isinstance(exc, CatalogError):
            log_event(
                logging.ERROR,
                f"Upstream failure during {exc.stage}",
                event="upstream_error",
                details=f"path={request.url.path}",
                error=str(exc),
                stage=exc.stage,
                status=exc.status,
            )
        elif exc.http_status >= 500:
            logger.error("%s: %s", exc.kind, exc)
        return JSONResponse(exc.to_dict(), status_code=exc.http_status, headers=NO_STORE)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # A body that is missing, not JSON, or carries a non-string url is
        # an unusable reference like any other.
        if request.url.path == "/import":
            error = InvalidReferenceError("Request body must be a JSON object with a string url")
            return JSONResponse(error.to_dict(), status_code=error.http_status, headers=NO_STORE)
        return await request_validation_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            {"error": "server_error", "detail": str(exc)},
            status_code=500,
            headers=NO_STORE,
        )

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    @app.post("/import", response_model=ImportSummary)
    def import_pool(body: ImportRequest, force: bool = False) -> JSONResponse:
        playlist_id = resolve_playlist_id(body.url)
        if playlist_id is None:
            raise InvalidReferenceError(f"Not a playlist ID or list= URL: {body.url!r}")

        pool, cached = service.get_or_import(playlist_id, force_refresh=force or body.force)
        return _json(ImportSummary.from_pool(pool, cached, preview=PREVIEW_SIZE))

    @app.get("/pool/{playlist_id}", response_model=PoolItems)
    def get_pool(playlist_id: str) -> JSONResponse:
        pool = service.get_full(playlist_id)
        if pool is None:
            raise PoolNotFoundError(playlist_id)
        return _json(PoolItems(identifier=playlist_id, count=pool.count, items=pool.entries))

    @app.get("/play/{playlist_id}", response_model=PoolItems)
    def play(playlist_id: str, count: int | None = Query(default=None)) -> JSONResponse:
        items = service.play(playlist_id, clamp_count(count))
        if items is None:
            raise PoolNotFoundError(playlist_id)
        return _json(PoolItems(identifier=playlist_id, count=len(items), items=items))

    return app


def _json(model: BaseModel) -> JSONResponse:
    return JSONResponse(model.model_dump(mode="json", by_alias=True), headers=NO_STORE)
