# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""CLI entry point for tubeten."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from tubeten import __version__
from tubeten.core.errors import TubeTenError
from tubeten.core.logging import get_logger, setup_logging
from tubeten.core.options import ServiceOptions


# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 3

# One-shot commands run in their own process, so their pools must outlive it.
ONE_SHOT_BACKEND = "file"


def _common_options(fn):
    """Shared Click options that map to ServiceOptions fields."""
    decorators = [
        click.option("--cache-backend", type=click.Choice(["memory", "file"]), default=None, help="Pool cache backend (default: memory for serve, file otherwise)."),
        click.option("--cache-dir", type=click.Path(path_type=Path), default=None, help="Directory for the file cache."),
        click.option("--filter-policy", type=click.Choice(["strict", "basic"]), default=None, help="Playability filter policy."),
        click.option("--request-timeout", type=float, default=None, help="Per-request upstream timeout in seconds."),
        click.option("--verbose", is_flag=True, default=None, help="Verbose console output."),
        click.option("--log-jsonl", type=click.Path(path_type=Path), default=None, help="Also write JSONL logs here."),
    ]
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return fn


def _build_options(*, default_backend: str | None = None, **cli_kwargs) -> ServiceOptions:
    """Build ServiceOptions from CLI kwargs, filtering out unset (None) values.

    Only explicitly-provided CLI flags are passed to ServiceOptions as init
    overrides. Unset flags fall through to env vars → .env → YAML → defaults.
    When no source sets ``cache_backend``, ``default_backend`` replaces the
    built-in default.
    """
    overrides = {key: value for key, value in cli_kwargs.items() if value is not None}
    options = ServiceOptions(**overrides)
    if default_backend is not None and "cache_backend" not in options.model_fields_set:
        options = options.model_copy(update={"cache_backend": default_backend})
    return options


def _setup(options: ServiceOptions) -> None:
    setup_logging(verbose=options.verbose, jsonl_path=options.log_jsonl)


def _fail(exc: TubeTenError) -> None:
    get_logger().error("%s: %s", exc.kind, exc)
    sys.exit(EXIT_NOT_FOUND if exc.http_status == 404 else EXIT_ERROR)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(version=__version__, prog_name="tubeten")
def cli() -> None:
    """YouTube playlist trivia pools: import, filter, cache, and sample."""


@cli.command()
@click.option("--host", type=str, default=None, help="Bind address.")
@click.option("--port", type=int, default=None, help="Bind port.")
@click.option("--allowed-origin", type=str, default=None, help="CORS allowed origin.")
@_common_options
def serve(**kwargs):
    """Run the HTTP service."""
    options = _build_options(**kwargs)
    _setup(options)

    import uvicorn

    from tubeten.web.app import create_app

    if not options.yt_api_key:
        get_logger().warning("No YouTube API key configured; imports will fail with missing_credential.")

    uvicorn.run(create_app(options), host=options.host, port=options.port, log_config=None)


@cli.command(name="import")
@click.argument("reference")
@click.option("--force", is_flag=True, default=False, help="Bypass the cache and re-import.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the summary as JSON.")
@_common_options
def import_cmd(reference, force, as_json, **kwargs):
    """Import a playlist (ID or URL with list=) into the pool cache."""
    options = _build_options(default_backend=ONE_SHOT_BACKEND, **kwargs)
    _setup(options)
    log = get_logger()

    from tubeten import import_pool

    try:
        summary = import_pool(reference, options, force=force)
    except TubeTenError as exc:
        _fail(exc)

    if as_json:
        _echo_json(summary.model_dump(mode="json", by_alias=True))
    else:
        source = "cache" if summary.served_from_cache else "catalog"
        log.info(
            "Pool %s: %d playable of %d fetched (from %s)",
            summary.identifier,
            summary.count,
            summary.fetched,
            source,
        )
        for entry in summary.sample:
            click.echo(f"{entry.video_id}  {entry.duration_seconds:>5}s  {entry.title}")
    sys.exit(EXIT_OK)


@cli.command()
@click.argument("playlist_id")
@_common_options
def pool(playlist_id, **kwargs):
    """Print the full cached pool as JSON."""
    options = _build_options(default_backend=ONE_SHOT_BACKEND, **kwargs)
    _setup(options)

    from tubeten.core.errors import PoolNotFoundError
    from tubeten.core.models import PoolItems
    from tubeten.core.pool import PoolService

    found = PoolService.from_options(options).get_full(playlist_id)
    if found is None:
        _fail(PoolNotFoundError(playlist_id))

    items = PoolItems(identifier=playlist_id, count=found.count, items=found.entries)
    _echo_json(items.model_dump(mode="json", by_alias=True))
    sys.exit(EXIT_OK)


@cli.command()
@click.argument("playlist_id")
@click.option("--count", type=int, default=None, help="Session size (clamped to 1-50, default 10).")
@_common_options
def play(playlist_id, count, **kwargs):
    """Print a random session sample from the cached pool."""
    options = _build_options(default_backend=ONE_SHOT_BACKEND, **kwargs)
    _setup(options)

    from tubeten.core.errors import PoolNotFoundError
    from tubeten.core.models import PoolItems
    from tubeten.core.pool import PoolService
    from tubeten.core.sampler import clamp_count

    items = PoolService.from_options(options).play(playlist_id, clamp_count(count))
    if items is None:
        _fail(PoolNotFoundError(playlist_id))

    _echo_json(PoolItems(identifier=playlist_id, count=len(items), items=items).model_dump(mode="json", by_alias=True))
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    cli()
