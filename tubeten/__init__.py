"""tubeten: trivia pools built from YouTube playlists."""

__version__ = "0.3.0"

from tubeten.core.models import ImportSummary, Pool, PoolEntry
from tubeten.core.options import ServiceOptions

# Pool services keyed by their serialized options, so repeated calls with
# the same configuration share one store.
_services: dict = {}


def _service_for(options: ServiceOptions):
    from tubeten.core.pool import PoolService

    key = options.model_dump_json()
    service = _services.get(key)
    if service is None:
        service = _services.setdefault(key, PoolService.from_options(options))
    return service


def import_pool(reference: str, options: ServiceOptions | None = None, *, force: bool = False) -> ImportSummary:
    """Import (or serve from cache) the pool for a playlist reference.

    This is the primary library entry point. Calls made with equal options
    share one pool service, so a ``memory`` cache lasts for the life of the
    process.

    Args:
        reference: Playlist ID or a URL carrying a ``list=`` parameter.
        options: Configuration options. Uses defaults if not provided.
        force: Bypass the cache and re-import from the catalog.

    Returns:
        ImportSummary with the pool size and a short preview.

    Raises:
        InvalidReferenceError: If the reference is not a playlist.
        TubeTenError: Any other import failure (credential, upstream, empty).
    """
    from tubeten.core.errors import InvalidReferenceError
    from tubeten.services.playlist_ref import resolve_playlist_id

    if options is None:
        options = ServiceOptions()

    playlist_id = resolve_playlist_id(reference)
    if playlist_id is None:
        raise InvalidReferenceError(f"Not a playlist ID or list= URL: {reference!r}")

    pool, cached = _service_for(options).get_or_import(playlist_id, force_refresh=force)
    return ImportSummary.from_pool(pool, cached)


__all__ = [
    "__version__",
    "import_pool",
    "ServiceOptions",
    "ImportSummary",
    "Pool",
    "PoolEntry",
]
