import asyncio
import logging
from typing import List, Optional, Tuple
import httpx
from ..config import settings, require_setting
from ..exceptions import UpstreamRequestError
from ..schemas.movies_schemas import MovieRecord, StreamingOffer
from ..utils.utils_movies_client import (
    get_search_results,
    fetch_movie_details,
    fetch_streaming_offers,
    map_to_movie,
)

logger = logging.getLogger(__name__)


async def resolve_movie(
    title: str,
    client: Optional[httpx.AsyncClient] = None
) -> Optional[MovieRecord]:
    """
    Resolve a free-text movie title into an enriched MovieRecord.

    Only the first search result is used. Details (credits, trailer) and
    streaming availability are fetched for it; a failure there leaves
    placeholder values instead of failing the lookup.

    :param title: Movie title, possibly imprecise.
    :param client: Optional shared HTTP client; a short-lived one is opened if omitted.
    :return: MovieRecord for the best match, or None if TMDB has no match.
    :raises ConfigurationError: If TMDB_API_KEY is not set.
    :raises UpstreamRequestError: If the title search itself fails.
    """
    require_setting('TMDB_API_KEY')
    if client is None:
        async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT) as own_client:
            return await resolve_movie(title, own_client)

    item = await _search_first(client, title)
    if item is None:
        logger.info(f"No TMDB match for title: {title!r}")
        return None

    details, streaming = await _enrich(client, str(item['id']))
    if details is not None:
        try:
            return map_to_movie(item, details, streaming)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Malformed movie details for {item['id']}: {e}")
    try:
        return map_to_movie(item, None, streaming)
    except ValueError as e:
        raise UpstreamRequestError('tmdb', f"malformed search result for {title!r}: {e}") from e


async def _search_first(
    client: httpx.AsyncClient,
    title: str
) -> Optional[dict]:
    """
    Return the first TMDB search result for a title.

    :param client: HTTP client for making API requests.
    :param title: Title to search for.
    :return: Raw search result dict, or None when there are no results.
    """
    try:
        results = await get_search_results(client, title)
    except httpx.HTTPError as e:
        logger.error(f"TMDB search failed for {title!r}: {e}")
        raise UpstreamRequestError('tmdb', str(e)) from e
    except ValueError as e:
        raise UpstreamRequestError('tmdb', f"invalid search response: {e}") from e

    if not results or not isinstance(results[0], dict) or 'id' not in results[0]:
        return None
    return results[0]


async def _enrich(
    client: httpx.AsyncClient,
    tmdb_id: str
) -> Tuple[Optional[dict], List[StreamingOffer]]:
    """
    Fetch details and streaming offers concurrently, degrading each independently.

    :param client: HTTP client for making API requests.
    :param tmdb_id: TMDB ID of the matched movie.
    :return: Tuple of (details or None, streaming offers).
    """
    details, streaming = await asyncio.gather(
        fetch_movie_details(client, tmdb_id),
        fetch_streaming_offers(client, tmdb_id),
        return_exceptions=True
    )
    if not isinstance(details, dict):
        logger.warning(f"Error getting movie details for {tmdb_id}: {details}")
        details = None
    if isinstance(streaming, BaseException):
        logger.warning(f"Error getting streaming info for {tmdb_id}: {streaming}")
        streaming = []
    return details, streaming
