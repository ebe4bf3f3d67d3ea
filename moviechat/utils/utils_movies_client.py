import httpx
from datetime import date
from typing import AbstractSet, Dict, List, Optional
from ..config import settings, require_setting
from ..schemas.movies_schemas import (
    CAST_NOT_AVAILABLE,
    NO_OVERVIEW,
    UNTITLED,
    UNKNOWN_DIRECTOR,
    MovieRecord,
    StreamingOffer,
)

IMAGE_BASE_URL = 'https://image.tmdb.org/t/p/w500'
YOUTUBE_WATCH_URL = 'https://www.youtube.com/watch?v='
TMDB_MOVIE_PAGE_URL = 'https://www.themoviedb.org/movie/'
CAST_LIMIT = 3


def _tmdb_params(**extra) -> Dict[str, object]:
    params: Dict[str, object] = {
        'api_key': require_setting('TMDB_API_KEY')}
    params.update(extra)
    return params


def _image_url(path: Optional[str]) -> Optional[str]:
    return f"{IMAGE_BASE_URL}{path}" if path else None


def _parse_release_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


async def get_search_results(
    client: httpx.AsyncClient,
    title: str
) -> List[dict]:
    """
    Search TMDB for movies by title (first page only).

    :param client: HTTP client for making API requests.
    :param title: Title to search for.
    :return: List of search results, best match first.
    """
    params = _tmdb_params(
        query=title,
        language=settings.TMDB_LANGUAGE,
        page=1,
        include_adult='false'
    )
    resp = await client.get(
        f"{settings.TMDB_BASE_URL}/search/movie",
        params=params
    )
    resp.raise_for_status()
    return resp.json().get('results') or []


async def fetch_movie_details(
    client: httpx.AsyncClient,
    tmdb_id: str
) -> dict:
    """
    Fetch details for a movie with credits and videos appended.

    :param client: HTTP client for making API requests.
    :param tmdb_id: TMDB ID of the movie.
    :return: Raw TMDB details payload.
    """
    resp = await client.get(
        f"{settings.TMDB_BASE_URL}/movie/{tmdb_id}",
        params=_tmdb_params(append_to_response='credits,videos')
    )
    resp.raise_for_status()
    return resp.json()


async def fetch_streaming_offers(
    client: httpx.AsyncClient,
    tmdb_id: str
) -> List[StreamingOffer]:
    """
    Fetch subscription streaming providers for a movie in the configured region.

    :param client: HTTP client for making API requests.
    :param tmdb_id: TMDB ID of the movie.
    :return: List of StreamingOffer objects, empty if none are listed.
    """
    resp = await client.get(
        f"{settings.TMDB_BASE_URL}/movie/{tmdb_id}/watch/providers",
        params=_tmdb_params()
    )
    resp.raise_for_status()
    region = (resp.json().get('results') or {}).get(settings.WATCH_REGION) or {}
    return [
        StreamingOffer(
            provider_name=p['provider_name'],
            logo_url=_image_url(p.get('logo_path'))
        )
        for p in region.get('flatrate') or []
        if p.get('provider_name')
    ]


def extract_director(details: dict) -> str:
    crew = (details.get('credits') or {}).get('crew') or []
    return next(
        (c['name'] for c in crew if c.get('job') == 'Director' and c.get('name')),
        UNKNOWN_DIRECTOR
    )


def extract_cast(details: dict) -> List[str]:
    cast = (details.get('credits') or {}).get('cast') or []
    names = [c.get('name') for c in cast if c.get('name')][:CAST_LIMIT]
    return names or [CAST_NOT_AVAILABLE]


def extract_trailer(details: dict, tmdb_id: str) -> str:
    videos = (details.get('videos') or {}).get('results') or []
    trailer = next(
        (v for v in videos
         if v.get('type') == 'Trailer' and v.get('site', 'YouTube') == 'YouTube'
         and v.get('key')),
        None
    )
    if trailer:
        return f"{YOUTUBE_WATCH_URL}{trailer['key']}"
    return f"{TMDB_MOVIE_PAGE_URL}{tmdb_id}"


def extract_genres(details: dict) -> Optional[List[str]]:
    genres = details.get('genres')
    if genres is None:
        return None
    return [g['name'] for g in genres if g.get('name')]


def map_to_movie(
    item: dict,
    details: Optional[dict] = None,
    streaming: Optional[List[StreamingOffer]] = None
) -> MovieRecord:
    """
    Map a TMDB search result to a MovieRecord, enriching it with details when available.

    Without details the enrichment fields keep their placeholder values.

    :param item: Dictionary containing a TMDB search result.
    :param details: Optional TMDB details payload (credits and videos appended).
    :param streaming: Optional list of streaming offers.
    :return: MovieRecord object.
    """
    tmdb_id = str(item['id'])
    record = {
        'id': tmdb_id,
        'title': item.get('title') or item.get('original_title') or UNTITLED,
        'overview': item.get('overview') or NO_OVERVIEW,
        'poster_url': _image_url(item.get('poster_path')),
        'vote_average': item.get('vote_average') or 0.0,
        'vote_count': item.get('vote_count') or 0,
        'release_date': _parse_release_date(item.get('release_date')),
        'streaming': streaming or [],
    }
    if details is not None:
        record.update(
            runtime=details.get('runtime') or None,
            genres=extract_genres(details),
            director=extract_director(details),
            cast=extract_cast(details),
            trailer_url=extract_trailer(details, tmdb_id),
        )
    return MovieRecord(**record)


def matches(
    movie: MovieRecord,
    genre_filter: AbstractSet[str]
) -> bool:
    """
    Check if a movie matches the given genre filter.

    An empty filter matches everything; an untagged movie never matches a
    non-empty filter.

    :param movie: MovieRecord object to check.
    :param genre_filter: Set of lower-cased genre identifiers.
    :return: True if the movie should be kept, else False.
    """
    if not genre_filter:
        return True
    if not movie.genres:
        return False
    return any(g.lower() in genre_filter for g in movie.genres)
