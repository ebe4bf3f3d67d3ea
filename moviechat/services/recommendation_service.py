import asyncio
import enum
import logging
from typing import AbstractSet, FrozenSet, Iterable, List, Optional
import httpx
from ..clients.llm_client import complete
from ..clients.movie_client import resolve_movie
from ..config import settings, require_setting
from ..conversation import Conversation
from ..exceptions import ConfigurationError
from ..schemas.movies_schemas import MovieRecord
from ..utils.utils_movies_client import matches
from ..utils.utils_prompts import (
    build_explanation_prompt,
    build_recommendation_prompt,
    parse_titles,
)

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "I apologize, but I encountered an error while processing your request. "
    "Please try again."
)


class Stage(enum.Enum):
    IDLE = 'idle'
    PROMPTING = 'prompting'
    AWAITING_TITLES = 'awaiting_titles'
    RESOLVING = 'resolving'
    FILTERING = 'filtering'
    EXPLAINING = 'explaining'
    DONE = 'done'
    ERRORED = 'errored'


# selector ids that differ from TMDB genre names
GENRE_ALIASES = {
    'scifi': 'science fiction',
    'sci-fi': 'science fiction',
}


def normalize_genres(genres: Optional[Iterable[str]]) -> FrozenSet[str]:
    """
    Build a genre filter from caller input: lower-cased, stripped, blanks dropped.

    Selector ids are mapped onto TMDB genre names through GENRE_ALIASES.

    :param genres: Genre identifiers as selected by the caller.
    :return: Frozen set of lower-cased TMDB genre names.
    """
    cleaned = (g.strip().lower() for g in genres or () if g and g.strip())
    return frozenset(GENRE_ALIASES.get(g, g) for g in cleaned)


def filter_by_genres(
    movies: Iterable[MovieRecord],
    genre_filter: AbstractSet[str]
) -> List[MovieRecord]:
    return [m for m in movies if matches(m, genre_filter)]


async def resolve_titles(titles: List[str]) -> List[MovieRecord]:
    """
    Resolve all titles concurrently and keep only the successful lookups.

    Every lookup is awaited before returning. A lookup that raises or finds
    no match contributes nothing; it never fails the batch.

    :param titles: Titles to resolve.
    :return: Resolved records in the order of the titles.
    """
    async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
        results = await asyncio.gather(
            *[resolve_movie(title, client) for title in titles],
            return_exceptions=True
        )

    movies: List[MovieRecord] = []
    for title, result in zip(titles, results):
        if isinstance(result, BaseException):
            logger.warning(f"Error fetching movie: {title!r}: {result}")
        elif result is not None:
            movies.append(result)
    return movies


async def recommend(
    user_text: str,
    genre_filter: AbstractSet[str],
    conversation: Conversation
) -> List[MovieRecord]:
    """
    Run one recommendation round for a user message.

    The user message is appended to the conversation straight away. The
    generative-text service suggests titles, each title is resolved through
    TMDB, records are filtered by genre, and a second generative call writes
    the explanation that is appended as the assistant reply. If the title
    list or the explanation cannot be obtained, a single fallback message is
    appended instead and an empty list is returned.

    :param user_text: The user's free-text request.
    :param genre_filter: Set of lower-cased genre identifiers; empty means no filtering.
    :param conversation: Transcript to append the user message and the reply to.
    :return: Filtered list of MovieRecord objects (possibly empty).
    """
    genre_filter = normalize_genres(genre_filter)
    stage = Stage.IDLE
    conversation.busy = True
    try:
        stage = _advance(stage, Stage.PROMPTING)
        conversation.add_user_message(user_text)
        require_setting('OPENAI_API_KEY')
        require_setting('TMDB_API_KEY')
        prompt = build_recommendation_prompt(user_text, genre_filter)

        stage = _advance(stage, Stage.AWAITING_TITLES)
        titles = parse_titles(await complete(prompt))
        logger.info(f"Generative service suggested {len(titles)} titles")

        stage = _advance(stage, Stage.RESOLVING)
        resolved = await resolve_titles(titles)

        stage = _advance(stage, Stage.FILTERING)
        movies = filter_by_genres(resolved, genre_filter)
        logger.info(
            f"Found movies: {len(movies)} of {len(resolved)} resolved, "
            f"{len(titles)} suggested")

        stage = _advance(stage, Stage.EXPLAINING)
        explanation = await complete(
            build_explanation_prompt(user_text, titles, genre_filter))
        conversation.add_assistant_message(explanation)

        _advance(stage, Stage.DONE)
        return movies
    except ConfigurationError as e:
        logger.error(f"Configuration error during {stage.value}: {e}")
        return _fail(stage, conversation)
    except Exception as e:
        logger.error(f"Error in movie recommendation during {stage.value}: {e}")
        return _fail(stage, conversation)
    finally:
        conversation.busy = False


def _fail(stage: Stage, conversation: Conversation) -> List[MovieRecord]:
    _advance(stage, Stage.ERRORED)
    conversation.add_assistant_message(FALLBACK_MESSAGE)
    return []


def _advance(current: Stage, new: Stage) -> Stage:
    logger.debug(f"Recommendation stage {current.value} -> {new.value}")
    return new
