import logging
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from .config import settings
from .conversation import Conversation
from .exceptions import ConfigurationError, UpstreamRequestError
from .schemas.chat_schemas import (
    ErrorResponse,
    Genre,
    RecommendationRequest,
    RecommendationResponse,
)
from .schemas.movies_schemas import MovieRecord
from .clients.movie_client import resolve_movie
from .services.recommendation_service import normalize_genres, recommend
from typing import List

logging.basicConfig(level=settings.LOG_LEVEL)

AVAILABLE_GENRES = [
    Genre(id='action', name='Action'),
    Genre(id='comedy', name='Comedy'),
    Genre(id='drama', name='Drama'),
    Genre(id='horror', name='Horror'),
    Genre(id='romance', name='Romance'),
    Genre(id='scifi', name='Sci-Fi'),
    Genre(id='thriller', name='Thriller'),
    Genre(id='fantasy', name='Fantasy'),
]

app = FastAPI()


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request, exc: ConfigurationError):
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(code=500, message=str(exc)).model_dump()
    )


@app.exception_handler(UpstreamRequestError)
async def upstream_error_handler(request, exc: UpstreamRequestError):
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(
            code=502, message=f"{exc.service.upper()} service error: {exc}").model_dump()
    )


@app.get('/genres', response_model=List[Genre])
async def list_genres():
    return AVAILABLE_GENRES


@app.get('/conversations/new', response_model=RecommendationResponse)
async def new_conversation():
    return RecommendationResponse(
        movies=[], messages=list(Conversation.start().snapshot()))


@app.post('/recommendations', response_model=RecommendationResponse)
async def create_recommendations(body: RecommendationRequest):
    conversation = Conversation.from_messages(body.messages)
    movies = await recommend(
        body.message, normalize_genres(body.genres), conversation)
    return RecommendationResponse(
        movies=movies, messages=list(conversation.snapshot()))


@app.get(
    '/movies/resolve',
    response_model=MovieRecord,
    responses={
        404: {'model': ErrorResponse},
        500: {'model': ErrorResponse},
        502: {'model': ErrorResponse},
    }
)
async def resolve(title: str = Query(..., min_length=1)):
    movie = await resolve_movie(title)
    if movie is None:
        raise HTTPException(
            status_code=404, detail=f"No movie found for title: {title}")
    return movie
