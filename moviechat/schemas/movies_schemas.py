from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_DIRECTOR = 'Unknown Director'
CAST_NOT_AVAILABLE = 'Cast not available'
TRAILER_PLACEHOLDER = '#'
NO_OVERVIEW = 'No overview available'
UNTITLED = 'Untitled'


class StreamingOffer(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider_name: str
    logo_url: Optional[str] = None


class MovieRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    overview: str = NO_OVERVIEW
    poster_url: Optional[str] = None
    vote_average: float = Field(default=0.0, ge=0.0, le=10.0)
    vote_count: int = Field(default=0, ge=0)
    release_date: Optional[date] = None
    runtime: Optional[int] = None
    genres: Optional[List[str]] = None
    director: str = UNKNOWN_DIRECTOR
    cast: List[str] = Field(
        default_factory=lambda: [CAST_NOT_AVAILABLE], max_length=3)
    trailer_url: str = TRAILER_PLACEHOLDER
    streaming: List[StreamingOffer] = Field(default_factory=list)
