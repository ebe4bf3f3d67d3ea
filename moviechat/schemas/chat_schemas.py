import uuid
from datetime import datetime, timezone
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .movies_schemas import MovieRecord


def _new_message_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_message_id)
    content: str
    role: Literal['user', 'assistant']
    timestamp: datetime = Field(default_factory=_utcnow)


class Genre(BaseModel):
    id: str
    name: str


class RecommendationRequest(BaseModel):
    message: str
    genres: List[str] = Field(default_factory=list)
    messages: List[ChatMessage] = Field(default_factory=list)

    @field_validator('message')
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('message must not be blank')
        return v.strip()


class RecommendationResponse(BaseModel):
    movies: List[MovieRecord]
    messages: List[ChatMessage]


class ErrorResponse(BaseModel):
    code: int
    message: str
