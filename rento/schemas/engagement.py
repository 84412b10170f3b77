"""Pydantic schemas for messaging and favorites endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from rento.core.config import settings


class SendMessageRequest(BaseModel):
    thread_id: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1, max_length=settings.app.max_message_chars)


class FavoriteRequest(BaseModel):
    property_id: str = Field(..., min_length=1)


class FavoriteResponse(BaseModel):
    ok: bool = True


class FavoritesListResponse(BaseModel):
    property_ids: list[str] = Field(default_factory=list)
