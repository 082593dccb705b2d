"""
Pydantic models (request/response shapes) for API endpoints.

Songwriting payloads use camelCase keys on the wire (artistName, orderIndex, ...);
snake_case keys are accepted on input as well.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class AuthRegisterRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address (unique).")
    password: str = Field(..., min_length=6, description="User password (min 6 chars).")


class AuthLoginRequest(BaseModel):
    email: EmailStr = Field(..., description="User email address.")
    password: str = Field(..., description="User password.")


class AuthTokenResponse(BaseModel):
    token: str = Field(..., description="JWT access token.")
    token_type: str = Field("bearer", description="Token type for Authorization header.")


class UserResponse(BaseModel):
    id: uuid.UUID = Field(..., description="User UUID.")
    email: str = Field(..., description="User email address.")
    created_at: datetime = Field(..., description="Registration timestamp.")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class _CamelRequest(_CamelModel):
    """Request body: optional keys may be omitted but never sent as null."""

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("null is not allowed; omit the field instead")
        return value


class ProjectCreateRequest(_CamelRequest):
    title: str = Field(..., min_length=1, description="Song title / working title.")
    artist_name: Optional[str] = Field(None, description="Real or pen name.")
    genre: Optional[str] = Field(None, description='e.g. "pop", "rock", "lofi".')
    mood: Optional[str] = Field(None, description='e.g. "happy", "sad", "energetic".')
    language: Optional[str] = Field(None, description="Lyrics language.")
    bpm: Optional[float] = Field(None, strict=True, description="Beats per minute.")
    key_signature: Optional[str] = Field(None, description='e.g. "C major", "G minor".')
    notes: Optional[str] = Field(None, description="General project notes.")


class ProjectUpdateRequest(_CamelRequest):
    """Partial update: only the keys present in the body are applied."""

    title: Optional[str] = Field(None, min_length=1)
    artist_name: Optional[str] = None
    genre: Optional[str] = None
    mood: Optional[str] = None
    language: Optional[str] = None
    bpm: Optional[float] = Field(None, strict=True)
    key_signature: Optional[str] = None
    notes: Optional[str] = None


class ProjectResponse(_CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    artist_name: Optional[str] = None
    genre: Optional[str] = None
    mood: Optional[str] = None
    language: Optional[str] = None
    bpm: Optional[float] = None
    key_signature: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SectionCreateRequest(_CamelRequest):
    order_index: Optional[int] = Field(None, strict=True, description="Position within the song; defaults to 1.")
    section_type: Optional[str] = Field(None, description='"verse", "chorus", "bridge", ...')
    label: Optional[str] = Field(None, description='e.g. "Verse 1", "Chorus A".')
    lyrics: str = Field(..., min_length=1, description="Section lyrics.")
    chords: Optional[str] = Field(None, description="Chord notation.")
    melody_hints: Optional[str] = Field(None, description="Free-form melody description.")


class SectionUpdateRequest(_CamelRequest):
    """Partial update: only the keys present in the body are applied."""

    order_index: Optional[int] = Field(None, strict=True)
    section_type: Optional[str] = None
    label: Optional[str] = None
    lyrics: Optional[str] = None
    chords: Optional[str] = None
    melody_hints: Optional[str] = None


class SectionResponse(_CamelModel):
    id: uuid.UUID
    song_project_id: uuid.UUID
    order_index: int
    section_type: Optional[str] = None
    label: Optional[str] = None
    lyrics: str
    chords: Optional[str] = None
    melody_hints: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProjectData(BaseModel):
    project: ProjectResponse


class ProjectEnvelope(BaseModel):
    success: bool = True
    data: ProjectData


class ProjectListData(BaseModel):
    items: List[ProjectResponse]
    total: int


class ProjectListEnvelope(BaseModel):
    success: bool = True
    data: ProjectListData


class SectionData(BaseModel):
    section: SectionResponse


class SectionEnvelope(BaseModel):
    success: bool = True
    data: SectionData


class SectionListData(BaseModel):
    items: List[SectionResponse]
    total: int


class SectionListEnvelope(BaseModel):
    success: bool = True
    data: SectionListData


class SuccessResponse(BaseModel):
    success: bool = True
