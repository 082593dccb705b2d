"""
SQLAlchemy models for the songwriter schema.

Tables: users, song_projects, song_sections.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Float, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from src.api.types import UTCDateTime


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class User(Base):
    """User account row (email + password hash)."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    projects: Mapped[list["SongProject"]] = relationship("SongProject", back_populates="user")


class SongProject(Base):
    """A songwriting workspace owned by exactly one user."""

    __tablename__ = "song_projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    artist_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mood: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    language: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bpm: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    key_signature: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="projects")


class SongSection(Base):
    """An ordered lyric fragment of a project.

    Sections carry no owner column: ownership always comes from the parent
    project's `user_id`. `order_index` is not unique; gaps and duplicates
    are allowed.
    """

    __tablename__ = "song_sections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    song_project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("song_projects.id"),
        nullable=False,
        index=True,
    )

    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    section_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # verse, chorus, bridge...
    label: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # "Verse 1", "Chorus A"
    lyrics: Mapped[str] = mapped_column(Text, nullable=False)
    chords: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    melody_hints: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
