"""
Project & section service for the songwriting workspace.

Every operation receives the request's DB session and the resolved user
explicitly, runs `require_user` first, and then performs a single read or
write scoped to that user.

Ownership-as-availability: a project is only ever fetched filtered by id
*and* owner. A missing row is the only signal, so "belongs to someone else"
and "does not exist" both surface as NOT_FOUND. Sections have no owner
column; access to them always goes through `get_owned_project` on the parent.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from src.api.auth import require_user
from src.api.errors import NotFound, ValidationFailed
from src.api.models import SongProject, SongSection, User
from src.api.schemas import (
    ProjectCreateRequest,
    ProjectUpdateRequest,
    SectionCreateRequest,
    SectionUpdateRequest,
)

logger = logging.getLogger(__name__)

PROJECT_UPDATABLE_FIELDS = (
    "title",
    "artist_name",
    "genre",
    "mood",
    "language",
    "bpm",
    "key_signature",
    "notes",
)

SECTION_UPDATABLE_FIELDS = (
    "order_index",
    "section_type",
    "label",
    "lyrics",
    "chords",
    "melody_hints",
)

DEFAULT_ORDER_INDEX = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _next_updated_at(previous: Optional[datetime]) -> datetime:
    """Current time, nudged past `previous` so updated_at strictly increases."""
    now = _utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


# PUBLIC_INTERFACE
def build_patch(payload: BaseModel, allowed: Iterable[str]) -> Dict[str, Any]:
    """
    Map the fields a caller actually supplied to the columns to set.

    A field counts as supplied when its key was present in the payload;
    request models reject null, so a supplied value is never None.

    Raises:
        ValidationFailed: nothing to update.
    """
    supplied = payload.model_dump(exclude_unset=True)
    patch = {name: supplied[name] for name in allowed if name in supplied}
    if not patch:
        raise ValidationFailed("At least one field must be provided to update.")
    return patch


# PUBLIC_INTERFACE
def get_owned_project(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> SongProject:
    """Return the project if `user_id` owns it, else NOT_FOUND."""
    project = db.execute(
        select(SongProject).where(SongProject.id == project_id, SongProject.user_id == user_id)
    ).scalar_one_or_none()
    if project is None:
        logger.info("project_not_found: project_id=%s user_id=%s", project_id, user_id)
        raise NotFound("Song project not found.")
    return project


# PUBLIC_INTERFACE
def create_project(db: Session, user: Optional[User], data: ProjectCreateRequest) -> SongProject:
    """Create a project owned by `user`; created_at == updated_at."""
    owner = require_user(user)
    now = _utcnow()

    project = SongProject(
        id=uuid.uuid4(),
        user_id=owner.id,
        title=data.title,
        artist_name=data.artist_name,
        genre=data.genre,
        mood=data.mood,
        language=data.language,
        bpm=data.bpm,
        key_signature=data.key_signature,
        notes=data.notes,
        created_at=now,
        updated_at=now,
    )
    db.add(project)
    db.flush()

    logger.info("project_created: project_id=%s user_id=%s", project.id, owner.id)
    return project


# PUBLIC_INTERFACE
def update_project(
    db: Session,
    user: Optional[User],
    project_id: uuid.UUID,
    data: ProjectUpdateRequest,
) -> SongProject:
    """Apply a partial update to an owned project."""
    owner = require_user(user)
    patch = build_patch(data, PROJECT_UPDATABLE_FIELDS)
    project = get_owned_project(db, project_id, owner.id)

    for name, value in patch.items():
        setattr(project, name, value)
    project.updated_at = _next_updated_at(project.updated_at)
    db.flush()

    logger.info(
        "project_updated: project_id=%s user_id=%s fields=%s",
        project.id,
        owner.id,
        ",".join(sorted(patch)),
    )
    return project


# PUBLIC_INTERFACE
def list_projects(db: Session, user: Optional[User]) -> List[SongProject]:
    """All projects owned by `user`, oldest first."""
    owner = require_user(user)
    return list(
        db.execute(
            select(SongProject)
            .where(SongProject.user_id == owner.id)
            .order_by(SongProject.created_at, SongProject.id)
        )
        .scalars()
        .all()
    )


# PUBLIC_INTERFACE
def create_section(
    db: Session,
    user: Optional[User],
    song_project_id: uuid.UUID,
    data: SectionCreateRequest,
) -> SongSection:
    """Create a section under an owned project; order_index defaults to 1."""
    owner = require_user(user)
    project = get_owned_project(db, song_project_id, owner.id)
    now = _utcnow()

    section = SongSection(
        id=uuid.uuid4(),
        song_project_id=project.id,
        order_index=DEFAULT_ORDER_INDEX if data.order_index is None else data.order_index,
        section_type=data.section_type,
        label=data.label,
        lyrics=data.lyrics,
        chords=data.chords,
        melody_hints=data.melody_hints,
        created_at=now,
        updated_at=now,
    )
    db.add(section)
    db.flush()

    logger.info(
        "section_created: section_id=%s project_id=%s order_index=%s",
        section.id,
        project.id,
        section.order_index,
    )
    return section


def _get_project_section(db: Session, section_id: uuid.UUID, song_project_id: uuid.UUID) -> SongSection:
    section = db.execute(
        select(SongSection).where(
            SongSection.id == section_id,
            SongSection.song_project_id == song_project_id,
        )
    ).scalar_one_or_none()
    if section is None:
        logger.info("section_not_found: section_id=%s project_id=%s", section_id, song_project_id)
        raise NotFound("Song section not found.")
    return section


# PUBLIC_INTERFACE
def update_section(
    db: Session,
    user: Optional[User],
    section_id: uuid.UUID,
    song_project_id: uuid.UUID,
    data: SectionUpdateRequest,
) -> SongSection:
    """
    Apply a partial update to a section of an owned project.

    A section id that exists under a different project is NOT_FOUND here.
    """
    owner = require_user(user)
    patch = build_patch(data, SECTION_UPDATABLE_FIELDS)
    get_owned_project(db, song_project_id, owner.id)
    section = _get_project_section(db, section_id, song_project_id)

    for name, value in patch.items():
        setattr(section, name, value)
    section.updated_at = _next_updated_at(section.updated_at)
    db.flush()

    logger.info(
        "section_updated: section_id=%s project_id=%s fields=%s",
        section.id,
        song_project_id,
        ",".join(sorted(patch)),
    )
    return section


# PUBLIC_INTERFACE
def delete_section(
    db: Session,
    user: Optional[User],
    section_id: uuid.UUID,
    song_project_id: uuid.UUID,
) -> None:
    """Delete the section matching both ids; NOT_FOUND when nothing was deleted."""
    owner = require_user(user)
    get_owned_project(db, song_project_id, owner.id)

    result = db.execute(
        delete(SongSection).where(
            SongSection.id == section_id,
            SongSection.song_project_id == song_project_id,
        )
    )
    if result.rowcount == 0:
        logger.info("section_not_found: section_id=%s project_id=%s", section_id, song_project_id)
        raise NotFound("Song section not found.")

    logger.info("section_deleted: section_id=%s project_id=%s", section_id, song_project_id)


# PUBLIC_INTERFACE
def list_sections(db: Session, user: Optional[User], song_project_id: uuid.UUID) -> List[SongSection]:
    """Sections of an owned project by order_index, then creation time."""
    owner = require_user(user)
    get_owned_project(db, song_project_id, owner.id)
    return list(
        db.execute(
            select(SongSection)
            .where(SongSection.song_project_id == song_project_id)
            .order_by(SongSection.order_index, SongSection.created_at, SongSection.id)
        )
        .scalars()
        .all()
    )
