"""
Song project & section endpoints (bearer auth required):
- POST   /projects
- GET    /projects
- PATCH  /projects/{project_id}
- POST   /projects/{project_id}/sections
- GET    /projects/{project_id}/sections
- PATCH  /projects/{project_id}/sections/{section_id}
- DELETE /projects/{project_id}/sections/{section_id}

Successful responses use the envelope {"success": true, "data": {...}}.
Projects owned by another user answer 404 exactly like missing ones.
Writes are committed before the response is returned.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api import songwriting
from src.api.auth import get_current_user
from src.api.db import db_session_dep, transaction
from src.api.models import User
from src.api.schemas import (
    ProjectCreateRequest,
    ProjectData,
    ProjectEnvelope,
    ProjectListData,
    ProjectListEnvelope,
    ProjectResponse,
    ProjectUpdateRequest,
    SectionCreateRequest,
    SectionData,
    SectionEnvelope,
    SectionListData,
    SectionListEnvelope,
    SectionResponse,
    SectionUpdateRequest,
    SuccessResponse,
)

router = APIRouter(prefix="/projects", tags=["Projects"])

_NOT_FOUND = {404: {"description": "Project or section not found for this user"}}


@router.post(
    "",
    response_model=ProjectEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a song project",
    operation_id="create_project",
)
def create_project(
    req: ProjectCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_session_dep),
) -> ProjectEnvelope:
    """Create a project owned by the caller."""
    with transaction(db):
        project = songwriting.create_project(db, user, req)
        body = ProjectEnvelope(data=ProjectData(project=ProjectResponse.model_validate(project)))
    return body


@router.get(
    "",
    response_model=ProjectListEnvelope,
    summary="List song projects",
    description="Returns every project owned by the caller, oldest first.",
    operation_id="list_projects",
)
def list_projects(
    user: User = Depends(get_current_user),
    db: Session = Depends(db_session_dep),
) -> ProjectListEnvelope:
    with transaction(db):
        items = [ProjectResponse.model_validate(p) for p in songwriting.list_projects(db, user)]
    return ProjectListEnvelope(data=ProjectListData(items=items, total=len(items)))


@router.patch(
    "/{project_id}",
    response_model=ProjectEnvelope,
    summary="Update a song project",
    description="Partial update; at least one field is required.",
    operation_id="update_project",
    responses=_NOT_FOUND,
)
def update_project(
    project_id: uuid.UUID,
    req: ProjectUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_session_dep),
) -> ProjectEnvelope:
    with transaction(db):
        project = songwriting.update_project(db, user, project_id, req)
        body = ProjectEnvelope(data=ProjectData(project=ProjectResponse.model_validate(project)))
    return body


@router.post(
    "/{project_id}/sections",
    response_model=SectionEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a song section",
    operation_id="create_section",
    responses=_NOT_FOUND,
)
def create_section(
    project_id: uuid.UUID,
    req: SectionCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_session_dep),
) -> SectionEnvelope:
    """Add a section (verse, chorus, ...) to one of the caller's projects."""
    with transaction(db):
        section = songwriting.create_section(db, user, project_id, req)
        body = SectionEnvelope(data=SectionData(section=SectionResponse.model_validate(section)))
    return body


@router.get(
    "/{project_id}/sections",
    response_model=SectionListEnvelope,
    summary="List song sections",
    description="Sections ordered by orderIndex, then creation time.",
    operation_id="list_sections",
    responses=_NOT_FOUND,
)
def list_sections(
    project_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_session_dep),
) -> SectionListEnvelope:
    with transaction(db):
        items = [SectionResponse.model_validate(s) for s in songwriting.list_sections(db, user, project_id)]
    return SectionListEnvelope(data=SectionListData(items=items, total=len(items)))


@router.patch(
    "/{project_id}/sections/{section_id}",
    response_model=SectionEnvelope,
    summary="Update a song section",
    description="Partial update; at least one field is required.",
    operation_id="update_section",
    responses=_NOT_FOUND,
)
def update_section(
    project_id: uuid.UUID,
    section_id: uuid.UUID,
    req: SectionUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_session_dep),
) -> SectionEnvelope:
    with transaction(db):
        section = songwriting.update_section(db, user, section_id, project_id, req)
        body = SectionEnvelope(data=SectionData(section=SectionResponse.model_validate(section)))
    return body


@router.delete(
    "/{project_id}/sections/{section_id}",
    response_model=SuccessResponse,
    summary="Delete a song section",
    operation_id="delete_section",
    responses=_NOT_FOUND,
)
def delete_section(
    project_id: uuid.UUID,
    section_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(db_session_dep),
) -> SuccessResponse:
    with transaction(db):
        songwriting.delete_section(db, user, section_id, project_id)
    return SuccessResponse()
