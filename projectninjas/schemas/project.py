"""
Project schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from projectninjas.kernel.projects.project_service import ProjectWithOwner
from projectninjas.schemas.common import CamelModel


def _split_keywords(v):
    # Clients may send the raw comma-separated form field
    if isinstance(v, str):
        return [k.strip() for k in v.split(",") if k.strip()]
    return v


class ProjectCreate(CamelModel):
    """Project creation request."""

    title: str = Field(..., min_length=1, max_length=500)
    abstract: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, v):
        return _split_keywords(v)


class ProjectUpdate(CamelModel):
    """Project update request. Omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    abstract: Optional[str] = None
    keywords: Optional[List[str]] = None

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, v):
        return _split_keywords(v)


class ProjectResponse(CamelModel):
    """Project response."""

    project_id: uuid.UUID
    title: str
    abstract: Optional[str]
    keywords: List[str]
    owner_id: uuid.UUID
    owner_email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entry(cls, entry: ProjectWithOwner) -> "ProjectResponse":
        project = entry.project
        return cls(
            project_id=project.id,
            title=project.title,
            abstract=project.abstract,
            keywords=list(project.keywords or []),
            owner_id=project.owner_id,
            owner_email=entry.owner_email,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )
