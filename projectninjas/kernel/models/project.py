"""
Project and project file models.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, func, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from projectninjas.kernel.models.base import Base, TimestampMixin, generate_uuid, utcnow


DEFAULT_FILE_TYPE = "Other"
DOCUMENTATION_FILE_TYPE = "Documentation"


class Project(Base, TimestampMixin):
    """A project record owned by exactly one user."""

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    abstract: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    # Display order is preserved; it carries no meaning
    keywords: Mapped[List[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    # Ownership (immutable after creation)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Project {self.title[:50]}>"


class ProjectFile(Base):
    """Metadata for a stored file artifact."""

    __tablename__ = "project_files"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    # Artifact name relative to the content directory
    file_path: Mapped[str] = mapped_column(
        String(512),
        unique=True,
        nullable=False,
    )
    file_type: Mapped[str] = mapped_column(
        String(100),
        default=DEFAULT_FILE_TYPE,
        nullable=False,
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ProjectFile {self.file_name} project={self.project_id}>"
