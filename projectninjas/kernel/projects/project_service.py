"""
Project service: public browsing, owner edits and cascading deletion.
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.exceptions import ForbiddenError, NotFoundError
from projectninjas.kernel.events.event_store import EventStore
from projectninjas.kernel.files.storage import ContentStore
from projectninjas.kernel.models.access_request import AccessRequest
from projectninjas.kernel.models.event_log import EventType
from projectninjas.kernel.models.project import Project, ProjectFile
from projectninjas.kernel.models.user import User
from projectninjas.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProjectWithOwner:
    project: Project
    owner_email: str


class ProjectService:
    """
    Service for project records.

    Reading is public. Changes are restricted to the project's owner.
    """

    def __init__(self, session: AsyncSession, store: ContentStore):
        self.session = session
        self.store = store
        self.event_store = EventStore(session)

    async def list_projects(self) -> List[ProjectWithOwner]:
        """All projects, newest first."""
        result = await self.session.execute(
            select(Project, User.email)
            .join(User, Project.owner_id == User.id)
            .order_by(desc(Project.created_at))
        )
        return [
            ProjectWithOwner(project=project, owner_email=email)
            for project, email in result.all()
        ]

    async def get_project(self, project_id: uuid.UUID) -> ProjectWithOwner:
        """
        Raises:
            NotFoundError: If the project does not exist
        """
        result = await self.session.execute(
            select(Project, User.email)
            .join(User, Project.owner_id == User.id)
            .where(Project.id == project_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Project not found.")
        project, email = row
        return ProjectWithOwner(project=project, owner_email=email)

    async def create_project(
        self,
        owner: User,
        title: str,
        abstract: Optional[str] = None,
        keywords: Optional[List[str]] = None,
        ip_address: Optional[str] = None,
    ) -> ProjectWithOwner:
        project = Project(
            title=title,
            abstract=abstract,
            keywords=list(keywords or []),
            owner_id=owner.id,
        )
        self.session.add(project)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.PROJECT_CREATED,
            entity_type="project",
            entity_id=project.id,
            user_id=owner.id,
            payload={"title": project.title},
            ip_address=ip_address,
        )
        await self.session.commit()

        logger.info("Project created", extra={"project_id": str(project.id)})
        return ProjectWithOwner(project=project, owner_email=owner.email)

    async def update_project(
        self,
        project_id: uuid.UUID,
        owner: User,
        title: Optional[str] = None,
        abstract: Optional[str] = None,
        keywords: Optional[List[str]] = None,
        ip_address: Optional[str] = None,
    ) -> ProjectWithOwner:
        """
        Update the supplied fields only.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the caller is not the owner
        """
        project = await self._get_owned(project_id, owner.id, "Not authorized.")

        changes = {}
        if title is not None:
            project.title = title
            changes["title"] = title
        if abstract is not None:
            project.abstract = abstract
            changes["abstract"] = True
        if keywords is not None:
            project.keywords = list(keywords)
            changes["keywords"] = list(keywords)

        await self.session.flush()
        await self.event_store.log(
            event_type=EventType.PROJECT_UPDATED,
            entity_type="project",
            entity_id=project.id,
            user_id=owner.id,
            payload={"changes": changes},
            ip_address=ip_address,
        )
        await self.session.commit()
        await self.session.refresh(project)

        return ProjectWithOwner(project=project, owner_email=owner.email)

    async def delete_project(
        self,
        project_id: uuid.UUID,
        owner_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> None:
        """
        Delete a project with its access requests and files.

        Rows go in one transaction; artifacts are removed once it has
        committed.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the caller is not the owner
        """
        project = await self._get_owned(
            project_id, owner_id, "You are not authorized to delete this project."
        )

        result = await self.session.execute(
            select(ProjectFile.file_path).where(ProjectFile.project_id == project_id)
        )
        stored_names = list(result.scalars().all())

        await self.session.execute(
            delete(AccessRequest).where(AccessRequest.project_id == project_id)
        )
        await self.session.execute(
            delete(ProjectFile).where(ProjectFile.project_id == project_id)
        )
        await self.session.execute(
            delete(Project).where(Project.id == project_id)
        )
        await self.event_store.log(
            event_type=EventType.PROJECT_DELETED,
            entity_type="project",
            entity_id=project_id,
            user_id=owner_id,
            payload={"title": project.title, "file_count": len(stored_names)},
            ip_address=ip_address,
        )
        await self.session.commit()

        removed = 0
        for name in stored_names:
            if await asyncio.to_thread(self.store.remove, name):
                removed += 1
        logger.info(
            "Project deleted",
            extra={
                "project_id": str(project_id),
                "files": len(stored_names),
                "artifacts_removed": removed,
            },
        )

    async def _get_owned(
        self,
        project_id: uuid.UUID,
        owner_id: uuid.UUID,
        forbidden_message: str,
    ) -> Project:
        result = await self.session.execute(
            select(Project).where(Project.id == project_id)
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFoundError("Project not found.")
        if project.owner_id != owner_id:
            raise ForbiddenError(forbidden_message)
        return project
