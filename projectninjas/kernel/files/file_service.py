"""
Project file listing, download and deletion.

Listing and download go through the AuthorizationGate; deletion is for the
project owner only.
"""

import asyncio
import uuid
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.exceptions import ForbiddenError, NotFoundError
from projectninjas.kernel.events.event_store import EventStore
from projectninjas.kernel.files.storage import ContentStore
from projectninjas.kernel.models.event_log import EventType
from projectninjas.kernel.models.project import Project, ProjectFile
from projectninjas.kernel.permissions.authorization_gate import AuthorizationGate
from projectninjas.logging_config import get_logger

logger = get_logger(__name__)


class ProjectFileService:
    def __init__(self, session: AsyncSession, store: ContentStore):
        self.session = session
        self.store = store
        self.gate = AuthorizationGate(session)
        self.event_store = EventStore(session)

    async def list_files(
        self,
        project_id: uuid.UUID,
        requester_id: uuid.UUID,
    ) -> List[ProjectFile]:
        """
        Files of a project, newest first.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the gate denies the requester
        """
        exists = await self.session.execute(
            select(Project.id).where(Project.id == project_id)
        )
        if exists.scalar_one_or_none() is None:
            raise NotFoundError("Project not found.")

        if not await self.gate.can_list_files(project_id, requester_id):
            raise ForbiddenError("Access to this project's files has not been granted.")

        result = await self.session.execute(
            select(ProjectFile)
            .where(ProjectFile.project_id == project_id)
            .order_by(desc(ProjectFile.uploaded_at))
        )
        return list(result.scalars().all())

    async def open_download(
        self,
        file_id: uuid.UUID,
        requester_id: uuid.UUID,
    ) -> Tuple[ProjectFile, Path]:
        """
        Resolve a file for download.

        Raises:
            NotFoundError: If the file row or its artifact is missing
            ForbiddenError: If the gate denies the requester
        """
        project_file = await self.get_file(file_id)
        if project_file is None:
            raise NotFoundError("File not found.")

        if not await self.gate.can_download_file(file_id, requester_id):
            raise ForbiddenError("Access to this file has not been granted.")

        path = self.store.resolve(project_file.file_path)
        if not path.is_file():
            logger.warning(
                "Artifact missing for file record",
                extra={"file_id": str(file_id), "file_path": project_file.file_path},
            )
            raise NotFoundError("File not found on server.")

        return project_file, path

    async def delete(
        self,
        file_id: uuid.UUID,
        requester_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> None:
        """
        Delete a file row, then its artifact.

        Raises:
            NotFoundError: If the file does not exist
            ForbiddenError: If the requester does not own the file's project
        """
        result = await self.session.execute(
            select(ProjectFile, Project.owner_id)
            .join(Project, ProjectFile.project_id == Project.id)
            .where(ProjectFile.id == file_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("File not found.")

        project_file, owner_id = row
        if owner_id != requester_id:
            raise ForbiddenError("Not authorized to delete this file.")

        stored_name = project_file.file_path
        await self.session.execute(
            delete(ProjectFile).where(ProjectFile.id == file_id)
        )
        await self.event_store.log(
            event_type=EventType.FILE_DELETED,
            entity_type="project_file",
            entity_id=file_id,
            user_id=requester_id,
            payload={"project_id": project_file.project_id, "file_name": project_file.file_name},
            ip_address=ip_address,
        )
        await self.session.commit()

        await asyncio.to_thread(self.store.remove, stored_name)
        logger.info("File deleted", extra={"file_id": str(file_id)})

    async def get_file(self, file_id: uuid.UUID) -> Optional[ProjectFile]:
        result = await self.session.execute(
            select(ProjectFile).where(ProjectFile.id == file_id)
        )
        return result.scalar_one_or_none()
