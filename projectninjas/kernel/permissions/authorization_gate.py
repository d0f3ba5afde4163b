"""
Authorization gate for project files.

A user may list and download a project's files if they own the project or
hold an approved access request for it. Nothing else grants access.
"""

import uuid
from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.kernel.models.access_request import AccessRequest, AccessRequestStatus
from projectninjas.kernel.models.project import Project, ProjectFile


def is_entitled(
    owner_id: uuid.UUID,
    requester_id: uuid.UUID,
    request_status: Optional[str],
) -> bool:
    """
    The gate's decision rule.

    Args:
        owner_id: Owner of the project
        requester_id: User asking for the files
        request_status: Status of the requester's access request, or None
            when they never asked
    """
    if requester_id == owner_id:
        return True
    return request_status == AccessRequestStatus.APPROVED


class AuthorizationGate:
    """
    Read-only allow/deny checks for file listing and download.

    Every call runs its own query, so an approval or denial applies to the
    very next check.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def can_list_files(
        self,
        project_id: uuid.UUID,
        requester_id: uuid.UUID,
    ) -> bool:
        """True iff requester owns the project or has an approved request for it."""
        query = select(Project.owner_id, AccessRequest.status).outerjoin(
            AccessRequest,
            and_(
                AccessRequest.project_id == Project.id,
                AccessRequest.requester_id == requester_id,
            ),
        ).where(Project.id == project_id)

        result = await self.session.execute(query)
        row = result.one_or_none()
        if row is None:
            return False

        owner_id, request_status = row
        return is_entitled(owner_id, requester_id, request_status)

    async def can_download_file(
        self,
        file_id: uuid.UUID,
        requester_id: uuid.UUID,
    ) -> bool:
        """Resolve the file's project, then apply the listing rule to it."""
        result = await self.session.execute(
            select(ProjectFile.project_id).where(ProjectFile.id == file_id)
        )
        project_id = result.scalar_one_or_none()
        if project_id is None:
            return False

        return await self.can_list_files(project_id, requester_id)
