"""
Access request ledger.

Tracks one request per (project, requester) pair through
pending -> approved | denied. Only the project owner can move a request out of
pending, and a request that has been answered stays answered.
"""

import uuid
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import and_, desc, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from projectninjas.kernel.events.event_store import EventStore
from projectninjas.kernel.models.access_request import (
    AccessRequest,
    AccessRequestStatus,
    RESPONSE_STATUSES,
)
from projectninjas.kernel.models.base import utcnow
from projectninjas.kernel.models.event_log import EventType
from projectninjas.kernel.models.project import Project
from projectninjas.kernel.models.user import User
from projectninjas.logging_config import get_logger

logger = get_logger(__name__)

_TRANSITION_EVENTS = {
    AccessRequestStatus.APPROVED: EventType.ACCESS_APPROVED,
    AccessRequestStatus.DENIED: EventType.ACCESS_DENIED,
}


@dataclass(frozen=True)
class ReceivedRequest:
    """A request against one of the caller's projects."""

    request: AccessRequest
    project_title: str
    requester_email: str


@dataclass(frozen=True)
class SentRequest:
    """A request the caller submitted."""

    request: AccessRequest
    project_title: str


def parse_response_status(status: Optional[str]) -> AccessRequestStatus:
    """
    Validate an owner's response.

    Raises:
        BadRequestError: Unless status is "approved" or "denied"
    """
    try:
        parsed = AccessRequestStatus(status)
    except ValueError:
        raise BadRequestError("Invalid status.")
    if parsed not in RESPONSE_STATUSES:
        raise BadRequestError("Invalid status.")
    return parsed


class AccessRequestLedger:
    """
    Service for submitting, answering and listing access requests.

    Duplicate prevention relies on the (project_id, requester_id) unique
    constraint; the violation is translated into ConflictError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    async def submit(
        self,
        requester_id: uuid.UUID,
        project_id: uuid.UUID,
        ip_address: Optional[str] = None,
    ) -> AccessRequest:
        """
        Ask a project's owner for access to its files.

        Raises:
            NotFoundError: If the project does not exist
            BadRequestError: If the requester owns the project
            ConflictError: If the requester already asked, whatever the
                earlier request's status
        """
        result = await self.session.execute(
            select(Project.owner_id).where(Project.id == project_id)
        )
        owner_id = result.scalar_one_or_none()
        if owner_id is None:
            raise NotFoundError("Project not found.")
        if owner_id == requester_id:
            raise BadRequestError("You already own this project.")

        access_request = AccessRequest(
            project_id=project_id,
            requester_id=requester_id,
            status=AccessRequestStatus.PENDING.value,
        )
        self.session.add(access_request)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("You have already requested access to this project.")

        await self.event_store.log(
            event_type=EventType.ACCESS_REQUESTED,
            entity_type="access_request",
            entity_id=access_request.id,
            user_id=requester_id,
            payload={"project_id": project_id},
            ip_address=ip_address,
        )
        await self.session.commit()

        logger.info(
            "Access requested",
            extra={"access_request_id": str(access_request.id), "project_id": str(project_id)},
        )
        return access_request

    async def respond(
        self,
        owner_id: uuid.UUID,
        request_id: uuid.UUID,
        status: Optional[str],
        ip_address: Optional[str] = None,
    ) -> AccessRequest:
        """
        Approve or deny a pending request.

        Raises:
            BadRequestError: If status is not "approved" or "denied"
            NotFoundError: If the request does not exist
            ForbiddenError: If the caller does not own the request's project
            ConflictError: If the request was already answered
        """
        new_status = parse_response_status(status)

        result = await self.session.execute(
            select(AccessRequest, Project.owner_id)
            .join(Project, AccessRequest.project_id == Project.id)
            .where(AccessRequest.id == request_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("Access request not found.")

        access_request, project_owner_id = row
        if project_owner_id != owner_id:
            raise ForbiddenError("Not authorized to respond to this request.")

        # Only a pending row matches, so of two concurrent responses exactly
        # one updates it.
        now = utcnow()
        update_result = await self.session.execute(
            update(AccessRequest)
            .where(
                and_(
                    AccessRequest.id == request_id,
                    AccessRequest.status == AccessRequestStatus.PENDING.value,
                )
            )
            .values(status=new_status.value, responded_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if update_result.rowcount == 0:
            raise ConflictError("This request has already been answered.")

        await self.session.refresh(access_request)

        await self.event_store.log(
            event_type=_TRANSITION_EVENTS[new_status],
            entity_type="access_request",
            entity_id=access_request.id,
            user_id=owner_id,
            payload={
                "project_id": access_request.project_id,
                "requester_id": access_request.requester_id,
            },
            ip_address=ip_address,
        )
        await self.session.commit()

        logger.info(
            "Access request answered",
            extra={"access_request_id": str(request_id), "status": new_status.value},
        )
        return access_request

    async def list_received(self, owner_id: uuid.UUID) -> List[ReceivedRequest]:
        """All requests against projects owned by owner_id, newest first."""
        query = (
            select(AccessRequest, Project.title, User.email)
            .join(Project, AccessRequest.project_id == Project.id)
            .join(User, AccessRequest.requester_id == User.id)
            .where(Project.owner_id == owner_id)
            .order_by(desc(AccessRequest.created_at))
        )
        result = await self.session.execute(query)
        return [
            ReceivedRequest(request=request, project_title=title, requester_email=email)
            for request, title, email in result.all()
        ]

    async def list_sent(self, requester_id: uuid.UUID) -> List[SentRequest]:
        """All requests submitted by requester_id, newest first."""
        query = (
            select(AccessRequest, Project.title)
            .join(Project, AccessRequest.project_id == Project.id)
            .where(AccessRequest.requester_id == requester_id)
            .order_by(desc(AccessRequest.created_at))
        )
        result = await self.session.execute(query)
        return [
            SentRequest(request=request, project_title=title)
            for request, title in result.all()
        ]
