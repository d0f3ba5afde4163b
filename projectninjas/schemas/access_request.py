"""
Access request schemas.
"""

import uuid
from datetime import datetime
from typing import Optional

from projectninjas.kernel.access.ledger import ReceivedRequest, SentRequest
from projectninjas.kernel.models.access_request import AccessRequest
from projectninjas.kernel.models.base import enum_value
from projectninjas.schemas.common import CamelModel


class AccessRequestCreate(CamelModel):
    """Request access to a project's files."""

    project_id: uuid.UUID


class AccessRequestRespond(CamelModel):
    """Owner's answer: "approved" or "denied"."""

    status: Optional[str] = None


class AccessRequestResponse(CamelModel):
    """Access request response."""

    request_id: uuid.UUID
    project_id: uuid.UUID
    requester_id: uuid.UUID
    status: str
    created_at: datetime
    responded_at: Optional[datetime] = None

    @classmethod
    def from_request(cls, access_request: AccessRequest, **extra) -> "AccessRequestResponse":
        return cls(
            request_id=access_request.id,
            project_id=access_request.project_id,
            requester_id=access_request.requester_id,
            status=enum_value(access_request.status),
            created_at=access_request.created_at,
            responded_at=access_request.responded_at,
            **extra,
        )


class ReceivedAccessRequestResponse(AccessRequestResponse):
    """A request against one of the caller's projects."""

    project_title: str
    requester_email: str

    @classmethod
    def from_entry(cls, entry: ReceivedRequest) -> "ReceivedAccessRequestResponse":
        return cls.from_request(
            entry.request,
            project_title=entry.project_title,
            requester_email=entry.requester_email,
        )


class SentAccessRequestResponse(AccessRequestResponse):
    """A request the caller submitted."""

    project_title: str

    @classmethod
    def from_entry(cls, entry: SentRequest) -> "SentAccessRequestResponse":
        return cls.from_request(entry.request, project_title=entry.project_title)
