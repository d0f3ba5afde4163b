"""
Access request model - the ledger of who asked for which project's files.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from projectninjas.kernel.models.base import Base, TimestampMixin, enum_value, generate_uuid


class AccessRequestStatus(str, Enum):
    """Lifecycle of an access request. APPROVED and DENIED are terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


# Statuses an owner may respond with
RESPONSE_STATUSES = frozenset({AccessRequestStatus.APPROVED, AccessRequestStatus.DENIED})


class AccessRequest(Base, TimestampMixin):
    """One requester's request for one project's files."""

    __tablename__ = "access_requests"
    __table_args__ = (
        UniqueConstraint(
            "project_id",
            "requester_id",
            name="uq_access_requests_project_requester",
        ),
    )

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
    requester_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    status: Mapped[AccessRequestStatus] = mapped_column(
        String(20),
        default=AccessRequestStatus.PENDING.value,
        nullable=False,
    )
    responded_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<AccessRequest {self.id} status={enum_value(self.status)}>"

