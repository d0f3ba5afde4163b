"""
Kernel Data Models

SQLAlchemy models for users, projects, stored files, the access request
ledger and the audit log.
"""

from projectninjas.kernel.models.base import Base, TimestampMixin, enum_value, generate_uuid
from projectninjas.kernel.models.user import User
from projectninjas.kernel.models.project import (
    Project,
    ProjectFile,
    DEFAULT_FILE_TYPE,
    DOCUMENTATION_FILE_TYPE,
)
from projectninjas.kernel.models.access_request import (
    AccessRequest,
    AccessRequestStatus,
    RESPONSE_STATUSES,
)
from projectninjas.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "enum_value",
    "generate_uuid",
    # User
    "User",
    # Project
    "Project",
    "ProjectFile",
    "DEFAULT_FILE_TYPE",
    "DOCUMENTATION_FILE_TYPE",
    # Access requests
    "AccessRequest",
    "AccessRequestStatus",
    "RESPONSE_STATUSES",
    # Event Log
    "EventLog",
    "EventType",
]
