"""
Event Store service for append-only audit logging.
"""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.kernel.models.event_log import EventLog, EventType


class EventStore:
    """
    Service for writing and reading the audit log.

    Usage:
        event_store = EventStore(session)
        await event_store.log(
            event_type=EventType.ACCESS_APPROVED,
            entity_type="access_request",
            entity_id=access_request.id,
            user_id=owner_id,
            payload={"project_id": str(access_request.project_id)},
        )

    The event joins the caller's transaction; the caller commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> EventLog:
        """
        Add an event to the session.

        Args:
            event_type: The type of event
            entity_type: The type of entity (user, project, file, access_request)
            entity_id: The ID of the entity
            user_id: The ID of the user who triggered the event
            payload: Additional event data
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            The pending EventLog record
        """
        event = EventLog(
            event_type=event_type.value,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            payload=self._serialize_payload(payload or {}),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.session.add(event)
        return event

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: uuid.UUID,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """
        Get the event history for one entity, newest first.
        """
        query = select(EventLog).where(
            and_(
                EventLog.entity_type == entity_type,
                EventLog.entity_id == entity_id,
            )
        )
        if event_types:
            query = query.where(EventLog.event_type.in_([t.value for t in event_types]))

        query = query.order_by(desc(EventLog.created_at)).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    @classmethod
    def _serialize_payload(cls, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Convert UUIDs, datetimes and enums so the payload fits a JSON column."""
        return {key: cls._serialize_value(value) for key, value in payload.items()}

    @classmethod
    def _serialize_value(cls, value: Any) -> Any:
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return cls._serialize_payload(value)
        if isinstance(value, (list, tuple)):
            return [cls._serialize_value(v) for v in value]
        return value
