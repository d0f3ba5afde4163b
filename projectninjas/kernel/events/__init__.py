"""
Append-only audit logging.
"""

from projectninjas.kernel.events.event_store import EventStore

__all__ = ["EventStore"]
