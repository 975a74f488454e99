"""
Audit Sink Interface

DESIGN DECISION: The engines do not know where audit events end up.
A sink receives every event the AuditLogger writes. This allows us to:
1. Collect events in memory for the caller (or tests)
2. Forward them to the application's own store without touching the engines

The interface is intentionally tiny - the engines only ever append.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from finance_engine.models.audit import AuditEvent, AuditEventType


class AuditSink(ABC):
    """
    Abstract destination for audit events.

    Audit events are append-only - no update or delete.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Returns:
            True if the event was accepted
        """
        pass


class InMemoryAuditSink(AuditSink):
    """Keeps events in a list, in the order they were logged."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    def get_events_by_type(self, event_type: AuditEventType) -> list[AuditEvent]:
        return [e for e in self._events if e.event_type == event_type]

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_entity(
        self,
        entity_id: str,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_id == entity_id
            and (event_type is None or e.event_type == event_type)
        ]

    def clear(self) -> None:
        self._events.clear()
