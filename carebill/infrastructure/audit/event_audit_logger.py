"""Event Audit Logger.

This module records every notification event it observes as an append-only
audit entry: event kind, patient identifier, amounts and timestamps.

Privacy Impact:
    - Entries contain patient names (as carried by the events)
    - Entries are never modified once appended

Architecture:
    - Infrastructure layer component
    - Registered on the NotificationBus like any other observer; the ledger
      does not know it exists
"""

import logging
from typing import List, Optional

from carebill.domain.enums import EventKind
from carebill.domain.events import DomainEvent
from carebill.domain.notification_bus import NotificationBus

logger = logging.getLogger(__name__)


class EventAuditLogger:
    """In-memory audit trail of published events.

    Example Usage:
        ```python
        audit = EventAuditLogger(session_id="front-desk-1")
        audit.attach(bus)
        ledger.admit(...)
        audit.get_logs()  # [{'event_kind': 'Admitted', 'patient_id': 1, ...}]
        ```
    """

    def __init__(self, session_id: Optional[str] = None):
        """Initialize event audit logger.

        Parameters:
            session_id: Identifier stamped on every entry (e.g., a terminal name)
        """
        self._logs: List[dict] = []
        self._session_id = session_id

    def set_session_context(self, session_id: Optional[str]) -> None:
        self._session_id = session_id

    def attach(self, bus: NotificationBus) -> None:
        """Subscribe this logger to every event kind on a bus."""
        for kind in EventKind:
            bus.subscribe(kind, self.log_event)

    def log_event(self, event: DomainEvent) -> None:
        """Append an audit entry for an event.

        Parameters:
            event: Event to record
        """
        audit_dict = event.to_audit_dict()
        audit_dict["session_id"] = self._session_id
        self._logs.append(audit_dict)
        logger.debug(f"Logged {event.kind.value} event for patient {event.patient_id}")

    __call__ = log_event

    def get_logs(self, kind: Optional[EventKind] = None) -> List[dict]:
        """Get logged entries, optionally filtered by event kind.

        Returns:
            Copies of the entries, oldest first
        """
        if kind is None:
            return [dict(entry) for entry in self._logs]
        return [dict(entry) for entry in self._logs if entry["event_kind"] == EventKind(kind).value]

    def clear_logs(self) -> None:
        self._logs.clear()
        logger.debug("Cleared event audit logs")

    def get_log_count(self) -> int:
        return len(self._logs)

    def has_logs(self) -> bool:
        return len(self._logs) > 0
