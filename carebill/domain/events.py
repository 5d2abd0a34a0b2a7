"""Notification Event Models.

This module defines the typed events published on the NotificationBus when a
patient is admitted, billed, or arrives as an emergency. Observers receive
these immutable models and must not rely on anything else about the publisher.

Privacy Impact:
    - Events carry the patient name for department displays
    - ``to_audit_dict`` is the only serialisation used for audit trails

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Each event class is bound to exactly one EventKind
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from carebill.domain.adjustments import AdjustmentNote
from carebill.domain.enums import EventKind, PatientCategory


class DomainEvent(BaseModel):
    """Base class for all notification events.

    Parameters:
        patient_id: Identifier of the patient concerned
        name: Patient name
        timestamp: When the event occurred
        event_id: Unique identifier of this event instance
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[EventKind]

    patient_id: int = Field(..., description="Ledger-assigned patient identifier")
    name: str = Field(..., description="Patient name")
    timestamp: datetime = Field(..., description="When the event occurred")
    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique event identifier")

    def to_audit_dict(self) -> dict[str, Any]:
        """Convert to a flat dictionary for audit entries.

        Returns:
            Dictionary with JSON-friendly values and an ``event_kind`` key
        """
        data = self.model_dump(mode="json")
        data["event_kind"] = self.kind.value
        return data


class AdmittedEvent(DomainEvent):
    """Published once per successful admission."""

    kind: ClassVar[EventKind] = EventKind.ADMITTED

    category: PatientCategory


class EmergencyAlertEvent(DomainEvent):
    """Published after AdmittedEvent when an Emergency patient is admitted."""

    kind: ClassVar[EventKind] = EventKind.EMERGENCY_ALERT

    emergency_type: str = ""
    severity: int


class BilledEvent(DomainEvent):
    """Published every time a bill is generated, after the adjustment returned.

    Parameters:
        category: Patient category
        final_amount: Amount payable after the adjustment
        base_amount: Treatment cost before the adjustment
        adjustment: Name of the adjustment applied
        note: Informational note produced by the adjustment, if any
    """

    kind: ClassVar[EventKind] = EventKind.BILLED

    category: PatientCategory
    final_amount: Decimal
    base_amount: Decimal
    adjustment: str
    note: Optional[AdjustmentNote] = None
