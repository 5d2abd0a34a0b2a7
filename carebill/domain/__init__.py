"""Domain layer for CareBill.

This package contains the admission and billing core: patient records, the
treatment cost rule, billing adjustments, the notification bus and the
admission ledger. Models depend on nothing beyond Pydantic.
"""

from .adjustments import (
    AdjustmentNote,
    AdjustmentResult,
    BillingAdjustment,
    as_adjustment,
    available_adjustments,
    get_adjustment,
)
from .enums import EventKind, PatientCategory
from .events import AdmittedEvent, BilledEvent, DomainEvent, EmergencyAlertEvent
from .ledger import AdmissionLedger, BillStatement
from .notification_bus import NotificationBus
from .patient_record import (
    EmergencyDetails,
    ICUDetails,
    PatientDescription,
    PatientRecord,
    RegularDetails,
)
from .ports import CareBillError, NotFoundError, Result, UnknownAdjustmentError, ValidationError
from .treatment_cost import Tariff, calculate_treatment_cost, describe_cost

__all__ = [
    "AdjustmentNote",
    "AdjustmentResult",
    "AdmissionLedger",
    "AdmittedEvent",
    "BillStatement",
    "BilledEvent",
    "BillingAdjustment",
    "CareBillError",
    "DomainEvent",
    "EmergencyAlertEvent",
    "EmergencyDetails",
    "EventKind",
    "ICUDetails",
    "NotFoundError",
    "NotificationBus",
    "PatientCategory",
    "PatientDescription",
    "PatientRecord",
    "RegularDetails",
    "Result",
    "Tariff",
    "UnknownAdjustmentError",
    "ValidationError",
    "as_adjustment",
    "available_adjustments",
    "calculate_treatment_cost",
    "describe_cost",
    "get_adjustment",
]
