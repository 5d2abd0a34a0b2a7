"""Admission Ledger - Admission and Billing Orchestration.

The ledger owns the append-only sequence of admitted patients and the
identifier counter, and orchestrates the billing sequence:

    compute base cost -> apply adjustment -> publish Billed

Ordering Guarantees:
    - Admitted is published before EmergencyAlert (Emergency patients only)
    - Billed is published only after the adjustment returned successfully
    - A failed admission consumes no identifier, appends nothing and
      publishes nothing

Architecture:
    - Domain service; collaborators (CLI, tests) call in, observers listen
    - Repeat billing is allowed: each call recomputes from the record and
      republishes Billed
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from carebill.domain.adjustments import AdjustmentNote, AdjustmentSelector, as_adjustment
from carebill.domain.enums import PatientCategory
from carebill.domain.events import AdmittedEvent, BilledEvent, EmergencyAlertEvent
from carebill.domain.money import Money, to_money
from carebill.domain.notification_bus import NotificationBus
from carebill.domain.patient_record import (
    EmergencyDetails,
    PatientDescription,
    PatientRecord,
    validate_description,
)
from carebill.domain.ports import CareBillError, NotFoundError, Result
from carebill.domain.treatment_cost import DEFAULT_TARIFF, Tariff, calculate_treatment_cost

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BillStatement(BaseModel):
    """Everything known about one generated bill.

    Parameters:
        patient_id: Patient billed
        base_amount: Treatment cost before adjustment
        final_amount: Amount payable
        adjustment: Name of the adjustment applied
        note: Informational note from the adjustment, if any
    """

    model_config = ConfigDict(frozen=True)

    patient_id: int
    base_amount: Money
    final_amount: Money
    adjustment: str
    note: Optional[AdjustmentNote] = None


class AdmissionLedger:
    """Owns admitted patients and coordinates costing, adjustment and notification.

    Example Usage:
        ```python
        bus = NotificationBus()
        ledger = AdmissionLedger(bus)
        record = ledger.admit({"name": "Asha", "age": 30,
                               "details": {"category": "Regular", "ailment": "fever"}})
        final = ledger.bill(record.patient_id, "insurance")  # Decimal("3500.00")
        ```
    """

    def __init__(
        self,
        bus: Optional[NotificationBus] = None,
        tariff: Tariff = DEFAULT_TARIFF,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize an empty ledger.

        Parameters:
            bus: Notification bus to publish on (a private one is created if None)
            tariff: Fee constants for the treatment cost rule
            clock: Source of timestamps
        """
        self.bus = bus if bus is not None else NotificationBus()
        self.tariff = tariff
        self._clock = clock
        self._records: list[PatientRecord] = []
        self._index: dict[int, PatientRecord] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def admit(self, description: Union[PatientDescription, Mapping[str, Any]]) -> PatientRecord:
        """Validate a description, append a new record and announce it.

        Parameters:
            description: PatientDescription or mapping with name, age and details

        Returns:
            PatientRecord: The admitted record with its assigned identifier

        Raises:
            ValidationError: If any field is out of range (no side effects)
        """
        validated = validate_description(description)

        record = PatientRecord(
            patient_id=self._next_id,
            name=validated.name,
            age=validated.age,
            details=validated.details,
            admitted_at=self._clock(),
        )
        self._next_id += 1
        self._records.append(record)
        self._index[record.patient_id] = record
        logger.info(
            f"Admitted patient {record.patient_id} ({record.category.value})",
            extra={"patient_id": record.patient_id, "category": record.category.value},
        )

        self.bus.publish(AdmittedEvent(
            patient_id=record.patient_id,
            name=record.name,
            category=record.category,
            timestamp=record.admitted_at,
        ))

        if isinstance(record.details, EmergencyDetails):
            self.bus.publish(EmergencyAlertEvent(
                patient_id=record.patient_id,
                name=record.name,
                emergency_type=record.details.emergency_type,
                severity=record.details.severity,
                timestamp=record.admitted_at,
            ))

        return record

    def try_admit(self, description: Union[PatientDescription, Mapping[str, Any]]) -> Result[PatientRecord]:
        """Result-returning variant of ``admit``.

        Only domain errors become failures; observer errors that propagate
        (non-isolating bus) are re-raised.
        """
        try:
            return Result.success_result(self.admit(description))
        except CareBillError as e:
            return Result.failure_result(e)

    # ------------------------------------------------------------------
    # Billing
    # ------------------------------------------------------------------

    def get(self, patient_id: int) -> PatientRecord:
        """Look up an admitted record.

        Raises:
            NotFoundError: If no record has this identifier
        """
        # bool is an int subclass; True must not resolve to patient 1
        record = None if isinstance(patient_id, bool) else self._index.get(patient_id)
        if record is None:
            raise NotFoundError(f"No admitted patient with id {patient_id!r}", patient_id=patient_id)
        return record

    def generate_bill(self, patient_id: int, adjustment: AdjustmentSelector) -> BillStatement:
        """Compute, adjust and announce a bill.

        Parameters:
            patient_id: Identifier of an admitted patient
            adjustment: Standard adjustment name, BillingAdjustment or callable

        Returns:
            BillStatement: Base amount, final amount and adjustment note

        Raises:
            NotFoundError: If the patient does not exist (nothing is published)
            UnknownAdjustmentError: If adjustment is an unknown name
        """
        record = self.get(patient_id)
        resolved = as_adjustment(adjustment)

        base_amount = calculate_treatment_cost(record, self.tariff)
        result = resolved.apply(base_amount)
        final_amount = to_money(result.final_amount)

        statement = BillStatement(
            patient_id=record.patient_id,
            base_amount=base_amount,
            final_amount=final_amount,
            adjustment=resolved.name,
            note=result.note,
        )
        logger.info(
            f"Billed patient {record.patient_id} ({record.category.value}): "
            f"base={base_amount} final={final_amount} adjustment={resolved.name}",
            extra={"patient_id": record.patient_id, "adjustment": resolved.name},
        )

        self.bus.publish(BilledEvent(
            patient_id=record.patient_id,
            name=record.name,
            category=record.category,
            final_amount=final_amount,
            base_amount=base_amount,
            adjustment=resolved.name,
            note=result.note,
            timestamp=self._clock(),
        ))

        return statement

    def bill(self, patient_id: int, adjustment: AdjustmentSelector) -> Money:
        """Bill a patient and return the final amount.

        See ``generate_bill`` for parameters and errors.
        """
        return self.generate_bill(patient_id, adjustment).final_amount

    def try_bill(self, patient_id: int, adjustment: AdjustmentSelector) -> Result[Money]:
        """Result-returning variant of ``bill``."""
        try:
            return Result.success_result(self.bill(patient_id, adjustment))
        except CareBillError as e:
            return Result.failure_result(e)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_all(self) -> tuple[PatientRecord, ...]:
        """All admitted records in admission order."""
        return tuple(self._records)

    def count_by_category(self) -> dict[PatientCategory, int]:
        counts = {category: 0 for category in PatientCategory}
        for record in self._records:
            counts[record.category] += 1
        return counts
