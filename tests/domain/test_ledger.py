"""Unit tests for AdmissionLedger."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest

from carebill.domain.adjustments import AdjustmentNote
from carebill.domain.enums import EventKind, PatientCategory
from carebill.domain.events import AdmittedEvent, BilledEvent, EmergencyAlertEvent
from carebill.domain.ledger import AdmissionLedger
from carebill.domain.notification_bus import NotificationBus
from carebill.domain.patient_record import PatientDescription, RegularDetails
from carebill.domain.ports import NotFoundError, UnknownAdjustmentError, ValidationError
from carebill.domain.treatment_cost import Tariff

ASHA = {"name": "Asha", "age": 30, "details": {"category": "Regular", "ailment": "fever"}}
RAJ = {"name": "Raj", "age": 60, "details": {"category": "ICU", "days_in_icu": 3, "ventilator_required": True}}
VIKRAM = {"name": "Vikram", "age": 45, "details": {"category": "Emergency", "emergency_type": "Trauma", "severity": 4}}


class FakeClock:
    """Deterministic clock advancing one minute per call."""

    def __init__(self):
        self.current = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=1)
        return self.current


@pytest.fixture
def events():
    """Every published event, in publication order."""
    return []


@pytest.fixture
def ledger(events):
    bus = NotificationBus(isolate_failures=False)
    for kind in EventKind:
        bus.subscribe(kind, events.append)
    return AdmissionLedger(bus=bus, clock=FakeClock())


class TestAdmit:
    """Test suite for AdmissionLedger.admit."""

    def test_admit_returns_record(self, ledger):
        record = ledger.admit(ASHA)
        assert record.patient_id == 1
        assert record.name == "Asha"
        assert record.age == 30
        assert record.category == PatientCategory.REGULAR
        assert record.admitted_at == datetime(2024, 5, 1, 9, 1, tzinfo=timezone.utc)

    def test_admit_accepts_description_model(self, ledger):
        description = PatientDescription(name="Asha", age=30, details=RegularDetails(ailment="fever"))
        assert ledger.admit(description).name == "Asha"

    def test_identifiers_are_distinct_and_increasing(self, ledger):
        """Test that every admission gets a fresh identifier."""
        ids = [ledger.admit(data).patient_id for data in (ASHA, RAJ, VIKRAM, ASHA)]
        assert ids == [1, 2, 3, 4]
        assert len(set(ids)) == 4

    def test_list_all_contains_exactly_one_new_record(self, ledger):
        before = ledger.list_all()
        record = ledger.admit(ASHA)
        after = ledger.list_all()

        assert len(after) == len(before) + 1
        assert after[-1] == record
        assert record.patient_id not in {r.patient_id for r in before}

    def test_list_all_in_admission_order(self, ledger):
        ledger.admit(RAJ)
        ledger.admit(ASHA)
        assert [r.name for r in ledger.list_all()] == ["Raj", "Asha"]

    def test_list_all_is_a_snapshot(self, ledger):
        snapshot = ledger.list_all()
        ledger.admit(ASHA)
        assert snapshot == ()
        assert len(ledger) == 1

    def test_admit_regular_publishes_admitted_only(self, ledger, events):
        record = ledger.admit(ASHA)
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, AdmittedEvent)
        assert event.patient_id == record.patient_id
        assert event.name == "Asha"
        assert event.category == PatientCategory.REGULAR
        assert event.timestamp == record.admitted_at

    def test_admit_emergency_publishes_alert_after_admitted(self, ledger, events):
        """Test Admitted fires before EmergencyAlert for emergency patients."""
        record = ledger.admit(VIKRAM)
        assert [type(e) for e in events] == [AdmittedEvent, EmergencyAlertEvent]
        alert = events[1]
        assert alert.patient_id == record.patient_id
        assert alert.severity == 4
        assert alert.emergency_type == "Trauma"

    def test_invalid_severity_has_no_effect(self, ledger, events):
        """Test severity 7 is rejected: no record, no event, no identifier consumed."""
        ledger.admit(ASHA)
        events.clear()
        before = ledger.list_all()

        with pytest.raises(ValidationError):
            ledger.admit({"name": "Vikram", "age": 45, "details": {"category": "Emergency", "severity": 7}})

        assert ledger.list_all() == before
        assert events == []
        assert ledger.admit(RAJ).patient_id == 2

    @pytest.mark.parametrize("data", [
        {"name": "", "age": 30, "details": {"category": "Regular"}},
        {"name": "Asha", "age": -1, "details": {"category": "Regular"}},
        {"name": "Raj", "age": 60, "details": {"category": "ICU", "days_in_icu": 0}},
        {"name": "Raj", "age": 60},
    ])
    def test_invalid_input_rejected(self, ledger, events, data):
        with pytest.raises(ValidationError):
            ledger.admit(data)
        assert len(ledger) == 0
        assert events == []

    def test_failing_observer_does_not_roll_back(self):
        """Test that the record stays appended even when an observer raises."""
        bus = NotificationBus(isolate_failures=False)
        bus.subscribe(EventKind.ADMITTED, Mock(side_effect=RuntimeError("boom")))
        ledger = AdmissionLedger(bus=bus)

        with pytest.raises(RuntimeError):
            ledger.admit(ASHA)
        with pytest.raises(RuntimeError):
            ledger.admit(RAJ)

        assert [r.patient_id for r in ledger.list_all()] == [1, 2]

    def test_isolated_observer_failure_is_invisible_to_caller(self):
        bus = NotificationBus()
        bus.subscribe(EventKind.ADMITTED, Mock(side_effect=RuntimeError("boom")))
        ledger = AdmissionLedger(bus=bus)
        assert ledger.admit(ASHA).patient_id == 1


class TestBill:
    """Test suite for AdmissionLedger.bill and generate_bill."""

    def test_regular_with_insurance(self, ledger, events):
        """Test Asha: base 5000, insurance, final 3500, note 1500."""
        record = ledger.admit(ASHA)
        events.clear()

        statement = ledger.generate_bill(record.patient_id, "insurance")

        assert statement.base_amount == Decimal("5000.00")
        assert statement.final_amount == Decimal("3500.00")
        assert statement.note == AdjustmentNote(label="Insurance Discount", amount=Decimal("1500.00"))
        assert len(events) == 1
        billed = events[0]
        assert isinstance(billed, BilledEvent)
        assert billed.final_amount == Decimal("3500.00")
        assert billed.base_amount == Decimal("5000.00")
        assert billed.adjustment == "insurance"
        assert billed.name == "Asha"
        assert billed.category == PatientCategory.REGULAR

    def test_icu_with_government_scheme(self, ledger):
        """Test Raj: base 105000, government scheme, final 52500."""
        record = ledger.admit(RAJ)
        assert ledger.bill(record.patient_id, "government_scheme") == Decimal("52500.00")

    def test_emergency_ordering(self, ledger, events):
        """Test Admitted -> EmergencyAlert -> Billed for an emergency patient."""
        record = ledger.admit(VIKRAM)
        ledger.bill(record.patient_id, "standard")
        assert [e.kind for e in events] == [EventKind.ADMITTED, EventKind.EMERGENCY_ALERT, EventKind.BILLED]
        assert events[2].final_amount == Decimal("19000.00")

    def test_unknown_patient(self, ledger, events):
        """Test NotFoundError and no event for a missing patient."""
        ledger.admit(ASHA)
        events.clear()

        with pytest.raises(NotFoundError) as exc_info:
            ledger.bill(99, "insurance")
        assert exc_info.value.patient_id == 99
        assert events == []

    def test_unknown_adjustment_publishes_nothing(self, ledger, events):
        record = ledger.admit(ASHA)
        events.clear()
        with pytest.raises(UnknownAdjustmentError):
            ledger.bill(record.patient_id, "loyalty")
        assert events == []

    def test_failing_adjustment_publishes_nothing(self, ledger, events):
        """Test Billed only fires after the adjustment returned successfully."""
        record = ledger.admit(ASHA)
        events.clear()

        def broken(amount):
            raise ZeroDivisionError("bad rate")

        with pytest.raises(ZeroDivisionError):
            ledger.bill(record.patient_id, broken)
        assert events == []

    def test_repeat_billing_is_stable_and_republishes(self, ledger, events):
        """Test repeated billing yields the same amount and notifies each time."""
        record = ledger.admit(ASHA)
        events.clear()

        first = ledger.bill(record.patient_id, "insurance")
        second = ledger.bill(record.patient_id, "insurance")

        assert first == second == Decimal("3500.00")
        assert [e.kind for e in events] == [EventKind.BILLED, EventKind.BILLED]

    def test_custom_function_adjustment(self, ledger, events):
        record = ledger.admit(ASHA)

        def flat_rebate(amount):
            return amount - 250

        assert ledger.bill(record.patient_id, flat_rebate) == Decimal("4750.00")
        assert events[-1].adjustment == "flat_rebate"

    def test_custom_tariff(self, events):
        ledger = AdmissionLedger(tariff=Tariff(regular_fee="750"))
        record = ledger.admit(ASHA)
        assert ledger.bill(record.patient_id, "standard") == Decimal("750.00")

    def test_default_bus_created(self):
        ledger = AdmissionLedger()
        assert isinstance(ledger.bus, NotificationBus)


class TestResultVariants:
    """Test suite for try_admit and try_bill."""

    def test_try_admit_success(self, ledger):
        result = ledger.try_admit(ASHA)
        assert result.is_success()
        assert result.value.patient_id == 1

    def test_try_admit_failure(self, ledger):
        result = ledger.try_admit({"name": "Asha", "age": -3, "details": {"category": "Regular"}})
        assert result.is_failure()
        assert result.error_type == "ValidationError"
        assert result.error_details["details"][0]["field"] == "age"
        assert len(ledger) == 0

    def test_try_bill_success(self, ledger):
        record = ledger.admit(ASHA)
        result = ledger.try_bill(record.patient_id, "insurance")
        assert result.is_success()
        assert result.value == Decimal("3500.00")

    def test_try_bill_not_found(self, ledger):
        result = ledger.try_bill(42, "insurance")
        assert result.is_failure()
        assert result.error_type == "NotFoundError"
        assert result.error_details == {"patient_id": 42}


class TestQueries:
    """Test suite for read-only ledger queries."""

    def test_get(self, ledger):
        record = ledger.admit(ASHA)
        assert ledger.get(record.patient_id) is record

    def test_get_missing(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.get(1)

    def test_count_by_category(self, ledger):
        ledger.admit(ASHA)
        ledger.admit(ASHA)
        ledger.admit(RAJ)
        counts = ledger.count_by_category()
        assert counts[PatientCategory.REGULAR] == 2
        assert counts[PatientCategory.ICU] == 1
        assert counts[PatientCategory.EMERGENCY] == 0

    def test_get_rejects_bool(self, ledger):
        """Test True is not treated as patient 1."""
        ledger.admit(ASHA)
        with pytest.raises(NotFoundError):
            ledger.get(True)
        with pytest.raises(NotFoundError):
            ledger.bill(True, "standard")

    def test_bool_fields_rejected_on_admit(self, ledger):
        with pytest.raises(ValidationError):
            ledger.admit({"name": "Raj", "age": True, "details": {"category": "ICU", "days_in_icu": True}})
        assert len(ledger) == 0
