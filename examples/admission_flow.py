"""End-to-End Example: Admission to Bill.

This example demonstrates the complete flow through the ledger:
1. Regular patient -> Admitted -> Insurance bill
2. ICU patient -> Admitted -> Government scheme bill
3. Emergency patient -> Admitted -> EmergencyAlert -> Custom adjustment
4. Invalid admission -> rejected with field errors, nothing published

Department notifications are printed as they happen; the audit trail is
printed at the end.
"""

import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from carebill.domain import AdjustmentNote, AdjustmentResult, ValidationError
from carebill.domain.money import format_money
from carebill.infrastructure.audit import EventAuditLogger
from carebill.main import create_ledger


def loyalty_rebate(base_amount: Decimal) -> AdjustmentResult:
    """Flat Rs.2,000 off, never below zero."""
    rebate = min(base_amount, Decimal("2000.00"))
    return AdjustmentResult(
        final_amount=base_amount - rebate,
        note=AdjustmentNote(label="Loyalty Rebate", amount=rebate),
    )


def demonstrate_billing(ledger, description, adjustment):
    print("\n" + "=" * 70)
    print(f"{description['details']['category']} Flow: {description['name']}")
    print("=" * 70)

    print("\n[Step 1] Admitting patient...")
    record = ledger.admit(description)
    print(f"SUCCESS: Patient id {record.patient_id}")

    print(f"\n[Step 2] Billing with {getattr(adjustment, '__name__', adjustment)}...")
    statement = ledger.generate_bill(record.patient_id, adjustment)
    print(f"  Treatment cost: {format_money(statement.base_amount)}")
    if statement.note is not None:
        print(f"  {statement.note.label}: {format_money(statement.note.amount)}")
    print(f"SUCCESS: Final bill {format_money(statement.final_amount)}")


def demonstrate_rejection(ledger):
    print("\n" + "=" * 70)
    print("Rejected Admission: severity out of range")
    print("=" * 70)

    before = len(ledger)
    try:
        ledger.admit({"name": "Vikram", "age": 45, "details": {"category": "Emergency", "severity": 7}})
    except ValidationError as e:
        for detail in e.details:
            print(f"  ERROR: {detail['field']}: {detail['message']}")
    print(f"  Ledger size unchanged: {len(ledger) == before}")


def main():
    audit_logger = EventAuditLogger(session_id="example")
    ledger = create_ledger(sink=lambda line: print(f"  {line}"), audit_logger=audit_logger)

    demonstrate_billing(
        ledger,
        {"name": "Asha", "age": 30, "details": {"category": "Regular", "ailment": "fever"}},
        "insurance",
    )
    demonstrate_billing(
        ledger,
        {"name": "Raj", "age": 60, "details": {"category": "ICU", "days_in_icu": 3, "ventilator_required": True}},
        "government_scheme",
    )
    demonstrate_billing(
        ledger,
        {"name": "Meera", "age": 52, "details": {"category": "Emergency", "emergency_type": "Cardiac", "severity": 5}},
        loyalty_rebate,
    )
    demonstrate_rejection(ledger)

    print("\n" + "=" * 70)
    print(f"Audit Trail ({audit_logger.get_log_count()} events)")
    print("=" * 70)
    for entry in audit_logger.get_logs():
        print(f"  {entry['event_kind']:<15} patient {entry['patient_id']}  {entry['timestamp']}")


if __name__ == "__main__":
    main()
