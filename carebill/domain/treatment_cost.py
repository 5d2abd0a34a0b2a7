"""Treatment Cost Rules.

This module computes the base treatment cost of a patient from its category
variant. The computation is a pure function of the record's attributes and a
Tariff (the fee constants); it has no side effects and reads no external state.

Architecture:
    - Exhaustive dispatch over the closed set of detail variants; the final
      ``assert_never`` makes a type checker flag any variant added later
    - Fixed-point arithmetic only (Decimal, two places)
    - Tariff values are validated once, when the tariff is built
"""

from decimal import Decimal
from typing import Union, assert_never

from pydantic import BaseModel, ConfigDict, Field

from carebill.domain.money import Money, to_money
from carebill.domain.patient_record import (
    EmergencyDetails,
    ICUDetails,
    PatientDescription,
    RegularDetails,
)


class Tariff(BaseModel):
    """Fee constants used to price each patient category.

    Parameters:
        regular_fee: Flat fee for a regular admission
        emergency_base_fee: Base fee for an emergency admission
        per_severity_unit: Amount added per severity point (strictly positive)
        icu_daily_rate: Charge per day in the ICU
        ventilator_daily_rate: Extra charge per ICU day when a ventilator is required
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    regular_fee: Decimal = Field(Decimal("5000.00"), ge=0, decimal_places=2)
    emergency_base_fee: Decimal = Field(Decimal("15000.00"), ge=0, decimal_places=2)
    per_severity_unit: Decimal = Field(Decimal("1000.00"), gt=0, decimal_places=2)
    icu_daily_rate: Decimal = Field(Decimal("25000.00"), ge=0, decimal_places=2)
    ventilator_daily_rate: Decimal = Field(Decimal("10000.00"), ge=0, decimal_places=2)


DEFAULT_TARIFF = Tariff()


class CostLine(BaseModel):
    """One itemised line of a treatment cost."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: Decimal


def describe_cost(
    record: PatientDescription,
    tariff: Tariff = DEFAULT_TARIFF,
) -> list[CostLine]:
    """Itemise the treatment cost of a record.

    The amounts of the returned lines always sum to
    ``calculate_treatment_cost(record, tariff)``.

    Parameters:
        record: A validated patient description or admitted record
        tariff: Fee constants to apply

    Returns:
        list[CostLine]: One or more cost lines in display order

    Raises:
        AssertionError: If the record carries an unknown details variant
    """
    details: Union[RegularDetails, EmergencyDetails, ICUDetails] = record.details

    if isinstance(details, RegularDetails):
        return [CostLine(label="Consultation and ward fee", amount=to_money(tariff.regular_fee))]

    if isinstance(details, EmergencyDetails):
        return [
            CostLine(label="Emergency base fee", amount=to_money(tariff.emergency_base_fee)),
            CostLine(
                label=f"Severity surcharge ({details.severity} x {to_money(tariff.per_severity_unit)})",
                amount=to_money(tariff.per_severity_unit * details.severity),
            ),
        ]

    if isinstance(details, ICUDetails):
        lines = [
            CostLine(
                label=f"ICU stay ({details.days_in_icu} day(s) x {to_money(tariff.icu_daily_rate)})",
                amount=to_money(tariff.icu_daily_rate * details.days_in_icu),
            )
        ]
        if details.ventilator_required:
            lines.append(CostLine(
                label=f"Ventilator ({details.days_in_icu} day(s) x {to_money(tariff.ventilator_daily_rate)})",
                amount=to_money(tariff.ventilator_daily_rate * details.days_in_icu),
            ))
        return lines

    assert_never(details)


def calculate_treatment_cost(
    record: PatientDescription,
    tariff: Tariff = DEFAULT_TARIFF,
) -> Money:
    """Compute the base treatment cost of a record.

    - Regular: ``regular_fee``, independent of the ailment
    - Emergency: ``emergency_base_fee + severity * per_severity_unit``
    - ICU: ``icu_daily_rate * days`` plus ``ventilator_daily_rate * days``
      when a ventilator is required

    Parameters:
        record: A validated patient description or admitted record
        tariff: Fee constants to apply

    Returns:
        Money: Non-negative base amount
    """
    return to_money(sum((line.amount for line in describe_cost(record, tariff)), Decimal("0")))
