"""Billing Adjustments.

A billing adjustment turns a base treatment cost into the final payable
amount. Adjustments are pure: they read only their argument and return an
AdjustmentResult, optionally carrying an informational note (label and amount
of the discount or subsidy) for display collaborators. The note is data, not
output; nothing in this module prints.

Architecture:
    - BillingAdjustment is a single-method contract (``apply``)
    - Standard adjustments are percentage reductions looked up by name
    - Any callable ``Money -> Money`` or ``Money -> AdjustmentResult`` can be
      wrapped with ``as_adjustment`` and used wherever a named one can
    - Results are never clamped; ``0 <= final <= base`` is the common case,
      not an enforced rule
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Optional, Union

from pydantic import BaseModel, ConfigDict

from carebill.domain.money import Money, to_money
from carebill.domain.ports import UnknownAdjustmentError


class AdjustmentNote(BaseModel):
    """Informational side channel describing what an adjustment did."""

    model_config = ConfigDict(frozen=True)

    label: str
    amount: Decimal


class AdjustmentResult(BaseModel):
    """Outcome of applying an adjustment to a base amount.

    Parameters:
        final_amount: Amount payable after the adjustment
        note: Optional description of the discount/subsidy applied
    """

    model_config = ConfigDict(frozen=True)

    final_amount: Decimal
    note: Optional[AdjustmentNote] = None


class BillingAdjustment(ABC):
    """Contract for all billing adjustments.

    Subclasses set ``name`` (registry key) and ``display_name`` (menu label)
    and implement ``apply``.
    """

    name: str = "adjustment"
    display_name: str = "Adjustment"

    @abstractmethod
    def apply(self, base_amount: Money) -> AdjustmentResult:
        """Transform a base amount into an AdjustmentResult."""
        pass

    def __call__(self, base_amount: Money) -> AdjustmentResult:
        return self.apply(base_amount)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class PercentageReduction(BillingAdjustment):
    """Reduce the base amount by a fixed rate.

    The discount is rounded to the cent (half-up) and subtracted from the base,
    so ``final + discount == base`` always holds. A note is emitted only when
    a label is configured and the discount is non-zero.
    """

    def __init__(
        self,
        name: str,
        rate: Union[Decimal, str],
        display_name: Optional[str] = None,
        note_label: Optional[str] = None,
    ):
        """Initialize a percentage reduction.

        Parameters:
            name: Registry key (e.g., "insurance")
            rate: Fraction of the base amount removed, e.g. Decimal("0.30")
            display_name: Human-readable label for menus
            note_label: Label of the informational note (None disables the note)
        """
        self.name = name
        self.rate = Decimal(rate)
        self.display_name = display_name or name.replace("_", " ").title()
        self.note_label = note_label

    def apply(self, base_amount: Money) -> AdjustmentResult:
        base = to_money(base_amount)
        discount = to_money(base * self.rate)
        note = None
        if self.note_label and discount != 0:
            note = AdjustmentNote(label=self.note_label, amount=discount)
        return AdjustmentResult(final_amount=base - discount, note=note)


class CallableAdjustment(BillingAdjustment):
    """Adapt a caller-supplied function into a BillingAdjustment.

    The function may return a Money-compatible value (Decimal, int, str) or a
    full AdjustmentResult. Float results are rejected by ``to_money``.
    """

    def __init__(self, func: Callable[[Money], Union[Money, int, str, AdjustmentResult]], name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "custom")
        self.display_name = self.name.replace("_", " ").title()

    def apply(self, base_amount: Money) -> AdjustmentResult:
        outcome = self.func(to_money(base_amount))
        if isinstance(outcome, AdjustmentResult):
            return outcome
        if isinstance(outcome, (Decimal, int, str)) and not isinstance(outcome, bool):
            return AdjustmentResult(final_amount=to_money(outcome))
        raise TypeError(
            f"Adjustment '{self.name}' returned {type(outcome).__name__}; "
            "expected Decimal, int, str or AdjustmentResult"
        )


# ============================================================================
# Standard adjustments
# ============================================================================

STANDARD = PercentageReduction("standard", "0", display_name="Standard")
INSURANCE = PercentageReduction(
    "insurance", "0.30", display_name="Insurance (30% off)", note_label="Insurance Discount"
)
SENIOR_CITIZEN = PercentageReduction(
    "senior_citizen", "0.20", display_name="Senior Citizen (20% off)", note_label="Senior Citizen Discount"
)
GOVERNMENT_SCHEME = PercentageReduction(
    "government_scheme", "0.50", display_name="Government Scheme (50% off)", note_label="Government Subsidy"
)

_STANDARD_ADJUSTMENTS: dict[str, BillingAdjustment] = {
    adjustment.name: adjustment
    for adjustment in (STANDARD, INSURANCE, SENIOR_CITIZEN, GOVERNMENT_SCHEME)
}

_ALIASES = {
    "government": "government_scheme",
    "senior": "senior_citizen",
}

AdjustmentSelector = Union[str, BillingAdjustment, Callable[[Money], Union[Money, AdjustmentResult]]]


def _normalize_name(name: str) -> str:
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    return _ALIASES.get(key, key)


def available_adjustments() -> list[BillingAdjustment]:
    """Standard adjustments in menu order."""
    return list(_STANDARD_ADJUSTMENTS.values())


def get_adjustment(name: str) -> BillingAdjustment:
    """Look up a standard adjustment by name.

    Lookup is case-insensitive and treats '-', ' ' and '_' alike
    ("Senior Citizen", "senior-citizen" and "senior_citizen" are equivalent).

    Raises:
        UnknownAdjustmentError: If no standard adjustment has that name
    """
    key = _normalize_name(name)
    try:
        return _STANDARD_ADJUSTMENTS[key]
    except KeyError:
        supported = ", ".join(_STANDARD_ADJUSTMENTS)
        raise UnknownAdjustmentError(
            f"Unknown billing adjustment: {name!r}. Supported: {supported}",
            name=name,
        ) from None


def as_adjustment(selector: AdjustmentSelector, name: Optional[str] = None) -> BillingAdjustment:
    """Resolve a name, BillingAdjustment or plain function into a BillingAdjustment.

    Parameters:
        selector: Standard adjustment name, a BillingAdjustment, or a callable
        name: Name to give a wrapped callable (defaults to its ``__name__``)

    Returns:
        BillingAdjustment: Ready-to-apply adjustment

    Raises:
        UnknownAdjustmentError: If selector is an unknown name
        TypeError: If selector is none of the accepted forms
    """
    if isinstance(selector, BillingAdjustment):
        return selector
    if isinstance(selector, str):
        return get_adjustment(selector)
    if callable(selector):
        return CallableAdjustment(selector, name=name)
    raise TypeError(f"Cannot use {type(selector).__name__} as a billing adjustment")
