"""Patient Record Schema Definitions.

This module defines the canonical data models for admitted patients. A
patient's category-specific attributes live in a closed tagged variant
(``details``) discriminated by ``category``; no record ever changes category.

Validation Impact:
    - Range checks (age, severity, ICU days) run before a record exists
    - Pydantic errors are translated into the domain ValidationError so
      collaborators never depend on the validation library directly
    - Records are frozen once constructed

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Follows Hexagonal Architecture: Domain Core is isolated from the CLI
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError as PydanticValidationError

from carebill.domain.enums import PatientCategory
from carebill.domain.ports import ValidationError

MIN_SEVERITY = 1
MAX_SEVERITY = 5


class RegularDetails(BaseModel):
    """Attributes of a regular (ward) admission.

    Parameters:
        ailment: Free-text description of the presenting complaint
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: Literal["Regular"] = "Regular"
    ailment: str = Field("", description="Presenting complaint (free text)")


class EmergencyDetails(BaseModel):
    """Attributes of an emergency admission.

    Parameters:
        emergency_type: Free-text description (e.g., "Trauma", "Cardiac")
        severity: Triage severity from 1 (lowest) to 5 (highest)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: Literal["Emergency"] = "Emergency"
    emergency_type: str = Field("", description="Kind of emergency (free text)")
    severity: int = Field(..., ge=MIN_SEVERITY, le=MAX_SEVERITY, strict=True, description="Triage severity (1-5)")


class ICUDetails(BaseModel):
    """Attributes of an intensive care admission.

    Parameters:
        days_in_icu: Number of days in the ICU (at least 1)
        ventilator_required: Whether the patient needs mechanical ventilation
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: Literal["ICU"] = "ICU"
    days_in_icu: int = Field(..., ge=1, strict=True, description="Days in ICU (>= 1)")
    ventilator_required: bool = Field(False, description="Ventilator support required")


PatientDetails = Annotated[
    Union[RegularDetails, EmergencyDetails, ICUDetails],
    Field(discriminator="category"),
]


class PatientDescription(BaseModel):
    """Collaborator-supplied description of a patient to admit.

    Parameters:
        name: Patient name (must not be blank)
        age: Age in years (>= 0)
        details: Category-specific attributes
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Patient name")
    age: int = Field(..., ge=0, strict=True, description="Age in years")
    details: PatientDetails

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names and strip surrounding whitespace."""
        v_stripped = v.strip()
        if not v_stripped:
            raise ValueError("name cannot be empty or whitespace only")
        return v_stripped

    @property
    def category(self) -> PatientCategory:
        """Admission category, derived from the details variant."""
        return PatientCategory(self.details.category)


class PatientRecord(PatientDescription):
    """An admitted patient.

    Created only by the AdmissionLedger. The identifier and admission
    timestamp are assigned once and never change.

    Parameters:
        patient_id: Ledger-assigned identifier (unique within the process)
        admitted_at: Admission timestamp (UTC)
    """

    patient_id: int = Field(..., ge=1, strict=True, description="Ledger-assigned identifier")
    admitted_at: datetime = Field(..., description="Admission timestamp")


def _format_errors(exc: PydanticValidationError) -> list[dict[str, Any]]:
    details = []
    for error in exc.errors():
        # Drop the discriminator tag from union locations: details.Emergency.severity -> details.severity
        loc = [str(part) for part in error["loc"] if str(part) not in {c.value for c in PatientCategory}]
        details.append({"field": ".".join(loc), "message": error["msg"]})
    return details


def validate_description(description: Union[PatientDescription, Mapping[str, Any]]) -> PatientDescription:
    """Validate raw admission input into a PatientDescription.

    Parameters:
        description: A PatientDescription (already validated) or a plain mapping
            with ``name``, ``age`` and ``details`` (``details.category`` selects
            the variant)

    Returns:
        PatientDescription: The validated description

    Raises:
        ValidationError: If any field is missing or out of range
    """
    if isinstance(description, PatientDescription):
        return description

    try:
        return PatientDescription.model_validate(description)
    except PydanticValidationError as e:
        details = _format_errors(e)
        summary = "; ".join(f"{d['field'] or 'input'}: {d['message']}" for d in details)
        raise ValidationError(f"Invalid patient description: {summary}", details=details) from e
