"""Domain Ports - Result Type and Error Contracts.

This module defines the contracts the domain core exposes to its collaborators
(the CLI, tests, any future embedding): a Result type for callers that prefer
explicit success/failure values, and the exception hierarchy raised by the
ledger.

Architecture:
    - Pure definitions with zero infrastructure dependencies
    - Collaborators may either catch CareBillError subclasses or use the
      Result-returning variants of the ledger operations
    - No error kind is fatal to the process; all are recoverable at the boundary
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

T = TypeVar('T')


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class CareBillError(Exception):
    """Base exception for all admission and billing errors."""

    def context(self) -> dict[str, Any]:
        """Structured detail carried by the error (empty for the base class)."""
        return {}


class ValidationError(CareBillError):
    """Raised when a patient description fails validation.

    Nothing is appended to the ledger and no event is published when this
    error is raised.

    Attributes:
        details: List of field errors, each a dict with 'field' and 'message'
    """

    def __init__(self, message: str, details: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details or []

    def context(self) -> dict[str, Any]:
        return {"details": self.details}


class NotFoundError(CareBillError):
    """Raised when a patient identifier does not reference an admitted record.

    Attributes:
        patient_id: The identifier that was looked up
    """

    def __init__(self, message: str, patient_id: Optional[int] = None):
        super().__init__(message)
        self.patient_id = patient_id

    def context(self) -> dict[str, Any]:
        return {"patient_id": self.patient_id}


class UnknownAdjustmentError(CareBillError, ValueError):
    """Raised when a billing adjustment is requested by an unregistered name.

    Attributes:
        name: The name that was requested
    """

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name

    def context(self) -> dict[str, Any]:
        return {"name": self.name}


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a ledger operation, for callers that do not want exceptions.

    Attributes:
        success: Whether the operation completed
        value: Admitted record or final amount (success only)
        error: Error message (failure only)
        error_type: Error class name, e.g. "ValidationError" or "NotFoundError"
        error_details: The error's structured context (field errors, patient_id, ...)

    Example:
        ```python
        result = ledger.try_bill(7, "insurance")
        if result.is_failure():
            print(result.error_type, result.error_details)  # NotFoundError {'patient_id': 7}
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        return cls(success=True, value=value)

    @classmethod
    def failure_result(cls, error: CareBillError) -> 'Result[T]':
        """Build a failure from a domain error, copying its message, class name and context."""
        return cls(
            success=False,
            error=str(error),
            error_type=type(error).__name__,
            error_details=error.context(),
        )

    def is_success(self) -> bool:
        return self.success

    def is_failure(self) -> bool:
        return not self.success
