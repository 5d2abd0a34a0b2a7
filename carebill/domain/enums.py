"""Domain enumerations.

Closed vocabularies shared by the domain models, the notification bus and the
CLI. Values are the strings shown to users and written to audit entries.
"""

from enum import Enum


class PatientCategory(str, Enum):
    """Admission category of a patient. Fixed for the lifetime of a record."""
    REGULAR = "Regular"
    EMERGENCY = "Emergency"
    ICU = "ICU"


class EventKind(str, Enum):
    """Kinds of events published on the notification bus."""
    ADMITTED = "Admitted"
    BILLED = "Billed"
    EMERGENCY_ALERT = "EmergencyAlert"
