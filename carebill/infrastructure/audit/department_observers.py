"""Department Observers.

Log-style observers standing in for hospital departments. Each department
formats the events it cares about into one line and hands it to a sink: the
CLI passes a rich console printer, everything else gets the module logger.

Departments:
    - Billing Department: admissions
    - Nursing Station: admissions (prepares for the patient's category)
    - Emergency Ward: emergency alerts
    - Accounts: generated bills
"""

import logging
from typing import Callable, Dict, List, Optional

from carebill.domain.enums import EventKind
from carebill.domain.events import AdmittedEvent, BilledEvent, DomainEvent, EmergencyAlertEvent
from carebill.domain.money import format_money
from carebill.domain.notification_bus import NotificationBus

logger = logging.getLogger(__name__)

MessageSink = Callable[[str], None]


def _billing_department(event: AdmittedEvent) -> str:
    return f"Patient {event.name} admitted (id {event.patient_id})"


def _nursing_station(event: AdmittedEvent) -> str:
    return f"Prepare for {event.category.value} patient {event.name}"


def _emergency_ward(event: EmergencyAlertEvent) -> str:
    kind = f" {event.emergency_type}" if event.emergency_type else ""
    return f"Incoming{kind} emergency, severity {event.severity}/5: {event.name} (id {event.patient_id})"


def _accounts(event: BilledEvent) -> str:
    message = f"Bill of {format_money(event.final_amount)} generated for {event.name}"
    if event.note is not None:
        message += f" ({event.note.label}: {format_money(event.note.amount)})"
    return message


class DepartmentObserver:
    """A named department reacting to one or more event kinds.

    Parameters:
        department: Department name used as the message prefix
        formatters: Message formatter per event kind the department handles
        sink: Where formatted lines go (defaults to logger.info)
    """

    def __init__(
        self,
        department: str,
        formatters: Dict[EventKind, Callable[[DomainEvent], str]],
        sink: Optional[MessageSink] = None,
    ):
        self.department = department
        self.formatters = formatters
        self.sink = sink or logger.info

    def __call__(self, event: DomainEvent) -> None:
        formatter = self.formatters.get(event.kind)
        if formatter is None:
            return
        self.sink(f"[Notification] {self.department}: {formatter(event)}")

    def attach(self, bus: NotificationBus) -> None:
        for kind in self.formatters:
            bus.subscribe(kind, self)

    def __repr__(self) -> str:
        return f"DepartmentObserver({self.department!r})"


def standard_departments(sink: Optional[MessageSink] = None) -> List[DepartmentObserver]:
    """Build the standard departments, all writing to the same sink."""
    return [
        DepartmentObserver("Billing Department", {EventKind.ADMITTED: _billing_department}, sink),
        DepartmentObserver("Nursing Station", {EventKind.ADMITTED: _nursing_station}, sink),
        DepartmentObserver("Emergency Ward", {EventKind.EMERGENCY_ALERT: _emergency_ward}, sink),
        DepartmentObserver("Accounts", {EventKind.BILLED: _accounts}, sink),
    ]


def register_departments(bus: NotificationBus, sink: Optional[MessageSink] = None) -> List[DepartmentObserver]:
    """Subscribe the standard departments to a bus.

    Returns:
        The registered observers, in subscription order
    """
    departments = standard_departments(sink)
    for department in departments:
        department.attach(bus)
    return departments
