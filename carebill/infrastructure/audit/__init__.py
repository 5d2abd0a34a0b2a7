"""Audit infrastructure components.

This package provides the observers registered on the notification bus at
start-up: the department log observers and the event audit trail.
"""

from carebill.infrastructure.audit.department_observers import (
    DepartmentObserver,
    register_departments,
    standard_departments,
)
from carebill.infrastructure.audit.event_audit_logger import EventAuditLogger

__all__ = ['DepartmentObserver', 'EventAuditLogger', 'register_departments', 'standard_departments']
