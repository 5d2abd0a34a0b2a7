"""Application wiring for CareBill.

Builds the notification bus, registers the start-up observers and creates the
admission ledger from settings. The CLI and any embedding go through
``create_ledger`` so observers are registered exactly once per ledger.
"""

import logging
from typing import Optional

from carebill.domain.ledger import AdmissionLedger
from carebill.domain.notification_bus import NotificationBus
from carebill.infrastructure.audit import EventAuditLogger, register_departments
from carebill.infrastructure.audit.department_observers import MessageSink
from carebill.infrastructure.logging_config import setup_logging
from carebill.infrastructure.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_ledger(
    sink: Optional[MessageSink] = None,
    audit_logger: Optional[EventAuditLogger] = None,
    app_settings: Optional[Settings] = None,
) -> AdmissionLedger:
    """Create a ledger with the standard observers registered.

    Parameters:
        sink: Where department notifications are written (defaults to logging)
        audit_logger: Optional audit trail to attach to the bus
        app_settings: Settings to use (defaults to the global settings)

    Returns:
        AdmissionLedger: Ready-to-use ledger
    """
    app_settings = app_settings or default_settings

    bus = NotificationBus(isolate_failures=app_settings.isolate_observer_failures)
    departments = register_departments(bus, sink)
    if audit_logger is not None:
        audit_logger.attach(bus)

    logger.info(
        f"Ledger created with {len(departments)} department observers "
        f"(isolate_failures={bus.isolate_failures})"
    )
    return AdmissionLedger(bus=bus, tariff=app_settings.tariff)


def configure_logging(app_settings: Optional[Settings] = None, verbose: bool = False) -> None:
    app_settings = app_settings or default_settings
    setup_logging(
        use_json=app_settings.log_json,
        log_level="DEBUG" if verbose else app_settings.log_level,
    )


def main() -> None:
    """Console script entry point."""
    from carebill.cli import app

    app()


if __name__ == "__main__":
    main()
