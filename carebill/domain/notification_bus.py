"""Notification Bus - Typed Publish/Subscribe.

This module fans events out to the observers registered for their kind.
Publication is synchronous, on the caller's thread, in subscription order.

Failure Policy:
    - With ``isolate_failures=True`` (default) an observer that raises is
      logged and skipped; the remaining observers are still notified
    - With ``isolate_failures=False`` the first observer error propagates to
      the publisher and later observers are not called
    - In both modes the publisher's own state is never rolled back

Architecture:
    - Explicit registry: EventKind -> ordered list of callables
    - The bus holds references to observers but does not own them
    - No locking; all calls happen on a single thread
"""

import logging
from typing import Callable

from carebill.domain.enums import EventKind
from carebill.domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventObserver = Callable[[DomainEvent], None]


class NotificationBus:
    """Registry of observers per event kind, with synchronous fan-out.

    Example Usage:
        ```python
        bus = NotificationBus()
        bus.subscribe(EventKind.BILLED, lambda event: print(event.final_amount))
        bus.publish(billed_event)
        ```
    """

    def __init__(self, isolate_failures: bool = True):
        """Initialize an empty bus.

        Parameters:
            isolate_failures: Catch and log observer errors instead of propagating them
        """
        self.isolate_failures = isolate_failures
        self._observers: dict[EventKind, list[EventObserver]] = {kind: [] for kind in EventKind}

    def subscribe(self, kind: EventKind, observer: EventObserver) -> None:
        """Append an observer for an event kind.

        Existing registrations are never replaced; subscribing the same
        callable twice means it is called twice.

        Raises:
            TypeError: If observer is not callable
        """
        kind = EventKind(kind)
        if not callable(observer):
            raise TypeError(f"Observer for {kind.value} must be callable, got {type(observer).__name__}")
        self._observers[kind].append(observer)
        logger.debug(f"Subscribed {_observer_name(observer)} to {kind.value}")

    def unsubscribe(self, kind: EventKind, observer: EventObserver) -> bool:
        """Remove the first registration of an observer for an event kind.

        Returns:
            bool: True if a registration was removed
        """
        kind = EventKind(kind)
        observers = self._observers[kind]
        try:
            observers.remove(observer)
        except ValueError:
            return False
        logger.debug(f"Unsubscribed {_observer_name(observer)} from {kind.value}")
        return True

    def publish(self, event: DomainEvent) -> int:
        """Deliver an event to every observer registered for its kind.

        Parameters:
            event: Event to deliver; its class determines the kind

        Returns:
            int: Number of observers that handled the event without raising

        Raises:
            Exception: Whatever an observer raised, when failures are not isolated
        """
        # Copy so an observer that subscribes during delivery does not see this event
        observers = list(self._observers[event.kind])
        delivered = 0

        for observer in observers:
            try:
                observer(event)
                delivered += 1
            except Exception as e:
                if not self.isolate_failures:
                    raise
                logger.error(
                    f"Observer {_observer_name(observer)} failed handling {event.kind.value} "
                    f"for patient {event.patient_id}: {type(e).__name__}: {e}",
                    exc_info=True,
                    extra={"patient_id": event.patient_id, "event_kind": event.kind.value},
                )

        return delivered

    def subscriber_count(self, kind: EventKind) -> int:
        """Number of registrations for an event kind."""
        return len(self._observers[EventKind(kind)])


def _observer_name(observer: EventObserver) -> str:
    return getattr(observer, "__qualname__", None) or type(observer).__name__
