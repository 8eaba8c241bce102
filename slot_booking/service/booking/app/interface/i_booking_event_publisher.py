from abc import ABC, abstractmethod

from slot_booking.service.booking.domain.domain_event.booking_domain_event import (
    BookingDomainEvent,
)


class IBookingEventPublisher(ABC):
    """
    Post-commit side effects (chat gateway push, email queue).

    `publish_nowait` schedules delivery and returns immediately; delivery
    failures are the publisher's concern and never reach the caller.
    """

    @abstractmethod
    def publish_nowait(self, *, event: BookingDomainEvent) -> None:
        pass
