from slot_booking.service.booking.domain.domain_event.booking_domain_event import (
    BookingDomainEvent,
    BookingEventType,
    SessionCanceledEvent,
    SessionConfirmedEvent,
    SlotHeldEvent,
)


__all__ = [
    'BookingDomainEvent',
    'BookingEventType',
    'SessionCanceledEvent',
    'SessionConfirmedEvent',
    'SlotHeldEvent',
]
