from slot_booking.service.booking.domain.enum.payment_status import (
    SETTLED_PAYMENT_STATUSES,
    PaymentStatus,
)
from slot_booking.service.booking.domain.enum.session_status import (
    CANCELABLE_STATUSES,
    CONFIRMABLE_STATUSES,
    SessionStatus,
)
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus


__all__ = [
    'CANCELABLE_STATUSES',
    'CONFIRMABLE_STATUSES',
    'SETTLED_PAYMENT_STATUSES',
    'PaymentStatus',
    'SessionStatus',
    'SlotStatus',
]
