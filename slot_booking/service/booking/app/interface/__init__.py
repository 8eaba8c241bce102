from slot_booking.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from slot_booking.service.booking.app.interface.i_mentor_service_query_repo import (
    IMentorServiceQueryRepo,
)
from slot_booking.service.booking.app.interface.i_payment_query_repo import IPaymentQueryRepo
from slot_booking.service.booking.app.interface.i_session_command_repo import ISessionCommandRepo
from slot_booking.service.booking.app.interface.i_slot_command_repo import ISlotCommandRepo


__all__ = [
    'IBookingEventPublisher',
    'IMentorServiceQueryRepo',
    'IPaymentQueryRepo',
    'ISessionCommandRepo',
    'ISlotCommandRepo',
]
