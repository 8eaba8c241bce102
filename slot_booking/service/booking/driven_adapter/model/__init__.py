"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from slot_booking.service.booking.driven_adapter.model.mentor_service_model import (
    MentorServiceModel,
)
from slot_booking.service.booking.driven_adapter.model.payment_model import PaymentModel
from slot_booking.service.booking.driven_adapter.model.session_model import SessionModel
from slot_booking.service.booking.driven_adapter.model.slot_model import SlotModel
from slot_booking.service.booking.driven_adapter.model.user_model import UserModel

__all__ = [
    'MentorServiceModel',
    'PaymentModel',
    'SessionModel',
    'SlotModel',
    'UserModel',
]
