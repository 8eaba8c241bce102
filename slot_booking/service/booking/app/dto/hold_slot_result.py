"""Hold slot result DTO."""

from datetime import datetime

import attrs

from slot_booking.service.booking.domain.booking_policy import HOLD_DURATION_MINUTES
from slot_booking.service.booking.domain.entity.session_entity import Session


@attrs.define(frozen=True)
class HoldSlotResult:
    """
    Outcome of a successful hold.

    The mentee has until `hold_expires_at` to create a payment intent and
    confirm; after that the slot is reclaimable.
    """

    session: Session
    hold_expires_at: datetime
    hold_duration_minutes: int = HOLD_DURATION_MINUTES
