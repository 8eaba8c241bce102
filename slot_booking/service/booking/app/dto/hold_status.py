from datetime import datetime

import attrs

from slot_booking.service.booking.domain.entity.session_entity import Session


@attrs.define(frozen=True)
class HoldStatus:
    """Remaining hold window used before a payment intent is created"""

    session: Session
    hold_expires_at: datetime
    remaining_seconds: int
