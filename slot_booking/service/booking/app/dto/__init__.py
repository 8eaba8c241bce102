"""Application layer DTOs"""

from slot_booking.service.booking.app.dto.hold_slot_result import HoldSlotResult
from slot_booking.service.booking.app.dto.hold_status import HoldStatus
from slot_booking.service.booking.app.dto.release_expired_holds_result import (
    ReleaseExpiredHoldsResult,
)

__all__ = [
    'HoldSlotResult',
    'HoldStatus',
    'ReleaseExpiredHoldsResult',
]
