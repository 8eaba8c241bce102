from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from slot_booking.platform.exception.exceptions import ConflictError
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus


@attrs.define
class Slot:
    """
    A mentor-owned time interval.

    Invariant: `held_until` is set if and only if status is HELD.
    """

    id: UUID
    mentor_id: UUID
    start_at: datetime
    end_at: datetime
    status: SlotStatus = SlotStatus.FREE
    held_until: Optional[datetime] = None

    def is_hold_live(self, *, now: datetime) -> bool:
        return (
            self.status == SlotStatus.HELD
            and self.held_until is not None
            and self.held_until > now
        )

    def is_hold_expired(self, *, now: datetime) -> bool:
        return self.status == SlotStatus.HELD and not self.is_hold_live(now=now)

    def ensure_holdable(self, *, now: datetime) -> None:
        """
        Raises:
            ConflictError: slot is booked, or held by someone with a live hold
        """
        if self.status == SlotStatus.BOOKED:
            raise ConflictError('Slot is already booked')
        if self.is_hold_live(now=now):
            raise ConflictError('Slot is currently held by another user')

    def hold(self, *, until: datetime) -> 'Slot':
        return attrs.evolve(self, status=SlotStatus.HELD, held_until=until)

    def book(self) -> 'Slot':
        return attrs.evolve(self, status=SlotStatus.BOOKED, held_until=None)

    def release(self) -> 'Slot':
        return attrs.evolve(self, status=SlotStatus.FREE, held_until=None)
