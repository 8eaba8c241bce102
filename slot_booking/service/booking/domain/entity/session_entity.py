from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from slot_booking.platform.exception.exceptions import DomainError
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.domain.entity.slot_entity import Slot
from slot_booking.service.booking.domain.enum.session_status import (
    CANCELABLE_STATUSES,
    CONFIRMABLE_STATUSES,
    SessionStatus,
)


@attrs.define
class Session:
    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    slot_id: UUID
    service_id: UUID
    start_at: datetime
    end_at: datetime
    status: SessionStatus = SessionStatus.REQUESTED
    cancel_reason: Optional[str] = None
    canceled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def request(cls, *, slot: Slot, mentee_id: UUID, service_id: UUID, now: datetime) -> 'Session':
        """New session in REQUESTED status, times copied from the slot"""
        return cls(
            id=uuid7(),
            mentor_id=slot.mentor_id,
            mentee_id=mentee_id,
            slot_id=slot.id,
            service_id=service_id,
            start_at=slot.start_at,
            end_at=slot.end_at,
            status=SessionStatus.REQUESTED,
            created_at=now,
            updated_at=now,
        )

    def is_participant(self, user_id: UUID) -> bool:
        return user_id in (self.mentor_id, self.mentee_id)

    def ensure_participant(self, user_id: UUID) -> None:
        if not self.is_participant(user_id):
            raise DomainError('Not authorized')

    def ensure_confirmable(self) -> None:
        if self.status not in CONFIRMABLE_STATUSES:
            raise DomainError(f'Cannot confirm session with status: {self.status}')

    def ensure_cancelable(self) -> None:
        if self.status not in CANCELABLE_STATUSES:
            raise DomainError(f'Cannot cancel session with status: {self.status}')

    def confirm(self, *, now: datetime) -> 'Session':
        return attrs.evolve(self, status=SessionStatus.BOOKED, updated_at=now)

    def cancel(self, *, reason: Optional[str], now: datetime) -> 'Session':
        return attrs.evolve(
            self,
            status=SessionStatus.CANCELED,
            cancel_reason=reason,
            canceled_at=now,
            updated_at=now,
        )
