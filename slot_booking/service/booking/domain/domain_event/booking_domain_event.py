"""
Booking domain events

Emitted after a unit of work commits. Delivery (chat gateway push, email
queue) happens outside the engine and never blocks the transaction.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar, Optional
from uuid import UUID

import attrs

from slot_booking.service.booking.domain.booking_policy import utc_now


class BookingEventType(StrEnum):
    SLOT_HELD = 'slot_held'
    SESSION_CONFIRMED = 'session_confirmed'
    SESSION_CANCELED = 'session_canceled'


def _to_json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


@attrs.define(frozen=True, kw_only=True)
class BookingDomainEvent:
    event_type: ClassVar[BookingEventType]

    session_id: UUID
    slot_id: UUID
    mentor_id: UUID
    mentee_id: UUID
    occurred_at: datetime = attrs.field(factory=utc_now)

    def to_payload(self) -> dict[str, Any]:
        payload = {name: _to_json_value(value) for name, value in attrs.asdict(self).items()}
        return {'event_type': self.event_type.value, **payload}


@attrs.define(frozen=True, kw_only=True)
class SlotHeldEvent(BookingDomainEvent):
    event_type: ClassVar[BookingEventType] = BookingEventType.SLOT_HELD

    hold_expires_at: datetime


@attrs.define(frozen=True, kw_only=True)
class SessionConfirmedEvent(BookingDomainEvent):
    event_type: ClassVar[BookingEventType] = BookingEventType.SESSION_CONFIRMED


@attrs.define(frozen=True, kw_only=True)
class SessionCanceledEvent(BookingDomainEvent):
    event_type: ClassVar[BookingEventType] = BookingEventType.SESSION_CANCELED

    canceled_by: Optional[UUID] = None
    reason: Optional[str] = None
