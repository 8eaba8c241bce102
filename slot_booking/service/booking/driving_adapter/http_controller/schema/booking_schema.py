from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from slot_booking.service.booking.app.dto.hold_slot_result import HoldSlotResult
from slot_booking.service.booking.app.dto.hold_status import HoldStatus
from slot_booking.service.booking.domain.entity.mentor_service_entity import MentorService
from slot_booking.service.booking.domain.entity.session_detail import Participant, SessionDetail
from slot_booking.service.booking.domain.entity.session_entity import Session
from slot_booking.service.booking.domain.entity.slot_entity import Slot


# ============================ Requests ============================


class HoldSlotRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'slot_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'service_id': '01936d8f-5e73-7c4e-a9c5-fedcba987654',
            }
        },
    }

    slot_id: UUID
    service_id: UUID


class ConfirmSessionRequest(BaseModel):
    session_id: UUID
    payment_intent_id: Optional[str] = None


class CancelSessionRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)


# ============================ Responses ============================


class SlotResponse(BaseModel):
    id: UUID
    mentor_id: UUID
    start_at: datetime
    end_at: datetime
    status: str
    held_until: Optional[datetime] = None

    @classmethod
    def from_entity(cls, slot: Slot) -> 'SlotResponse':
        return cls(
            id=slot.id,
            mentor_id=slot.mentor_id,
            start_at=slot.start_at,
            end_at=slot.end_at,
            status=slot.status.value,
            held_until=slot.held_until,
        )


class SessionResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'mentor_id': '01936d8f-0000-7000-8000-000000000001',
                'mentee_id': '01936d8f-0000-7000-8000-000000000002',
                'slot_id': '01936d8f-0000-7000-8000-000000000003',
                'service_id': '01936d8f-0000-7000-8000-000000000004',
                'start_at': '2026-01-10T10:00:00Z',
                'end_at': '2026-01-10T11:00:00Z',
                'status': 'requested',
                'cancel_reason': None,
                'canceled_at': None,
            }
        },
    }

    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    slot_id: UUID
    service_id: UUID
    start_at: datetime
    end_at: datetime
    status: str
    cancel_reason: Optional[str] = None
    canceled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, session: Session) -> 'SessionResponse':
        return cls(
            id=session.id,
            mentor_id=session.mentor_id,
            mentee_id=session.mentee_id,
            slot_id=session.slot_id,
            service_id=session.service_id,
            start_at=session.start_at,
            end_at=session.end_at,
            status=session.status.value,
            cancel_reason=session.cancel_reason,
            canceled_at=session.canceled_at,
            created_at=session.created_at,
        )


class HoldSlotResponse(BaseModel):
    session: SessionResponse
    hold_expires_at: datetime
    hold_duration_minutes: int

    @classmethod
    def from_result(cls, result: HoldSlotResult) -> 'HoldSlotResponse':
        return cls(
            session=SessionResponse.from_entity(result.session),
            hold_expires_at=result.hold_expires_at,
            hold_duration_minutes=result.hold_duration_minutes,
        )


class ParticipantResponse(BaseModel):
    id: UUID
    full_name: str
    email: Optional[str] = None


class ServiceSummaryResponse(BaseModel):
    id: UUID
    title: str
    price_amount: int
    currency: str
    duration_min: int


def _participant(participant: Optional[Participant]) -> Optional[ParticipantResponse]:
    if participant is None:
        return None
    return ParticipantResponse(
        id=participant.id, full_name=participant.full_name, email=participant.email
    )


def _service(service: Optional[MentorService]) -> Optional[ServiceSummaryResponse]:
    if service is None:
        return None
    return ServiceSummaryResponse(
        id=service.id,
        title=service.title,
        price_amount=service.price_amount,
        currency=service.currency,
        duration_min=service.duration_min,
    )


class SessionDetailResponse(SessionResponse):
    slot: SlotResponse
    service: Optional[ServiceSummaryResponse] = None
    mentor: Optional[ParticipantResponse] = None
    mentee: Optional[ParticipantResponse] = None

    @classmethod
    def from_detail(cls, detail: SessionDetail) -> 'SessionDetailResponse':
        return cls(
            **SessionResponse.from_entity(detail.session).model_dump(),
            slot=SlotResponse.from_entity(detail.slot),
            service=_service(detail.service),
            mentor=_participant(detail.mentor),
            mentee=_participant(detail.mentee),
        )


class HoldStatusResponse(BaseModel):
    session_id: UUID
    hold_expires_at: datetime
    remaining_seconds: int

    @classmethod
    def from_status(cls, hold_status: HoldStatus) -> 'HoldStatusResponse':
        return cls(
            session_id=hold_status.session.id,
            hold_expires_at=hold_status.hold_expires_at,
            remaining_seconds=hold_status.remaining_seconds,
        )


class ReleaseExpiredHoldsResponse(BaseModel):
    released: int
