from typing import Optional
from uuid import UUID

import attrs

from slot_booking.service.booking.domain.entity.mentor_service_entity import MentorService
from slot_booking.service.booking.domain.entity.session_entity import Session
from slot_booking.service.booking.domain.entity.slot_entity import Slot


@attrs.define(frozen=True)
class Participant:
    id: UUID
    full_name: str
    email: Optional[str] = None


@attrs.define(frozen=True)
class SessionDetail:
    """Session with its mentor, mentee, service and slot nested in"""

    session: Session
    slot: Slot
    service: Optional[MentorService] = None
    mentor: Optional[Participant] = None
    mentee: Optional[Participant] = None
