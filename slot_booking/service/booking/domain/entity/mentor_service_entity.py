from uuid import UUID

import attrs


@attrs.define(frozen=True)
class MentorService:
    id: UUID
    mentor_id: UUID
    title: str
    price_amount: int  # smallest currency unit
    currency: str
    duration_min: int
    is_active: bool = True
