from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.interface.i_mentor_service_query_repo import (
    IMentorServiceQueryRepo,
)
from slot_booking.service.booking.domain.entity.mentor_service_entity import MentorService
from slot_booking.service.booking.driven_adapter.model.mentor_service_model import (
    MentorServiceModel,
)


class MentorServiceQueryRepoImpl(IMentorServiceQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_active_for_mentor(
        self, *, service_id: UUID, mentor_id: UUID
    ) -> Optional[MentorService]:
        result = await self.session.execute(
            select(MentorServiceModel).where(
                MentorServiceModel.id == service_id,
                MentorServiceModel.mentor_id == mentor_id,
                MentorServiceModel.is_active.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None

        return MentorService(
            id=row.id,
            mentor_id=row.mentor_id,
            title=row.title,
            price_amount=row.price_amount,
            currency=row.currency,
            duration_min=row.duration_min,
            is_active=row.is_active,
        )
