from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.interface.i_slot_command_repo import ISlotCommandRepo
from slot_booking.service.booking.domain.entity.slot_entity import Slot
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus
from slot_booking.service.booking.driven_adapter.model.slot_model import SlotModel


class SlotCommandRepoImpl(ISlotCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_slot: SlotModel) -> Slot:
        return Slot(
            id=db_slot.id,
            mentor_id=db_slot.mentor_id,
            start_at=db_slot.start_at,
            end_at=db_slot.end_at,
            status=SlotStatus(db_slot.status),
            held_until=db_slot.held_until,
        )

    @Logger.io
    async def get_for_update(self, *, slot_id: UUID) -> Optional[Slot]:
        result = await self.session.execute(
            select(SlotModel)
            .where(SlotModel.id == slot_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        db_slot = result.scalar_one_or_none()
        return SlotCommandRepoImpl._to_entity(db_slot) if db_slot else None

    @Logger.io
    async def update(self, *, slot: Slot) -> Slot:
        stmt = (
            sql_update(SlotModel)
            .where(SlotModel.id == slot.id)
            .values(status=slot.status.value, held_until=slot.held_until)
            .returning(SlotModel)
        )

        result = await self.session.execute(stmt)
        db_slot = result.scalar_one_or_none()

        if not db_slot:
            raise ValueError(f'Slot with id {slot.id} not found')

        return SlotCommandRepoImpl._to_entity(db_slot)

    @Logger.io
    async def list_expired_holds(
        self, *, now: datetime, mentor_id: Optional[UUID] = None
    ) -> List[Slot]:
        stmt = select(SlotModel).where(
            SlotModel.status == SlotStatus.HELD.value,
            SlotModel.held_until < now,
        )
        if mentor_id is not None:
            stmt = stmt.where(SlotModel.mentor_id == mentor_id)

        result = await self.session.execute(stmt.order_by(SlotModel.held_until))
        return [SlotCommandRepoImpl._to_entity(db_slot) for db_slot in result.scalars().all()]

    @Logger.io
    async def release_held(self, *, slot_ids: List[UUID]) -> int:
        if not slot_ids:
            return 0

        stmt = (
            sql_update(SlotModel)
            .where(SlotModel.id.in_(slot_ids), SlotModel.status == SlotStatus.HELD.value)
            .values(status=SlotStatus.FREE.value, held_until=None)
            .returning(SlotModel.id)
        )
        result = await self.session.execute(stmt)
        return len(result.all())

    @Logger.io
    async def list_free(
        self, *, mentor_id: UUID, start_from: datetime, start_to: datetime
    ) -> List[Slot]:
        result = await self.session.execute(
            select(SlotModel)
            .where(
                SlotModel.mentor_id == mentor_id,
                SlotModel.status == SlotStatus.FREE.value,
                SlotModel.start_at >= start_from,
                SlotModel.start_at <= start_to,
            )
            .order_by(SlotModel.start_at)
        )
        return [SlotCommandRepoImpl._to_entity(db_slot) for db_slot in result.scalars().all()]
