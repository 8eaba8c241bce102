from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.interface.i_payment_query_repo import IPaymentQueryRepo
from slot_booking.service.booking.domain.entity.payment_entity import Payment
from slot_booking.service.booking.domain.enum.payment_status import PaymentStatus
from slot_booking.service.booking.driven_adapter.model.payment_model import PaymentModel


class PaymentQueryRepoImpl(IPaymentQueryRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_session_id(self, *, session_id: UUID) -> Optional[Payment]:
        # Latest attempt wins when a mentee retried payment
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.session_id == session_id)
            .order_by(PaymentModel.created_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None

        return Payment(
            id=row.id,
            session_id=row.session_id,
            mentee_id=row.mentee_id,
            provider_payment_id=row.provider_payment_id,
            status=PaymentStatus(row.status),
        )
