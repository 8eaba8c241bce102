from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from slot_booking.service.booking.domain.entity.payment_entity import Payment


class IPaymentQueryRepo(ABC):
    @abstractmethod
    async def get_by_session_id(self, *, session_id: UUID) -> Optional[Payment]:
        pass
