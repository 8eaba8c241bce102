from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from slot_booking.service.booking.domain.entity.mentor_service_entity import MentorService


class IMentorServiceQueryRepo(ABC):
    @abstractmethod
    async def get_active_for_mentor(
        self, *, service_id: UUID, mentor_id: UUID
    ) -> Optional[MentorService]:
        """Active service offered by `mentor_id`, or None"""
        pass
