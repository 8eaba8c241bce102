"""
Slot Repository Interface

Every state change on a slot happens after `get_for_update` has taken the
row's exclusive lock inside the current unit of work.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from slot_booking.service.booking.domain.entity.slot_entity import Slot


class ISlotCommandRepo(ABC):
    @abstractmethod
    async def get_for_update(self, *, slot_id: UUID) -> Optional[Slot]:
        """
        Read the slot row with an exclusive row lock (SELECT ... FOR UPDATE)

        The lock is held until the unit of work commits or rolls back.
        """
        pass

    @abstractmethod
    async def update(self, *, slot: Slot) -> Slot:
        """Persist status and held_until of a slot read with get_for_update"""
        pass

    @abstractmethod
    async def list_expired_holds(
        self, *, now: datetime, mentor_id: Optional[UUID] = None
    ) -> List[Slot]:
        """Slots in HELD status whose held_until < now (no lock taken)"""
        pass

    @abstractmethod
    async def release_held(self, *, slot_ids: List[UUID]) -> int:
        """
        Bulk HELD -> FREE for the given ids; slots in other states are untouched

        Returns:
            Number of slots released
        """
        pass

    @abstractmethod
    async def list_free(
        self, *, mentor_id: UUID, start_from: datetime, start_to: datetime
    ) -> List[Slot]:
        """Free slots of a mentor starting within [start_from, start_to], ordered by start"""
        pass
