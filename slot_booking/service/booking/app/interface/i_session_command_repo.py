from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from slot_booking.service.booking.domain.entity.session_detail import SessionDetail
from slot_booking.service.booking.domain.entity.session_entity import Session


class ISessionCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, session: Session) -> Session:
        pass

    @abstractmethod
    async def get_by_id(self, *, session_id: UUID, for_update: bool = False) -> Optional[Session]:
        """
        Args:
            for_update: take the session row lock; callers lock the slot row first
        """
        pass

    @abstractmethod
    async def update(self, *, session: Session) -> Session:
        pass

    @abstractmethod
    async def get_detail(self, *, session_id: UUID) -> Optional[SessionDetail]:
        """Session with mentor, mentee, service and slot nested in"""
        pass

    @abstractmethod
    async def get_requested_by_slot(self, *, slot_id: UUID) -> Optional[Session]:
        """The slot's session still waiting in REQUESTED status, locked for update"""
        pass

    @abstractmethod
    async def list_stale_requested(
        self, *, mentor_id: UUID, created_before: datetime
    ) -> List[Session]:
        """REQUESTED sessions of a mentor created at or before `created_before`"""
        pass

    @abstractmethod
    async def cancel_requested(
        self, *, session_ids: List[UUID], reason: str, canceled_at: datetime
    ) -> int:
        """
        Bulk REQUESTED -> CANCELED; sessions that moved on meanwhile are untouched

        Returns:
            Number of sessions canceled
        """
        pass

    @abstractmethod
    async def list_by_mentor(self, *, mentor_id: UUID) -> List[Session]:
        """All sessions of a mentor, newest start first"""
        pass
