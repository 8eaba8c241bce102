from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.interface.i_session_command_repo import ISessionCommandRepo
from slot_booking.service.booking.domain.entity.mentor_service_entity import MentorService
from slot_booking.service.booking.domain.entity.session_detail import Participant, SessionDetail
from slot_booking.service.booking.domain.entity.session_entity import Session
from slot_booking.service.booking.domain.entity.slot_entity import Slot
from slot_booking.service.booking.domain.enum.session_status import SessionStatus
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus
from slot_booking.service.booking.driven_adapter.model.mentor_service_model import (
    MentorServiceModel,
)
from slot_booking.service.booking.driven_adapter.model.session_model import SessionModel
from slot_booking.service.booking.driven_adapter.model.slot_model import SlotModel
from slot_booking.service.booking.driven_adapter.model.user_model import UserModel


class SessionCommandRepoImpl(ISessionCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_session: SessionModel) -> Session:
        return Session(
            id=db_session.id,
            mentor_id=db_session.mentor_id,
            mentee_id=db_session.mentee_id,
            slot_id=db_session.slot_id,
            service_id=db_session.service_id,
            start_at=db_session.start_at,
            end_at=db_session.end_at,
            status=SessionStatus(db_session.status),
            cancel_reason=db_session.cancel_reason,
            canceled_at=db_session.canceled_at,
            created_at=db_session.created_at,
            updated_at=db_session.updated_at,
        )

    @staticmethod
    def _to_participant(db_user: Optional[UserModel]) -> Optional[Participant]:
        if db_user is None:
            return None
        return Participant(id=db_user.id, full_name=db_user.full_name, email=db_user.email)

    @Logger.io
    async def create(self, *, session: Session) -> Session:
        db_session = SessionModel(
            id=session.id,
            mentor_id=session.mentor_id,
            mentee_id=session.mentee_id,
            slot_id=session.slot_id,
            service_id=session.service_id,
            start_at=session.start_at,
            end_at=session.end_at,
            status=session.status.value,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )
        self.session.add(db_session)
        await self.session.flush()
        await self.session.refresh(db_session)

        return SessionCommandRepoImpl._to_entity(db_session)

    @Logger.io
    async def get_by_id(self, *, session_id: UUID, for_update: bool = False) -> Optional[Session]:
        stmt = select(SessionModel).where(SessionModel.id == session_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        db_session = result.scalar_one_or_none()
        return SessionCommandRepoImpl._to_entity(db_session) if db_session else None

    @Logger.io
    async def update(self, *, session: Session) -> Session:
        stmt = (
            sql_update(SessionModel)
            .where(SessionModel.id == session.id)
            .values(
                status=session.status.value,
                cancel_reason=session.cancel_reason,
                canceled_at=session.canceled_at,
                updated_at=session.updated_at,
            )
            .returning(SessionModel)
        )

        result = await self.session.execute(stmt)
        db_session = result.scalar_one_or_none()

        if not db_session:
            raise ValueError(f'Session with id {session.id} not found')

        return SessionCommandRepoImpl._to_entity(db_session)

    @Logger.io
    async def get_detail(self, *, session_id: UUID) -> Optional[SessionDetail]:
        db_session = await self.session.get(SessionModel, session_id, populate_existing=True)
        if db_session is None:
            return None

        db_slot = await self.session.get(SlotModel, db_session.slot_id)
        if db_slot is None:
            return None

        db_service = await self.session.get(MentorServiceModel, db_session.service_id)
        db_mentor = await self.session.get(UserModel, db_session.mentor_id)
        db_mentee = await self.session.get(UserModel, db_session.mentee_id)

        return SessionDetail(
            session=SessionCommandRepoImpl._to_entity(db_session),
            slot=Slot(
                id=db_slot.id,
                mentor_id=db_slot.mentor_id,
                start_at=db_slot.start_at,
                end_at=db_slot.end_at,
                status=SlotStatus(db_slot.status),
                held_until=db_slot.held_until,
            ),
            service=MentorService(
                id=db_service.id,
                mentor_id=db_service.mentor_id,
                title=db_service.title,
                price_amount=db_service.price_amount,
                currency=db_service.currency,
                duration_min=db_service.duration_min,
                is_active=db_service.is_active,
            )
            if db_service
            else None,
            mentor=SessionCommandRepoImpl._to_participant(db_mentor),
            mentee=SessionCommandRepoImpl._to_participant(db_mentee),
        )

    @Logger.io
    async def get_requested_by_slot(self, *, slot_id: UUID) -> Optional[Session]:
        result = await self.session.execute(
            select(SessionModel)
            .where(
                SessionModel.slot_id == slot_id,
                SessionModel.status == SessionStatus.REQUESTED.value,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        db_session = result.scalars().first()
        return SessionCommandRepoImpl._to_entity(db_session) if db_session else None

    @Logger.io
    async def list_stale_requested(
        self, *, mentor_id: UUID, created_before: datetime
    ) -> List[Session]:
        result = await self.session.execute(
            select(SessionModel)
            .where(
                SessionModel.mentor_id == mentor_id,
                SessionModel.status == SessionStatus.REQUESTED.value,
                SessionModel.created_at <= created_before,
            )
            .order_by(SessionModel.created_at)
        )
        return [SessionCommandRepoImpl._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def cancel_requested(
        self, *, session_ids: List[UUID], reason: str, canceled_at: datetime
    ) -> int:
        if not session_ids:
            return 0

        stmt = (
            sql_update(SessionModel)
            .where(
                SessionModel.id.in_(session_ids),
                SessionModel.status == SessionStatus.REQUESTED.value,
            )
            .values(
                status=SessionStatus.CANCELED.value,
                cancel_reason=reason,
                canceled_at=canceled_at,
                updated_at=canceled_at,
            )
            .returning(SessionModel.id)
        )
        result = await self.session.execute(stmt)
        return len(result.all())

    @Logger.io
    async def list_by_mentor(self, *, mentor_id: UUID) -> List[Session]:
        result = await self.session.execute(
            select(SessionModel)
            .where(SessionModel.mentor_id == mentor_id)
            .order_by(SessionModel.start_at.desc())
        )
        return [SessionCommandRepoImpl._to_entity(row) for row in result.scalars().all()]
