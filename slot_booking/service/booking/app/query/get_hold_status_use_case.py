from datetime import datetime
from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provider, inject
from fastapi import Depends

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.exception.exceptions import DomainError, GoneError, NotFoundError
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.dto.hold_status import HoldStatus
from slot_booking.service.booking.domain.booking_policy import HOLD_EXPIRED_MESSAGE, utc_now
from slot_booking.service.booking.domain.enum.session_status import SessionStatus
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus


class GetHoldStatusUseCase:
    """
    Remaining hold window of a REQUESTED session.

    Payment intent creation asks this first so a mentee cannot pay for a
    slot that is already reclaimable. Read-only: reclaiming is left to the
    sweep and to confirm.
    """

    def __init__(
        self, *, uow_factory: UnitOfWorkFactory, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provider[Container.unit_of_work]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, user_id: UUID, session_id: UUID) -> HoldStatus:
        async with self.uow_factory() as uow:
            detail = await uow.session_repo.get_detail(session_id=session_id)

        if not detail:
            raise NotFoundError('Session not found')

        session, slot = detail.session, detail.slot
        session.ensure_participant(user_id)

        if session.status != SessionStatus.REQUESTED or slot.status != SlotStatus.HELD:
            raise DomainError(f'Session has no active hold (status: {session.status})')

        now = self.clock()
        if not slot.is_hold_live(now=now):
            raise GoneError(HOLD_EXPIRED_MESSAGE)

        assert slot.held_until is not None
        return HoldStatus(
            session=session,
            hold_expires_at=slot.held_until,
            remaining_seconds=int((slot.held_until - now).total_seconds()),
        )
