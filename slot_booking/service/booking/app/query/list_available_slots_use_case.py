from datetime import datetime, timedelta
from typing import Callable, List, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provider, inject
from fastapi import Depends

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.exception.exceptions import DomainError
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.command.release_expired_holds_use_case import (
    ReleaseExpiredHoldsUseCase,
)
from slot_booking.service.booking.domain.booking_policy import as_utc, utc_now
from slot_booking.service.booking.domain.entity.slot_entity import Slot


DEFAULT_WINDOW = timedelta(days=14)


class ListAvailableSlotsUseCase:
    """Free slots of a mentor; lapsed holds for that mentor are reclaimed first"""

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        release_expired_holds: ReleaseExpiredHoldsUseCase,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.release_expired_holds = release_expired_holds
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provider[Container.unit_of_work]),
        release_expired_holds: ReleaseExpiredHoldsUseCase = Depends(
            ReleaseExpiredHoldsUseCase.depends
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, release_expired_holds=release_expired_holds)

    @Logger.io
    async def execute(
        self,
        *,
        mentor_id: UUID,
        start_from: Optional[datetime] = None,
        start_to: Optional[datetime] = None,
    ) -> List[Slot]:
        await self.release_expired_holds.execute(mentor_id=mentor_id)

        start_from = as_utc(start_from) if start_from else self.clock()
        start_to = as_utc(start_to) if start_to else start_from + DEFAULT_WINDOW
        if start_to < start_from:
            raise DomainError('start_to must not be earlier than start_from')

        async with self.uow_factory() as uow:
            return await uow.slot_repo.list_free(
                mentor_id=mentor_id, start_from=start_from, start_to=start_to
            )
