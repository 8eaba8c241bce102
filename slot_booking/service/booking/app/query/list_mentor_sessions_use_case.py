from typing import List, Self
from uuid import UUID

from dependency_injector.wiring import Provider, inject
from fastapi import Depends

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.command.auto_cancel_stale_requests_use_case import (
    AutoCancelStaleRequestsUseCase,
)
from slot_booking.service.booking.domain.entity.session_entity import Session


class ListMentorSessionsUseCase:
    """Mentor-side session list; requests the mentor ignored too long are canceled first"""

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        auto_cancel_stale_requests: AutoCancelStaleRequestsUseCase,
    ) -> None:
        self.uow_factory = uow_factory
        self.auto_cancel_stale_requests = auto_cancel_stale_requests

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provider[Container.unit_of_work]),
        auto_cancel_stale_requests: AutoCancelStaleRequestsUseCase = Depends(
            AutoCancelStaleRequestsUseCase.depends
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, auto_cancel_stale_requests=auto_cancel_stale_requests)

    @Logger.io
    async def execute(self, *, mentor_id: UUID) -> List[Session]:
        await self.auto_cancel_stale_requests.execute(mentor_id=mentor_id)

        async with self.uow_factory() as uow:
            return await uow.session_repo.list_by_mentor(mentor_id=mentor_id)
