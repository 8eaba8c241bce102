from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provider, inject
from fastapi import Depends

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.exception.exceptions import NotFoundError
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.domain.entity.session_detail import SessionDetail


class GetSessionUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provider[Container.unit_of_work]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, user_id: UUID, session_id: UUID) -> SessionDetail:
        """Session detail, visible to its mentor and mentee only"""
        async with self.uow_factory() as uow:
            detail = await uow.session_repo.get_detail(session_id=session_id)

        if not detail:
            raise NotFoundError('Session not found')

        detail.session.ensure_participant(user_id)
        return detail
