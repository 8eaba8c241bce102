"""
Unit of Work Pattern - one database transaction shared by the booking repositories

Architecture:
- UoW owns the AsyncSession lifecycle
- UoW owns commit/rollback; leaving the block without commit rolls back
- Repositories receive the shared session from the UoW
- Use cases open one UoW per transaction through an injected factory
"""

from __future__ import annotations

import abc
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from slot_booking.service.booking.app.interface.i_mentor_service_query_repo import (
        IMentorServiceQueryRepo,
    )
    from slot_booking.service.booking.app.interface.i_payment_query_repo import (
        IPaymentQueryRepo,
    )
    from slot_booking.service.booking.app.interface.i_session_command_repo import (
        ISessionCommandRepo,
    )
    from slot_booking.service.booking.app.interface.i_slot_command_repo import ISlotCommandRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the booking service

    Usage:
        async with uow_factory() as uow:
            slot = await uow.slot_repo.get_for_update(slot_id=...)
            await uow.commit()
    """

    slot_repo: ISlotCommandRepo
    session_repo: ISessionCommandRepo

    # Read-only collaborators
    mentor_service_repo: IMentorServiceQueryRepo
    payment_repo: IPaymentQueryRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Opens its own session from `session_factory` on enter and closes it on
    exit, so row locks taken with FOR UPDATE end with the block.
    """

    def __init__(
        self, *, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self._session_factory = session_factory
        self._session_cm: Optional[AbstractAsyncContextManager[AsyncSession]] = None
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self):
        from slot_booking.service.booking.driven_adapter.repo.mentor_service_query_repo_impl import (
            MentorServiceQueryRepoImpl,
        )
        from slot_booking.service.booking.driven_adapter.repo.payment_query_repo_impl import (
            PaymentQueryRepoImpl,
        )
        from slot_booking.service.booking.driven_adapter.repo.session_command_repo_impl import (
            SessionCommandRepoImpl,
        )
        from slot_booking.service.booking.driven_adapter.repo.slot_command_repo_impl import (
            SlotCommandRepoImpl,
        )

        self._session_cm = self._session_factory()
        self.session = await self._session_cm.__aenter__()

        # Repositories share the UoW session
        self.slot_repo = SlotCommandRepoImpl(session=self.session)
        self.session_repo = SessionCommandRepoImpl(session=self.session)
        self.mentor_service_repo = MentorServiceQueryRepoImpl(session=self.session)
        self.payment_repo = PaymentQueryRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args):
        try:
            await super().__aexit__(*args)
        finally:
            session_cm, self._session_cm, self.session = self._session_cm, None, None
            if session_cm is not None:
                await session_cm.__aexit__(*args)

    async def _commit(self):
        assert self.session is not None, 'commit() outside of `async with`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
