from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from slot_booking.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from slot_booking.service.booking.driven_adapter.repo.slot_command_repo_impl import (
    SlotCommandRepoImpl,
)


@pytest.fixture
def db_session():
    return AsyncMock()


@pytest.fixture
def closed():
    return []


@pytest.fixture
def uow(db_session, closed) -> SqlAlchemyUnitOfWork:
    @asynccontextmanager
    async def session_factory():
        try:
            yield db_session
        finally:
            closed.append(True)

    return SqlAlchemyUnitOfWork(session_factory=session_factory)


class TestSqlAlchemyUnitOfWork:
    @pytest.mark.asyncio
    async def test_repos_share_the_session(self, uow, db_session):
        async with uow:
            assert isinstance(uow.slot_repo, SlotCommandRepoImpl)
            assert uow.slot_repo.session is db_session
            assert uow.session_repo.session is db_session

    @pytest.mark.asyncio
    async def test_commit_then_exit(self, uow, db_session, closed):
        async with uow:
            await uow.commit()

        db_session.commit.assert_awaited_once()
        assert closed == [True]
        assert uow.session is None

    @pytest.mark.asyncio
    async def test_exit_without_commit_rolls_back(self, uow, db_session, closed):
        async with uow:
            pass

        db_session.commit.assert_not_awaited()
        db_session.rollback.assert_awaited_once()
        assert closed == [True]

    @pytest.mark.asyncio
    async def test_error_inside_block_rolls_back_and_propagates(self, uow, db_session, closed):
        with pytest.raises(RuntimeError):
            async with uow:
                raise RuntimeError('boom')

        db_session.rollback.assert_awaited_once()
        assert closed == [True]
