from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from slot_booking.platform.exception.exceptions import DomainError, GoneError, NotFoundError
from slot_booking.service.booking.app.query.get_hold_status_use_case import GetHoldStatusUseCase
from slot_booking.service.booking.app.query.get_session_use_case import GetSessionUseCase
from slot_booking.service.booking.app.query.list_available_slots_use_case import (
    ListAvailableSlotsUseCase,
)
from slot_booking.service.booking.app.query.list_mentor_sessions_use_case import (
    ListMentorSessionsUseCase,
)
from slot_booking.service.booking.domain.enum.session_status import SessionStatus


@pytest.fixture
def held_session(store, slot, service, mentee_id, clock):
    store.slots[slot.id] = slot.hold(until=clock.now + timedelta(minutes=10))
    return store.add_session(
        slot=slot, mentee_id=mentee_id, service_id=service.id, created_at=clock.now
    )


class TestListAvailableSlots:
    @pytest.fixture
    def use_case(self, uow_factory, release_use_case, clock) -> ListAvailableSlotsUseCase:
        return ListAvailableSlotsUseCase(
            uow_factory=uow_factory, release_expired_holds=release_use_case, clock=clock
        )

    @pytest.mark.asyncio
    async def test_lapsed_hold_shows_up_as_available(
        self, use_case, store, slot, held_session, mentor_id, clock
    ):
        assert await use_case.execute(mentor_id=mentor_id) == []

        clock.advance(timedelta(minutes=11))
        [available] = await use_case.execute(mentor_id=mentor_id)

        assert available.id == slot.id
        assert store.sessions[held_session.id].status == SessionStatus.CANCELED

    @pytest.mark.asyncio
    async def test_default_window_is_fourteen_days(self, use_case, store, mentor_id, clock):
        inside = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=13))
        store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=15))
        store.add_slot(mentor_id=mentor_id, start_at=clock.now - timedelta(hours=1))

        slots = await use_case.execute(mentor_id=mentor_id)

        assert [s.id for s in slots] == [inside.id]

    @pytest.mark.asyncio
    async def test_explicit_range_sorted_by_start(self, use_case, store, mentor_id, clock):
        later = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=20))
        earlier = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=18))

        slots = await use_case.execute(
            mentor_id=mentor_id,
            start_from=clock.now + timedelta(days=17),
            start_to=clock.now + timedelta(days=21),
        )

        assert [s.id for s in slots] == [earlier.id, later.id]

    @pytest.mark.asyncio
    async def test_inverted_range_rejected(self, use_case, mentor_id, clock):
        with pytest.raises(DomainError):
            await use_case.execute(
                mentor_id=mentor_id, start_from=clock.now, start_to=clock.now - timedelta(days=1)
            )

    @pytest.mark.asyncio
    async def test_naive_upper_bound_is_read_as_utc(self, use_case, store, mentor_id, clock):
        inside = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=3))
        store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=10))

        slots = await use_case.execute(mentor_id=mentor_id, start_to=datetime(2026, 3, 10))

        assert [s.id for s in slots] == [inside.id]

    @pytest.mark.asyncio
    async def test_naive_lower_bound_is_read_as_utc(self, use_case, store, mentor_id, clock):
        store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=1))
        later = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=5))

        slots = await use_case.execute(mentor_id=mentor_id, start_from=datetime(2026, 3, 5))

        assert [s.id for s in slots] == [later.id]


class TestGetSession:
    @pytest.fixture
    def use_case(self, uow_factory) -> GetSessionUseCase:
        return GetSessionUseCase(uow_factory=uow_factory)

    @pytest.mark.asyncio
    async def test_participant_sees_detail(self, use_case, held_session, mentee_id):
        detail = await use_case.execute(user_id=mentee_id, session_id=held_session.id)

        assert detail.session.id == held_session.id
        assert detail.mentee.id == mentee_id

    @pytest.mark.asyncio
    async def test_outsider_rejected(self, use_case, held_session):
        with pytest.raises(DomainError, match='Not authorized'):
            await use_case.execute(user_id=uuid4(), session_id=held_session.id)

    @pytest.mark.asyncio
    async def test_missing(self, use_case, mentee_id):
        with pytest.raises(NotFoundError):
            await use_case.execute(user_id=mentee_id, session_id=uuid4())


class TestListMentorSessions:
    @pytest.mark.asyncio
    async def test_stale_requests_are_canceled_before_listing(
        self, uow_factory, auto_cancel_use_case, store, slot, service, mentee_id, mentor_id, clock
    ):
        stale = store.add_session(
            slot=slot,
            mentee_id=mentee_id,
            service_id=service.id,
            created_at=clock.now - timedelta(days=4),
        )
        use_case = ListMentorSessionsUseCase(
            uow_factory=uow_factory, auto_cancel_stale_requests=auto_cancel_use_case
        )

        [listed] = await use_case.execute(mentor_id=mentor_id)

        assert listed.id == stale.id
        assert listed.status == SessionStatus.CANCELED


class TestGetHoldStatus:
    @pytest.fixture
    def use_case(self, uow_factory, clock) -> GetHoldStatusUseCase:
        return GetHoldStatusUseCase(uow_factory=uow_factory, clock=clock)

    @pytest.mark.asyncio
    async def test_remaining_time(self, use_case, held_session, mentee_id, clock):
        clock.advance(timedelta(minutes=4))

        hold_status = await use_case.execute(user_id=mentee_id, session_id=held_session.id)

        assert hold_status.remaining_seconds == 360
        assert hold_status.hold_expires_at == clock.now + timedelta(minutes=6)

    @pytest.mark.asyncio
    async def test_lapsed_hold_is_gone(self, use_case, held_session, mentee_id, clock):
        clock.advance(timedelta(minutes=10))

        with pytest.raises(GoneError, match='Hold has expired'):
            await use_case.execute(user_id=mentee_id, session_id=held_session.id)

    @pytest.mark.asyncio
    async def test_booked_session_has_no_hold(
        self, use_case, store, held_session, mentee_id, clock
    ):
        store.sessions[held_session.id] = held_session.confirm(now=clock.now)
        store.slots[held_session.slot_id] = store.slots[held_session.slot_id].book()

        with pytest.raises(DomainError, match='no active hold'):
            await use_case.execute(user_id=mentee_id, session_id=held_session.id)
