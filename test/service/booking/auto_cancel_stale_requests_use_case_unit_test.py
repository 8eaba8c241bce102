from datetime import timedelta

import pytest

from slot_booking.service.booking.domain.booking_policy import STALE_REQUEST_REASON
from slot_booking.service.booking.domain.enum.session_status import SessionStatus
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus


class TestAutoCancelStaleRequests:
    @pytest.fixture
    def requested_at(self, store, service, mentee_id, mentor_id, clock):
        """REQUESTED session on a held slot, created `age` before now"""

        def _request(age: timedelta, *, start_in_days: int = 5):
            slot = store.add_slot(
                mentor_id=mentor_id, start_at=clock.now + timedelta(days=start_in_days)
            )
            store.slots[slot.id] = slot.hold(until=clock.now - age + timedelta(minutes=10))
            return store.add_session(
                slot=slot, mentee_id=mentee_id, service_id=service.id, created_at=clock.now - age
            )

        return _request

    @pytest.mark.asyncio
    async def test_requests_older_than_three_days_are_canceled(
        self, auto_cancel_use_case, store, mentor_id, requested_at, event_publisher
    ):
        stale = requested_at(timedelta(days=3, minutes=1))
        exactly_three_days = requested_at(timedelta(days=3), start_in_days=6)
        fresh = requested_at(timedelta(days=1), start_in_days=7)

        canceled = await auto_cancel_use_case.execute(mentor_id=mentor_id)

        assert canceled == 2
        for session in (stale, exactly_three_days):
            assert store.sessions[session.id].status == SessionStatus.CANCELED
            assert store.sessions[session.id].cancel_reason == STALE_REQUEST_REASON
            assert store.slots[session.slot_id].status == SlotStatus.FREE
        assert store.sessions[fresh.id].status == SessionStatus.REQUESTED
        assert len(event_publisher.events) == 2

    @pytest.mark.asyncio
    async def test_nothing_stale_commits_nothing(self, auto_cancel_use_case, store, mentor_id):
        assert await auto_cancel_use_case.execute(mentor_id=mentor_id) == 0
        assert store.commits == 0

    @pytest.mark.asyncio
    async def test_other_mentors_requests_untouched(
        self, auto_cancel_use_case, store, requested_at
    ):
        stale = requested_at(timedelta(days=4))

        assert await auto_cancel_use_case.execute(mentor_id=store.add_user('Someone')) == 0
        assert store.sessions[stale.id].status == SessionStatus.REQUESTED
