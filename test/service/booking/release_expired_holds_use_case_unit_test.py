from datetime import timedelta
import pytest

from slot_booking.service.booking.app.command.release_expired_holds_use_case import (
    ReleaseExpiredHoldsUseCase,
)
from slot_booking.service.booking.domain.enum.session_status import SessionStatus
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus
from test.service.booking.in_memory_booking_store import InMemoryUnitOfWork


@pytest.fixture
def hold_on(store, service, mentee_id, clock):
    """Put `slot` on hold until `clock.now + minutes` with a REQUESTED session"""

    def _hold(slot, minutes: int):
        store.slots[slot.id] = slot.hold(until=clock.now + timedelta(minutes=minutes))
        return store.add_session(
            slot=slot, mentee_id=mentee_id, service_id=service.id, created_at=clock.now
        )

    return _hold


class TestReleaseExpiredHolds:
    @pytest.mark.asyncio
    async def test_only_lapsed_holds_are_released(
        self, release_use_case: ReleaseExpiredHoldsUseCase, store, mentor_id, clock, hold_on
    ):
        lapsed_slot = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=1))
        live_slot = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=2))
        lapsed = hold_on(lapsed_slot, minutes=-1)
        live = hold_on(live_slot, minutes=5)

        result = await release_use_case.execute()

        assert result.released == 1
        assert store.slots[lapsed_slot.id].status == SlotStatus.FREE
        assert store.sessions[lapsed.id].status == SessionStatus.CANCELED
        assert store.sessions[lapsed.id].cancel_reason == 'Hold expired'
        assert store.slots[live_slot.id].status == SlotStatus.HELD
        assert store.sessions[live.id].status == SessionStatus.REQUESTED

    @pytest.mark.asyncio
    async def test_sweep_is_idempotent(self, release_use_case, store, slot, hold_on, clock):
        hold_on(slot, minutes=10)
        clock.advance(timedelta(minutes=11))

        first = await release_use_case.execute()
        snapshot = (dict(store.slots), dict(store.sessions))
        second = await release_use_case.execute()

        assert (first.released, second.released) == (1, 0)
        assert (dict(store.slots), dict(store.sessions)) == snapshot

    @pytest.mark.asyncio
    async def test_mentor_scope(self, release_use_case, store, slot, hold_on, clock):
        other_mentor = store.add_user('OtherMentor')
        other_slot = store.add_slot(mentor_id=other_mentor, start_at=clock.now + timedelta(days=1))
        hold_on(slot, minutes=-1)
        hold_on(other_slot, minutes=-1)

        result = await release_use_case.execute(mentor_id=slot.mentor_id)

        assert result.released == 1
        assert store.slots[slot.id].status == SlotStatus.FREE
        assert store.slots[other_slot.id].status == SlotStatus.HELD

    @pytest.mark.asyncio
    async def test_slot_rebooked_after_scan_is_skipped(
        self, event_publisher, store, slot, hold_on, clock
    ):
        hold_on(slot, minutes=-1)
        created = []

        def uow_factory():
            uow = InMemoryUnitOfWork(store)
            created.append(uow)
            if len(created) == 2:
                # Confirmed by someone else between the scan and the row lock
                store.slots[slot.id] = store.slots[slot.id].book()
            return uow

        use_case = ReleaseExpiredHoldsUseCase(
            uow_factory=uow_factory, event_publisher=event_publisher, clock=clock
        )

        result = await use_case.execute()

        assert result.released == 0
        assert store.slots[slot.id].status == SlotStatus.BOOKED
        assert event_publisher.events == []

    @pytest.mark.asyncio
    async def test_failure_on_one_slot_does_not_stop_the_others(
        self, event_publisher, store, mentor_id, hold_on, clock
    ):
        broken = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=1))
        healthy = store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=2))
        hold_on(broken, minutes=-2)
        hold_on(healthy, minutes=-1)

        def uow_factory():
            uow = InMemoryUnitOfWork(store)
            real_update = uow.slot_repo.update

            async def update(*, slot):
                if slot.id == broken.id:
                    raise RuntimeError('connection reset')
                return await real_update(slot=slot)

            uow.slot_repo.update = update
            return uow

        use_case = ReleaseExpiredHoldsUseCase(
            uow_factory=uow_factory, event_publisher=event_publisher, clock=clock
        )

        result = await use_case.execute()

        assert result.released == 1
        assert store.slots[broken.id].status == SlotStatus.HELD
        assert store.slots[healthy.id].status == SlotStatus.FREE
        # Row lock of the failed slot was released by the rollback
        assert not store.row_lock(broken.id).locked()
