"""Hold / confirm / cancel / sweep driven end to end over one shared store"""

from datetime import timedelta

import pytest

from slot_booking.platform.exception.exceptions import ConflictError, DomainError
from slot_booking.service.booking.domain.booking_policy import HOLD_EXPIRED_REASON
from slot_booking.service.booking.domain.enum.session_status import SessionStatus
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus


class TestBookingLifecycle:
    @pytest.mark.asyncio
    async def test_hold_then_confirm_books_the_slot(
        self,
        hold_use_case,
        confirm_use_case,
        store,
        slot,
        service,
        mentee_id,
        other_mentee_id,
        mentor_id,
        clock,
    ):
        held = await hold_use_case.execute(
            mentee_id=mentee_id, slot_id=slot.id, service_id=service.id
        )
        assert held.hold_expires_at == clock.now + timedelta(minutes=10)

        with pytest.raises(ConflictError):
            await hold_use_case.execute(
                mentee_id=other_mentee_id, slot_id=slot.id, service_id=service.id
            )

        clock.advance(timedelta(minutes=9))
        detail = await confirm_use_case.execute(user_id=mentor_id, session_id=held.session.id)

        assert detail.session.status == SessionStatus.BOOKED
        assert store.slots[slot.id].status == SlotStatus.BOOKED
        assert len(store.live_sessions_for(slot.id)) == 1

        third_mentee_id = store.add_user('Third')
        with pytest.raises(ConflictError, match='Slot is already booked'):
            await hold_use_case.execute(
                mentee_id=third_mentee_id, slot_id=slot.id, service_id=service.id
            )
        assert store.slots[slot.id].status == SlotStatus.BOOKED
        assert len(store.live_sessions_for(slot.id)) == 1

    @pytest.mark.asyncio
    async def test_lapsed_hold_swept_then_taken_by_someone_else(
        self,
        hold_use_case,
        release_use_case,
        confirm_use_case,
        store,
        slot,
        service,
        mentee_id,
        other_mentee_id,
        clock,
    ):
        first = await hold_use_case.execute(
            mentee_id=mentee_id, slot_id=slot.id, service_id=service.id
        )
        with pytest.raises(ConflictError):
            await hold_use_case.execute(
                mentee_id=other_mentee_id, slot_id=slot.id, service_id=service.id
            )

        clock.advance(timedelta(minutes=11))
        result = await release_use_case.execute()
        second = await hold_use_case.execute(
            mentee_id=other_mentee_id, slot_id=slot.id, service_id=service.id
        )

        assert result.released == 1
        assert store.sessions[first.session.id].cancel_reason == HOLD_EXPIRED_REASON
        assert [s.id for s in store.live_sessions_for(slot.id)] == [second.session.id]

        with pytest.raises(DomainError):
            await confirm_use_case.execute(user_id=mentee_id, session_id=first.session.id)

    @pytest.mark.asyncio
    async def test_confirm_after_expiry_frees_the_slot(
        self, hold_use_case, confirm_use_case, store, slot, service, mentee_id, mentor_id, clock
    ):
        held = await hold_use_case.execute(
            mentee_id=mentee_id, slot_id=slot.id, service_id=service.id
        )

        clock.advance(timedelta(minutes=10))
        with pytest.raises(DomainError, match='Hold has expired'):
            await confirm_use_case.execute(user_id=mentor_id, session_id=held.session.id)

        assert store.slots[slot.id].status == SlotStatus.FREE
        assert store.sessions[held.session.id].status == SessionStatus.CANCELED
        assert store.live_sessions_for(slot.id) == []

    @pytest.mark.asyncio
    async def test_cancel_booked_session_reopens_slot(
        self,
        hold_use_case,
        confirm_use_case,
        cancel_use_case,
        store,
        slot,
        service,
        mentee_id,
        other_mentee_id,
        mentor_id,
    ):
        held = await hold_use_case.execute(
            mentee_id=mentee_id, slot_id=slot.id, service_id=service.id
        )
        await confirm_use_case.execute(user_id=mentor_id, session_id=held.session.id)

        await cancel_use_case.execute(
            user_id=mentee_id, session_id=held.session.id, reason='Conflict at work'
        )
        again = await hold_use_case.execute(
            mentee_id=other_mentee_id, slot_id=slot.id, service_id=service.id
        )

        assert store.sessions[held.session.id].cancel_reason == 'Conflict at work'
        assert store.slots[slot.id].status == SlotStatus.HELD
        assert [s.id for s in store.live_sessions_for(slot.id)] == [again.session.id]
