from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from slot_booking.platform.exception.exceptions import ConflictError, DomainError
from slot_booking.service.booking.domain.booking_policy import slot_lock_key
from slot_booking.service.booking.domain.domain_event.booking_domain_event import SlotHeldEvent
from slot_booking.service.booking.domain.entity.payment_entity import Payment
from slot_booking.service.booking.domain.entity.session_entity import Session
from slot_booking.service.booking.domain.entity.slot_entity import Slot
from slot_booking.service.booking.domain.enum.payment_status import PaymentStatus
from slot_booking.service.booking.domain.enum.session_status import SessionStatus
from slot_booking.service.booking.domain.enum.slot_status import SlotStatus


NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _slot(status: SlotStatus = SlotStatus.FREE, held_until=None) -> Slot:
    return Slot(
        id=uuid4(),
        mentor_id=uuid4(),
        start_at=NOW + timedelta(days=1),
        end_at=NOW + timedelta(days=1, hours=1),
        status=status,
        held_until=held_until,
    )


class TestSlotHold:
    def test_free_slot_is_holdable(self):
        _slot().ensure_holdable(now=NOW)

    def test_booked_slot_rejects_hold(self):
        with pytest.raises(ConflictError, match='Slot is already booked'):
            _slot(SlotStatus.BOOKED).ensure_holdable(now=NOW)

    def test_live_hold_rejects_hold(self):
        slot = _slot(SlotStatus.HELD, held_until=NOW + timedelta(minutes=1))
        with pytest.raises(ConflictError, match='currently held by another user'):
            slot.ensure_holdable(now=NOW)

    def test_lapsed_hold_is_reclaimable(self):
        slot = _slot(SlotStatus.HELD, held_until=NOW - timedelta(seconds=1))

        slot.ensure_holdable(now=NOW)
        assert slot.is_hold_expired(now=NOW)
        assert not slot.is_hold_live(now=NOW)

    def test_hold_ending_exactly_now_is_expired(self):
        slot = _slot(SlotStatus.HELD, held_until=NOW)
        assert slot.is_hold_expired(now=NOW)

    def test_transitions_keep_held_until_only_while_held(self):
        held = _slot().hold(until=NOW + timedelta(minutes=10))
        assert held.status == SlotStatus.HELD
        assert held.held_until == NOW + timedelta(minutes=10)

        booked = held.book()
        assert booked.status == SlotStatus.BOOKED
        assert booked.held_until is None

        freed = held.release()
        assert freed.status == SlotStatus.FREE
        assert freed.held_until is None


class TestSession:
    @pytest.fixture
    def session(self) -> Session:
        return Session.request(slot=_slot(), mentee_id=uuid4(), service_id=uuid4(), now=NOW)

    def test_request_copies_slot_times(self):
        slot = _slot()
        session = Session.request(slot=slot, mentee_id=uuid4(), service_id=uuid4(), now=NOW)

        assert session.status == SessionStatus.REQUESTED
        assert session.mentor_id == slot.mentor_id
        assert (session.start_at, session.end_at) == (slot.start_at, slot.end_at)
        assert session.created_at == NOW

    def test_only_participants_pass(self, session: Session):
        session.ensure_participant(session.mentor_id)
        session.ensure_participant(session.mentee_id)
        with pytest.raises(DomainError, match='Not authorized'):
            session.ensure_participant(uuid4())

    @pytest.mark.parametrize('status', [SessionStatus.PAID, SessionStatus.COMPLETED])
    def test_confirm_rejects_status(self, session: Session, status: SessionStatus):
        session.status = status
        with pytest.raises(DomainError, match=f'Cannot confirm session with status: {status}'):
            session.ensure_confirmable()

    @pytest.mark.parametrize('status', [SessionStatus.COMPLETED, SessionStatus.CANCELED])
    def test_cancel_rejects_terminal_status(self, session: Session, status: SessionStatus):
        session.status = status
        with pytest.raises(DomainError, match=f'Cannot cancel session with status: {status}'):
            session.ensure_cancelable()

    def test_cancel_records_reason_and_time(self, session: Session):
        canceled = session.cancel(reason='Schedule clash', now=NOW)

        assert canceled.status == SessionStatus.CANCELED
        assert canceled.cancel_reason == 'Schedule clash'
        assert canceled.canceled_at == NOW
        assert session.status == SessionStatus.REQUESTED


class TestPaymentVerification:
    @pytest.fixture
    def payment(self) -> Payment:
        return Payment(
            id=uuid4(),
            session_id=uuid4(),
            mentee_id=uuid4(),
            provider_payment_id='pi_123',
            status=PaymentStatus.SUCCEEDED,
        )

    def test_settled_payment_passes(self, payment: Payment):
        payment.verify_settles(mentee_id=payment.mentee_id, payment_intent_id='pi_123')

    def test_other_mentee_rejected(self, payment: Payment):
        with pytest.raises(DomainError, match='does not belong to session mentee'):
            payment.verify_settles(mentee_id=uuid4(), payment_intent_id='pi_123')

    def test_other_intent_rejected(self, payment: Payment):
        with pytest.raises(DomainError, match='does not match session payment'):
            payment.verify_settles(mentee_id=payment.mentee_id, payment_intent_id='pi_999')

    @pytest.mark.parametrize(
        'status', [PaymentStatus.PENDING, PaymentStatus.REQUIRES_ACTION, PaymentStatus.FAILED]
    )
    def test_unsettled_payment_rejected(self, payment: Payment, status: PaymentStatus):
        unsettled = Payment(
            id=payment.id,
            session_id=payment.session_id,
            mentee_id=payment.mentee_id,
            provider_payment_id='pi_123',
            status=status,
        )
        with pytest.raises(DomainError, match='not been confirmed by acquirer'):
            unsettled.verify_settles(mentee_id=payment.mentee_id, payment_intent_id='pi_123')


def test_slot_lock_key_format():
    slot_id = uuid4()
    assert slot_lock_key(slot_id) == f'lock:slot:{slot_id}'


def test_event_payload_is_json_ready():
    session_id, slot_id = uuid4(), uuid4()
    event = SlotHeldEvent(
        session_id=session_id,
        slot_id=slot_id,
        mentor_id=uuid4(),
        mentee_id=uuid4(),
        hold_expires_at=NOW,
        occurred_at=NOW,
    )

    payload = event.to_payload()

    assert payload['event_type'] == 'slot_held'
    assert payload['session_id'] == str(session_id)
    assert payload['hold_expires_at'] == NOW.isoformat()
