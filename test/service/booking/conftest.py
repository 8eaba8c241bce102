"""
Booking engine fixtures

Use cases run against the in-memory unit of work and lock manager; one
mentor with one active service and a free slot tomorrow is seeded.
"""

from datetime import timedelta

import pytest

from slot_booking.service.booking.app.command.auto_cancel_stale_requests_use_case import (
    AutoCancelStaleRequestsUseCase,
)
from slot_booking.service.booking.app.command.cancel_session_use_case import CancelSessionUseCase
from slot_booking.service.booking.app.command.confirm_session_use_case import (
    ConfirmSessionUseCase,
)
from slot_booking.service.booking.app.command.hold_slot_use_case import HoldSlotUseCase
from slot_booking.service.booking.app.command.release_expired_holds_use_case import (
    ReleaseExpiredHoldsUseCase,
)
from slot_booking.service.booking.domain.entity.mentor_service_entity import MentorService
from slot_booking.service.booking.domain.entity.slot_entity import Slot
from test.service.booking.in_memory_booking_store import (
    FakeClock,
    InMemoryBookingStore,
    InMemoryLockManager,
    InMemoryUnitOfWork,
    RecordingEventPublisher,
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def uow_factory(store: InMemoryBookingStore):
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def lock_manager() -> InMemoryLockManager:
    return InMemoryLockManager()


@pytest.fixture
def event_publisher() -> RecordingEventPublisher:
    return RecordingEventPublisher()


@pytest.fixture
def mentor_id(store: InMemoryBookingStore):
    return store.add_user('Mentor')


@pytest.fixture
def mentee_id(store: InMemoryBookingStore):
    return store.add_user('Mentee')


@pytest.fixture
def other_mentee_id(store: InMemoryBookingStore):
    return store.add_user('Other')


@pytest.fixture
def service(store: InMemoryBookingStore, mentor_id) -> MentorService:
    return store.add_service(mentor_id=mentor_id)


@pytest.fixture
def slot(store: InMemoryBookingStore, mentor_id, clock: FakeClock) -> Slot:
    return store.add_slot(mentor_id=mentor_id, start_at=clock.now + timedelta(days=1))


@pytest.fixture
def hold_use_case(uow_factory, lock_manager, event_publisher, clock) -> HoldSlotUseCase:
    return HoldSlotUseCase(
        uow_factory=uow_factory,
        lock_manager=lock_manager,
        event_publisher=event_publisher,
        clock=clock,
    )


@pytest.fixture
def confirm_use_case(uow_factory, event_publisher, clock) -> ConfirmSessionUseCase:
    return ConfirmSessionUseCase(uow_factory=uow_factory, event_publisher=event_publisher, clock=clock)


@pytest.fixture
def cancel_use_case(uow_factory, event_publisher, clock) -> CancelSessionUseCase:
    return CancelSessionUseCase(uow_factory=uow_factory, event_publisher=event_publisher, clock=clock)


@pytest.fixture
def release_use_case(uow_factory, event_publisher, clock) -> ReleaseExpiredHoldsUseCase:
    return ReleaseExpiredHoldsUseCase(
        uow_factory=uow_factory, event_publisher=event_publisher, clock=clock
    )


@pytest.fixture
def auto_cancel_use_case(uow_factory, event_publisher, clock) -> AutoCancelStaleRequestsUseCase:
    return AutoCancelStaleRequestsUseCase(
        uow_factory=uow_factory, event_publisher=event_publisher, clock=clock
    )
