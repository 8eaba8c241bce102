"""
Hold Slot Use Case - lock lease + row lock + free/expired -> held

Flow:
1. Acquire the slot's Redis lease (fail fast, no retry)
2. In one transaction: lock the slot row, check state and service,
   move the slot to HELD for HOLD_DURATION and create a REQUESTED session
3. Commit, release the lease, publish SlotHeldEvent
"""

from datetime import datetime
from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, Provider, inject
from fastapi import Depends
from opentelemetry import trace

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.exception.exceptions import ConflictError, NotFoundError
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.platform.state.lock_manager import LOCK_CONTENDED_MESSAGE, LockManager
from slot_booking.service.booking.app.dto.hold_slot_result import HoldSlotResult
from slot_booking.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from slot_booking.service.booking.domain.booking_policy import (
    HOLD_DURATION,
    HOLD_EXPIRED_REASON,
    slot_lock_key,
    utc_now,
)
from slot_booking.service.booking.domain.domain_event.booking_domain_event import SlotHeldEvent
from slot_booking.service.booking.domain.entity.session_entity import Session


class HoldSlotUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        lock_manager: LockManager,
        event_publisher: IBookingEventPublisher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.lock_manager = lock_manager
        self.event_publisher = event_publisher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provider[Container.unit_of_work]),
        lock_manager: LockManager = Depends(Provide[Container.lock_manager]),
        event_publisher: IBookingEventPublisher = Depends(
            Provide[Container.booking_event_publisher]
        ),
    ) -> Self:
        return cls(
            uow_factory=uow_factory, lock_manager=lock_manager, event_publisher=event_publisher
        )

    @Logger.io
    async def execute(self, *, mentee_id: UUID, slot_id: UUID, service_id: UUID) -> HoldSlotResult:
        with self.tracer.start_as_current_span(
            'use_case.hold_slot',
            attributes={'slot.id': str(slot_id), 'mentee.id': str(mentee_id)},
        ) as span:
            lock = await self.lock_manager.with_lock(
                key=slot_lock_key(slot_id),
                fn=lambda: self._hold(mentee_id=mentee_id, slot_id=slot_id, service_id=service_id),
            )

            if not lock.success:
                span.set_attribute('error', True)
                span.set_attribute('error.type', 'lock_contended')
                raise ConflictError(lock.error or LOCK_CONTENDED_MESSAGE)

            result: HoldSlotResult = lock.result  # type: ignore[assignment]
            session = result.session
            span.set_attribute('session.id', str(session.id))

            self.event_publisher.publish_nowait(
                event=SlotHeldEvent(
                    session_id=session.id,
                    slot_id=session.slot_id,
                    mentor_id=session.mentor_id,
                    mentee_id=session.mentee_id,
                    hold_expires_at=result.hold_expires_at,
                )
            )
            Logger.base.info(
                f'🎫 [HOLD] Slot {slot_id} held for mentee {mentee_id} '
                f'until {result.hold_expires_at.isoformat()}'
            )
            return result

    async def _hold(self, *, mentee_id: UUID, slot_id: UUID, service_id: UUID) -> HoldSlotResult:
        async with self.uow_factory() as uow:
            slot = await uow.slot_repo.get_for_update(slot_id=slot_id)
            if not slot:
                raise NotFoundError('Slot not found')

            now = self.clock()
            slot.ensure_holdable(now=now)

            service = await uow.mentor_service_repo.get_active_for_mentor(
                service_id=service_id, mentor_id=slot.mentor_id
            )
            if not service:
                raise NotFoundError('Service not found')

            # Reclaiming a lapsed hold: its session must not stay live next to the new one
            if slot.is_hold_expired(now=now):
                lapsed = await uow.session_repo.get_requested_by_slot(slot_id=slot.id)
                if lapsed:
                    await uow.session_repo.update(
                        session=lapsed.cancel(reason=HOLD_EXPIRED_REASON, now=now)
                    )
                    Logger.base.info(f'♻️ [HOLD] Reclaimed lapsed hold of session {lapsed.id}')

            held_until = now + HOLD_DURATION
            await uow.slot_repo.update(slot=slot.hold(until=held_until))
            session = await uow.session_repo.create(
                session=Session.request(
                    slot=slot, mentee_id=mentee_id, service_id=service_id, now=now
                )
            )

            await uow.commit()

        return HoldSlotResult(session=session, hold_expires_at=held_until)
