"""
Release Expired Holds Use Case - reconciliation sweep

Scans for HELD slots whose hold lapsed and reclaims each one in its own
transaction: re-lock the slot, skip it if it changed meanwhile, free it and
cancel its REQUESTED session. One failing slot never stops the sweep.

Idempotent; run by read paths (opportunistically, per mentor) and by the
scheduler job (globally).
"""

from datetime import datetime
from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, Provider, inject
from fastapi import Depends
from opentelemetry import trace

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.dto.release_expired_holds_result import (
    ReleaseExpiredHoldsResult,
)
from slot_booking.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from slot_booking.service.booking.domain.booking_policy import HOLD_EXPIRED_REASON, utc_now
from slot_booking.service.booking.domain.domain_event.booking_domain_event import (
    SessionCanceledEvent,
)
from slot_booking.service.booking.domain.entity.session_entity import Session


class ReleaseExpiredHoldsUseCase:
    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        event_publisher: IBookingEventPublisher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_publisher = event_publisher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provider[Container.unit_of_work]),
        event_publisher: IBookingEventPublisher = Depends(
            Provide[Container.booking_event_publisher]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, event_publisher=event_publisher)

    @Logger.io
    async def execute(self, *, mentor_id: Optional[UUID] = None) -> ReleaseExpiredHoldsResult:
        with self.tracer.start_as_current_span(
            'use_case.release_expired_holds',
            attributes={'mentor.id': str(mentor_id) if mentor_id else 'all'},
        ) as span:
            async with self.uow_factory() as uow:
                expired = await uow.slot_repo.list_expired_holds(
                    now=self.clock(), mentor_id=mentor_id
                )

            released = 0
            for candidate in expired:
                try:
                    if await self._release_one(slot_id=candidate.id):
                        released += 1
                except Exception as e:
                    Logger.base.error(
                        f'❌ [SWEEP] Failed to release expired hold on slot {candidate.id}: {e}'
                    )

            span.set_attribute('released', released)
            if released:
                Logger.base.info(f'🧹 [SWEEP] Released {released} expired hold(s)')
            return ReleaseExpiredHoldsResult(released=released)

    async def _release_one(self, *, slot_id: UUID) -> bool:
        canceled: Optional[Session] = None

        async with self.uow_factory() as uow:
            slot = await uow.slot_repo.get_for_update(slot_id=slot_id)
            now = self.clock()
            # Confirmed, canceled or re-held since the scan
            if not slot or not slot.is_hold_expired(now=now):
                return False

            await uow.slot_repo.update(slot=slot.release())
            session = await uow.session_repo.get_requested_by_slot(slot_id=slot_id)
            if session:
                canceled = await uow.session_repo.update(
                    session=session.cancel(reason=HOLD_EXPIRED_REASON, now=now)
                )
            await uow.commit()

        if canceled:
            self.event_publisher.publish_nowait(
                event=SessionCanceledEvent(
                    session_id=canceled.id,
                    slot_id=canceled.slot_id,
                    mentor_id=canceled.mentor_id,
                    mentee_id=canceled.mentee_id,
                    reason=canceled.cancel_reason,
                )
            )
        return True
