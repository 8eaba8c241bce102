from datetime import datetime
from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, Provider, inject
from fastapi import Depends
from opentelemetry import trace

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from slot_booking.service.booking.domain.booking_policy import (
    STALE_REQUEST_REASON,
    STALE_REQUEST_WINDOW,
    utc_now,
)
from slot_booking.service.booking.domain.domain_event.booking_domain_event import (
    SessionCanceledEvent,
)


class AutoCancelStaleRequestsUseCase:
    """
    Cancel a mentor's REQUESTED sessions older than STALE_REQUEST_WINDOW
    and free their still-held slots, in a single transaction.

    Returns the number of sessions canceled.
    """

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
    async def execute(self, *, mentor_id: UUID) -> int:
        with self.tracer.start_as_current_span(
            'use_case.auto_cancel_stale_requests', attributes={'mentor.id': str(mentor_id)}
        ) as span:
            now = self.clock()

            async with self.uow_factory() as uow:
                created_before = now - STALE_REQUEST_WINDOW
                candidates = await uow.session_repo.list_stale_requested(
                    mentor_id=mentor_id, created_before=created_before
                )
                if not candidates:
                    return 0

                # Slot rows before session rows, in a stable order
                for slot_id in sorted({session.slot_id for session in candidates}, key=str):
                    await uow.slot_repo.get_for_update(slot_id=slot_id)

                # Re-read under the slot locks; only these slots are still ours to free
                locked_slot_ids = {session.slot_id for session in candidates}
                stale = [
                    session
                    for session in await uow.session_repo.list_stale_requested(
                        mentor_id=mentor_id, created_before=created_before
                    )
                    if session.slot_id in locked_slot_ids
                ]
                slot_ids = [session.slot_id for session in stale]

                canceled_count = await uow.session_repo.cancel_requested(
                    session_ids=[session.id for session in stale],
                    reason=STALE_REQUEST_REASON,
                    canceled_at=now,
                )
                released_count = await uow.slot_repo.release_held(slot_ids=slot_ids)
                await uow.commit()

            for session in stale:
                self.event_publisher.publish_nowait(
                    event=SessionCanceledEvent(
                        session_id=session.id,
                        slot_id=session.slot_id,
                        mentor_id=session.mentor_id,
                        mentee_id=session.mentee_id,
                        reason=STALE_REQUEST_REASON,
                    )
                )

            span.set_attribute('canceled', canceled_count)
            Logger.base.info(
                f'🧹 [STALE] Mentor {mentor_id}: canceled {canceled_count} stale request(s), '
                f'freed {released_count} slot(s)'
            )
            return canceled_count
