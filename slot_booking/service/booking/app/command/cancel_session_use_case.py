from datetime import datetime
from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, Provider, inject
from fastapi import Depends
from opentelemetry import trace

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.command.session_row_lock import lock_slot_then_session
from slot_booking.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from slot_booking.service.booking.domain.booking_policy import utc_now
from slot_booking.service.booking.domain.domain_event.booking_domain_event import (
    SessionCanceledEvent,
)
from slot_booking.service.booking.domain.entity.session_entity import Session


class CancelSessionUseCase:
    """
    Cancel a session on behalf of its mentor or mentee.

    The slot always goes back to FREE, whatever it was (held or booked).
    Refunds are the payment service's business and happen downstream of
    SessionCanceledEvent.
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
    async def execute(
        self, *, user_id: UUID, session_id: UUID, reason: Optional[str] = None
    ) -> Session:
        with self.tracer.start_as_current_span(
            'use_case.cancel_session',
            attributes={'session.id': str(session_id), 'user.id': str(user_id)},
        ):
            async with self.uow_factory() as uow:
                slot, session = await lock_slot_then_session(uow=uow, session_id=session_id)
                session.ensure_participant(user_id)
                session.ensure_cancelable()

                if slot:
                    await uow.slot_repo.update(slot=slot.release())
                canceled = await uow.session_repo.update(
                    session=session.cancel(reason=reason, now=self.clock())
                )
                await uow.commit()

            self.event_publisher.publish_nowait(
                event=SessionCanceledEvent(
                    session_id=canceled.id,
                    slot_id=canceled.slot_id,
                    mentor_id=canceled.mentor_id,
                    mentee_id=canceled.mentee_id,
                    canceled_by=user_id,
                    reason=reason,
                )
            )
            Logger.base.info(f'🚫 [CANCEL] Session {canceled.id} canceled by {user_id}')
            return canceled
