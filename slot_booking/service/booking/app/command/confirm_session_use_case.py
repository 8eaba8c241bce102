"""
Confirm Session Use Case - held (live) / booked -> booked

Row locks are taken slot first, then session, like every other mutating
booking operation. A lapsed hold is reclaimed and committed before the
caller is told to book again.
"""

from datetime import datetime
from typing import Callable, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, Provider, inject
from fastapi import Depends
from opentelemetry import trace

from slot_booking.platform.config.di import Container
from slot_booking.platform.database.unit_of_work import UnitOfWorkFactory
from slot_booking.platform.exception.exceptions import DomainError, NotFoundError
from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.command.session_row_lock import lock_slot_then_session
from slot_booking.service.booking.app.interface.i_booking_event_publisher import (
    IBookingEventPublisher,
)
from slot_booking.service.booking.domain.booking_policy import (
    HOLD_EXPIRED_MESSAGE,
    HOLD_EXPIRED_REASON,
    utc_now,
)
from slot_booking.service.booking.domain.domain_event.booking_domain_event import (
    SessionCanceledEvent,
    SessionConfirmedEvent,
)
from slot_booking.service.booking.domain.entity.session_detail import SessionDetail


class ConfirmSessionUseCase:
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
        self, *, user_id: UUID, session_id: UUID, payment_intent_id: Optional[str] = None
    ) -> SessionDetail:
        with self.tracer.start_as_current_span(
            'use_case.confirm_session',
            attributes={'session.id': str(session_id), 'user.id': str(user_id)},
        ) as span:
            async with self.uow_factory() as uow:
                slot, session = await lock_slot_then_session(uow=uow, session_id=session_id)
                session.ensure_participant(user_id)
                session.ensure_confirmable()

                if payment_intent_id:
                    payment = await uow.payment_repo.get_by_session_id(session_id=session.id)
                    if not payment:
                        raise DomainError('Payment not found for this session')
                    payment.verify_settles(
                        mentee_id=session.mentee_id, payment_intent_id=payment_intent_id
                    )

                if not slot:
                    raise NotFoundError('Slot not found')

                now = self.clock()
                if slot.is_hold_expired(now=now):
                    await uow.slot_repo.update(slot=slot.release())
                    canceled = await uow.session_repo.update(
                        session=session.cancel(reason=HOLD_EXPIRED_REASON, now=now)
                    )
                    # Reclaim must survive the error raised below
                    await uow.commit()

                    span.set_attribute('error', True)
                    span.set_attribute('error.type', 'hold_expired')
                    self.event_publisher.publish_nowait(
                        event=SessionCanceledEvent(
                            session_id=canceled.id,
                            slot_id=canceled.slot_id,
                            mentor_id=canceled.mentor_id,
                            mentee_id=canceled.mentee_id,
                            reason=canceled.cancel_reason,
                        )
                    )
                    raise DomainError(HOLD_EXPIRED_MESSAGE)

                await uow.slot_repo.update(slot=slot.book())
                confirmed = await uow.session_repo.update(session=session.confirm(now=now))
                detail = await uow.session_repo.get_detail(session_id=confirmed.id)
                await uow.commit()

            self.event_publisher.publish_nowait(
                event=SessionConfirmedEvent(
                    session_id=confirmed.id,
                    slot_id=confirmed.slot_id,
                    mentor_id=confirmed.mentor_id,
                    mentee_id=confirmed.mentee_id,
                )
            )
            Logger.base.info(f'✅ [CONFIRM] Session {confirmed.id} booked')

            if detail is None:
                raise NotFoundError('Session not found')
            return detail

