from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from slot_booking.platform.logging.loguru_io import Logger
from slot_booking.service.booking.app.command.cancel_session_use_case import CancelSessionUseCase
from slot_booking.service.booking.app.command.confirm_session_use_case import (
    ConfirmSessionUseCase,
)
from slot_booking.service.booking.app.command.hold_slot_use_case import HoldSlotUseCase
from slot_booking.service.booking.app.command.release_expired_holds_use_case import (
    ReleaseExpiredHoldsUseCase,
)
from slot_booking.service.booking.app.query.get_hold_status_use_case import GetHoldStatusUseCase
from slot_booking.service.booking.app.query.get_session_use_case import GetSessionUseCase
from slot_booking.service.booking.app.query.list_available_slots_use_case import (
    ListAvailableSlotsUseCase,
)
from slot_booking.service.booking.app.query.list_mentor_sessions_use_case import (
    ListMentorSessionsUseCase,
)
from slot_booking.service.booking.driving_adapter.http_controller.caller_identity import (
    CallerIdentity,
    get_caller,
    require_admin,
)
from slot_booking.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    CancelSessionRequest,
    ConfirmSessionRequest,
    HoldSlotRequest,
    HoldSlotResponse,
    HoldStatusResponse,
    ReleaseExpiredHoldsResponse,
    SessionDetailResponse,
    SessionResponse,
    SlotResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/hold', status_code=status.HTTP_201_CREATED)
@Logger.io
async def hold_slot(
    request: HoldSlotRequest,
    caller: CallerIdentity = Depends(get_caller),
    use_case: HoldSlotUseCase = Depends(HoldSlotUseCase.depends),
) -> HoldSlotResponse:
    with tracer.start_as_current_span('controller.hold_slot') as span:
        span.set_attribute('slot_id', str(request.slot_id))
        span.set_attribute('mentee_id', str(caller.user_id))

        result = await use_case.execute(
            mentee_id=caller.user_id, slot_id=request.slot_id, service_id=request.service_id
        )
        return HoldSlotResponse.from_result(result)


@router.post('/confirm')
@Logger.io
async def confirm_session(
    request: ConfirmSessionRequest,
    caller: CallerIdentity = Depends(get_caller),
    use_case: ConfirmSessionUseCase = Depends(ConfirmSessionUseCase.depends),
) -> SessionDetailResponse:
    detail = await use_case.execute(
        user_id=caller.user_id,
        session_id=request.session_id,
        payment_intent_id=request.payment_intent_id,
    )
    return SessionDetailResponse.from_detail(detail)


@router.post('/release-expired')
@Logger.io
async def release_expired_holds(
    caller: CallerIdentity = Depends(require_admin),
    use_case: ReleaseExpiredHoldsUseCase = Depends(ReleaseExpiredHoldsUseCase.depends),
) -> ReleaseExpiredHoldsResponse:
    result = await use_case.execute()
    return ReleaseExpiredHoldsResponse(released=result.released)


@router.get('/slots/{mentor_id}/available')
@Logger.io
async def list_available_slots(
    mentor_id: UUID,
    start_from: Optional[datetime] = None,
    start_to: Optional[datetime] = None,
    use_case: ListAvailableSlotsUseCase = Depends(ListAvailableSlotsUseCase.depends),
) -> List[SlotResponse]:
    slots = await use_case.execute(mentor_id=mentor_id, start_from=start_from, start_to=start_to)
    return [SlotResponse.from_entity(slot) for slot in slots]


@router.get('/sessions/mentor')
@Logger.io
async def list_mentor_sessions(
    caller: CallerIdentity = Depends(get_caller),
    use_case: ListMentorSessionsUseCase = Depends(ListMentorSessionsUseCase.depends),
) -> List[SessionResponse]:
    sessions = await use_case.execute(mentor_id=caller.user_id)
    return [SessionResponse.from_entity(session) for session in sessions]


@router.get('/{session_id}')
@Logger.io
async def get_session(
    session_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    use_case: GetSessionUseCase = Depends(GetSessionUseCase.depends),
) -> SessionDetailResponse:
    detail = await use_case.execute(user_id=caller.user_id, session_id=session_id)
    return SessionDetailResponse.from_detail(detail)


@router.get('/{session_id}/hold')
@Logger.io
async def get_hold_status(
    session_id: UUID,
    caller: CallerIdentity = Depends(get_caller),
    use_case: GetHoldStatusUseCase = Depends(GetHoldStatusUseCase.depends),
) -> HoldStatusResponse:
    hold_status = await use_case.execute(user_id=caller.user_id, session_id=session_id)
    return HoldStatusResponse.from_status(hold_status)


@router.patch('/{session_id}/cancel')
@Logger.io
async def cancel_session(
    session_id: UUID,
    request: Optional[CancelSessionRequest] = None,
    caller: CallerIdentity = Depends(get_caller),
    use_case: CancelSessionUseCase = Depends(CancelSessionUseCase.depends),
) -> SessionResponse:
    with tracer.start_as_current_span('controller.cancel_session') as span:
        span.set_attribute('session_id', str(session_id))

        session = await use_case.execute(
            user_id=caller.user_id,
            session_id=session_id,
            reason=request.reason if request else None,
        )
        return SessionResponse.from_entity(session)
