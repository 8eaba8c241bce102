from typing import Optional, Tuple
from uuid import UUID

from slot_booking.platform.database.unit_of_work import AbstractUnitOfWork
from slot_booking.platform.exception.exceptions import NotFoundError
from slot_booking.service.booking.domain.entity.session_entity import Session
from slot_booking.service.booking.domain.entity.slot_entity import Slot


async def lock_slot_then_session(
    *, uow: AbstractUnitOfWork, session_id: UUID
) -> Tuple[Optional[Slot], Session]:
    """
    Lock a session's slot row, then the session row, inside `uow`.

    Hold, confirm, cancel and both sweeps lock in this order, so they
    never wait on each other in a cycle. The session is re-read under its
    lock because it may have changed while we waited on the slot.

    Raises:
        NotFoundError: session does not exist
    """
    session = await uow.session_repo.get_by_id(session_id=session_id)
    if not session:
        raise NotFoundError('Session not found')

    slot = await uow.slot_repo.get_for_update(slot_id=session.slot_id)
    session = await uow.session_repo.get_by_id(session_id=session_id, for_update=True)
    if not session:
        raise NotFoundError('Session not found')
    return slot, session
