"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between the API app and the scheduler job.
"""

from types import ModuleType

from slot_booking.service.booking.app.command import (
    auto_cancel_stale_requests_use_case,
    cancel_session_use_case,
    confirm_session_use_case,
    hold_slot_use_case,
    release_expired_holds_use_case,
)
from slot_booking.service.booking.app.query import (
    get_hold_status_use_case,
    get_session_use_case,
    list_available_slots_use_case,
    list_mentor_sessions_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    # Commands
    hold_slot_use_case,
    confirm_session_use_case,
    cancel_session_use_case,
    release_expired_holds_use_case,
    auto_cancel_stale_requests_use_case,
    # Queries
    list_available_slots_use_case,
    get_session_use_case,
    list_mentor_sessions_use_case,
    get_hold_status_use_case,
]
