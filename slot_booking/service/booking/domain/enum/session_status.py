from enum import StrEnum


class SessionStatus(StrEnum):
    REQUESTED = 'requested'
    BOOKED = 'booked'
    PAID = 'paid'
    COMPLETED = 'completed'
    CANCELED = 'canceled'


CONFIRMABLE_STATUSES = frozenset({SessionStatus.REQUESTED, SessionStatus.BOOKED})
CANCELABLE_STATUSES = frozenset({SessionStatus.REQUESTED, SessionStatus.BOOKED, SessionStatus.PAID})
