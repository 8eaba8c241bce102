"""
Fixed booking windows and cancel reasons.

The payment hold and the mentor response window are two separate expiry
classes: both free the slot, each records its own cancel reason.
"""

from datetime import datetime, timedelta, timezone


HOLD_DURATION_MINUTES = 10
HOLD_DURATION = timedelta(minutes=HOLD_DURATION_MINUTES)

STALE_REQUEST_WINDOW_DAYS = 3
STALE_REQUEST_WINDOW = timedelta(days=STALE_REQUEST_WINDOW_DAYS)

HOLD_EXPIRED_REASON = 'Hold expired'
HOLD_EXPIRED_MESSAGE = 'Hold has expired. Please book again.'
STALE_REQUEST_REASON = (
    f'Auto-canceled: mentor did not respond within {STALE_REQUEST_WINDOW_DAYS} days'
)

SLOT_LOCK_KEY_PREFIX = 'lock:slot:'


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def slot_lock_key(slot_id: object) -> str:
    return f'{SLOT_LOCK_KEY_PREFIX}{slot_id}'


def as_utc(value: datetime) -> datetime:
    """Read a timestamp without an offset as UTC; aware ones pass through"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
