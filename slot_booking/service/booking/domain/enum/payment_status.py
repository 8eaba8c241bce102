from enum import StrEnum


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    REQUIRES_ACTION = 'requires_action'
    SUCCEEDED = 'succeeded'
    PAID = 'paid'
    FAILED = 'failed'
    REFUNDED = 'refunded'


SETTLED_PAYMENT_STATUSES = frozenset({PaymentStatus.SUCCEEDED, PaymentStatus.PAID})
