from typing import Optional
from uuid import UUID

import attrs

from slot_booking.platform.exception.exceptions import DomainError
from slot_booking.service.booking.domain.enum.payment_status import (
    SETTLED_PAYMENT_STATUSES,
    PaymentStatus,
)


@attrs.define(frozen=True)
class Payment:
    id: UUID
    session_id: UUID
    mentee_id: UUID
    provider_payment_id: Optional[str]
    status: PaymentStatus

    def verify_settles(self, *, mentee_id: UUID, payment_intent_id: str) -> None:
        """
        Proof that this payment settles the session of `mentee_id`.

        Raises:
            DomainError: payment belongs to someone else, is for another intent,
                or has not been settled by the acquirer
        """
        if self.mentee_id != mentee_id:
            raise DomainError('Payment does not belong to session mentee')
        if self.provider_payment_id != payment_intent_id:
            raise DomainError('Payment intent does not match session payment')
        if self.status not in SETTLED_PAYMENT_STATUSES:
            raise DomainError('Payment has not been confirmed by acquirer')
