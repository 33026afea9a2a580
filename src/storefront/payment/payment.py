"""Payment aggregate — money collected against a Confirmed order.

An order has at most one payment. The payment starts Pending and is settled
by an explicit ``complete`` or ``fail``; only a completed payment can be
refunded.

State Machine:
    PENDING → COMPLETED | FAILED
    COMPLETED → REFUNDED
    FAILED, REFUNDED are terminal
"""

from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront
from storefront.errors import DomainError
from storefront.payment.events import PaymentCompleted, PaymentFailed, PaymentInitiated, PaymentRefunded
from storefront.shared.clock import utc_now


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


_VALID_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),  # Terminal
    PaymentStatus.REFUNDED: set(),  # Terminal
}


@storefront.aggregate
class Payment:
    order_id = Identifier(required=True)
    amount = Integer(required=True, min_value=0)
    status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def settled_payment_must_have_paid_at(self):
        settled = (PaymentStatus.COMPLETED.value, PaymentStatus.REFUNDED.value)
        if self.status in settled and self.paid_at is None:
            raise ValidationError({"paid_at": ["A settled payment must record when it was paid"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def initiate(cls, order_id, amount):
        now = utc_now()
        payment = cls(
            order_id=order_id,
            amount=amount,
            status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        payment.raise_(
            PaymentInitiated(
                payment_id=str(payment.id),
                order_id=str(order_id),
                amount=amount,
                initiated_at=now,
            )
        )
        return payment

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status, verb):
        current = PaymentStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise DomainError(f"Cannot {verb} {current.value.lower()} payment")

    # -------------------------------------------------------------------
    # Payment lifecycle transitions
    # -------------------------------------------------------------------
    def complete(self):
        self._assert_can_transition(PaymentStatus.COMPLETED, "complete")

        now = utc_now()
        with atomic_change(self):
            self.status = PaymentStatus.COMPLETED.value
            self.paid_at = now
            self.updated_at = now

        self.raise_(
            PaymentCompleted(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                amount=self.amount,
                paid_at=now,
            )
        )

    def fail(self):
        self._assert_can_transition(PaymentStatus.FAILED, "fail")
        self.status = PaymentStatus.FAILED.value
        self.updated_at = utc_now()
        self.raise_(PaymentFailed(payment_id=str(self.id), order_id=str(self.order_id), failed_at=self.updated_at))

    def refund(self):
        self._assert_can_transition(PaymentStatus.REFUNDED, "refund")
        self.status = PaymentStatus.REFUNDED.value
        self.updated_at = utc_now()
        self.raise_(
            PaymentRefunded(
                payment_id=str(self.id),
                order_id=str(self.order_id),
                amount=self.amount,
                refunded_at=self.updated_at,
            )
        )
