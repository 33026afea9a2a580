"""Repository for the Payment aggregate."""

from protean.core.repository import BaseRepository

from storefront.domain import storefront
from storefront.payment.payment import Payment
from storefront.shared.clock import with_utc_datetimes


@storefront.repository(part_of=Payment)
class PaymentRepository:
    def get(self, identifier) -> Payment:
        return with_utc_datetimes(BaseRepository.get(self, identifier))

    def list_all(self) -> list[Payment]:
        """All payments, newest first."""
        payments = self._dao.query.order_by("-created_at").all().items
        return [with_utc_datetimes(payment) for payment in payments]

    def find_by_order_id(self, order_id) -> Payment | None:
        payments = self._dao.query.filter(order_id=str(order_id)).all().items
        return with_utc_datetimes(payments[0]) if payments else None
