"""Repository for the Order aggregate."""

from protean.core.repository import BaseRepository

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.clock import with_utc_datetimes


@storefront.repository(part_of=Order)
class OrderRepository:
    def get(self, identifier) -> Order:
        return with_utc_datetimes(BaseRepository.get(self, identifier))

    def list_all(self) -> list[Order]:
        """All orders, newest first."""
        orders = self._dao.query.order_by("-created_at").all().items
        return [with_utc_datetimes(order) for order in orders]

    def find_by_cart_id(self, cart_id) -> Order | None:
        orders = self._dao.query.filter(cart_id=str(cart_id)).all().items
        return with_utc_datetimes(orders[0]) if orders else None
