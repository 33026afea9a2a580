"""Repository for the Cart aggregate.

Reads expire carts whose ``expired_at`` has passed and persist the change.
"""

from protean.core.repository import BaseRepository

from storefront.cart.cart import Cart, CartStatus
from storefront.domain import storefront
from storefront.shared.clock import with_utc_datetimes
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.repository(part_of=Cart)
class CartRepository:
    def get(self, identifier) -> Cart:
        return self._reconciled(BaseRepository.get(self, identifier))

    def list_all(self) -> list[Cart]:
        """All carts, newest first."""
        carts = self._dao.query.order_by("-created_at").all().items
        return [self._reconciled(cart) for cart in carts]

    def find_active(self) -> list[Cart]:
        carts = self._dao.query.filter(status=CartStatus.ACTIVE.value).order_by("-created_at").all().items
        return [cart for cart in map(self._reconciled, carts) if cart.status == CartStatus.ACTIVE.value]

    def _reconciled(self, cart: Cart) -> Cart:
        with_utc_datetimes(cart)
        if cart.reconcile():
            self.add(cart)
            logger.info("Cart expired", cart_id=str(cart.id), expired_at=str(cart.expired_at))
        return cart
