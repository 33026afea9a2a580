"""Repository for the Product aggregate."""

from protean.core.repository import BaseRepository

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.clock import with_utc_datetimes


@storefront.repository(part_of=Product)
class ProductRepository:
    def get(self, identifier) -> Product:
        return with_utc_datetimes(BaseRepository.get(self, identifier))

    def list_all(self) -> list[Product]:
        """All products, newest first."""
        products = self._dao.query.order_by("-created_at").all().items
        return [with_utc_datetimes(product) for product in products]
