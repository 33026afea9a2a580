"""Product aggregate — sellable item with a price, stock and a sales window.

Status is partly derived: ``OutOfStock`` follows the stock level, while
``Active``/``Inactive`` are set administratively and survive stock changes.

State Machine (explicit transitions only):
    ACTIVE ⇄ INACTIVE
    OUT_OF_STOCK is entered when stock reaches 0 and left on restock (→ ACTIVE)
"""

from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String

from storefront.domain import storefront
from storefront.errors import DomainError
from storefront.product.events import (
    ProductActivated,
    ProductCreated,
    ProductDeactivated,
    ProductStockChanged,
)
from storefront.shared.clock import as_utc, utc_now


class ProductStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    OUT_OF_STOCK = "OutOfStock"


_VALID_TRANSITIONS = {
    ProductStatus.ACTIVE: {ProductStatus.INACTIVE},
    ProductStatus.INACTIVE: {ProductStatus.ACTIVE},
    ProductStatus.OUT_OF_STOCK: set(),
}


@storefront.aggregate
class Product:
    title = String(required=True, max_length=255)
    price = Integer(required=True, min_value=0)
    stock = Integer(required=True, min_value=0)
    begin_at = DateTime(required=True)
    end_at = DateTime(required=True)
    status = String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def title_must_not_be_blank(self):
        if not self.title or not self.title.strip():
            raise ValidationError({"title": ["Title is required"]})

    @invariant.post
    def status_must_follow_stock(self):
        out_of_stock = self.status == ProductStatus.OUT_OF_STOCK.value
        if self.stock == 0 and not out_of_stock:
            raise ValidationError({"status": ["A product without stock must be OutOfStock"]})
        if self.stock > 0 and out_of_stock:
            raise ValidationError({"status": ["A product with stock cannot be OutOfStock"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, title, price, stock, begin_at, end_at, status=None):
        """Create a product. Status is derived from stock when stock is 0."""
        now = utc_now()
        product = cls(
            title=title,
            price=price,
            stock=stock,
            begin_at=begin_at,
            end_at=end_at,
            status=_status_for_stock(stock, status),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                title=product.title,
                price=product.price,
                stock=product.stock,
                status=product.status,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_available(self, now: datetime | None = None) -> bool:
        """True when the product can be sold right now."""
        now = as_utc(now) if now else utc_now()
        return (
            self.status == ProductStatus.ACTIVE.value
            and self.stock > 0
            and as_utc(self.begin_at) <= now <= as_utc(self.end_at)
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def decrease_stock(self, quantity: int) -> None:
        """Take ``quantity`` units out of stock."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if quantity > self.stock:
            raise ValidationError({"stock": [f"Insufficient stock. Available: {self.stock}"]})

        self._change_stock(self.stock - quantity)

    def update_stock(self, stock: int) -> None:
        """Overwrite the stock level (restock or correction)."""
        if stock is None or stock < 0:
            raise ValidationError({"stock": ["Stock must be non-negative"]})

        self._change_stock(stock)

    def _change_stock(self, new_stock):
        previous_stock = self.stock
        with atomic_change(self):
            self.stock = new_stock
            self.status = _status_for_stock(new_stock, self.status)
            self.updated_at = utc_now()

        self.raise_(
            ProductStockChanged(
                product_id=str(self.id),
                previous_stock=previous_stock,
                new_stock=new_stock,
                status=self.status,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status, verb):
        current = ProductStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise DomainError(f"Cannot {verb} {current.value.lower()} product")

    def activate(self):
        self._assert_can_transition(ProductStatus.ACTIVE, "activate")
        self.status = ProductStatus.ACTIVE.value
        self.updated_at = utc_now()
        self.raise_(ProductActivated(product_id=str(self.id)))

    def deactivate(self):
        self._assert_can_transition(ProductStatus.INACTIVE, "deactivate")
        self.status = ProductStatus.INACTIVE.value
        self.updated_at = utc_now()
        self.raise_(ProductDeactivated(product_id=str(self.id)))


def _status_for_stock(stock, status):
    """OutOfStock at zero; otherwise keep Active/Inactive (OutOfStock restocks as Active)."""
    if stock == 0:
        return ProductStatus.OUT_OF_STOCK.value
    if status is None or status == ProductStatus.OUT_OF_STOCK.value:
        return ProductStatus.ACTIVE.value
    return status
