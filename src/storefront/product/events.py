"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    price = Integer(required=True)
    stock = Integer(required=True)
    status = String(required=True, max_length=20)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductStockChanged:
    """Stock was decreased by a checkout or overwritten by a restock."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    status = String(required=True, max_length=20)


@storefront.event(part_of="Product")
class ProductActivated:
    __version__ = 1

    product_id = Identifier(required=True)


@storefront.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id = Identifier(required=True)
