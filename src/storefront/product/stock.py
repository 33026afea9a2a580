"""Product stock updates — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class UpdateProductStock:
    """Overwrite the stock level of a product (restock or inventory correction)."""

    product_id = Identifier(required=True)
    stock = Integer(required=True)


@storefront.command_handler(part_of=Product)
class UpdateProductStockHandler:
    @handle(UpdateProductStock)
    def update_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_stock(command.stock)
        repo.add(product)
