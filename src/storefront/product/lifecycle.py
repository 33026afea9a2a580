"""Product lifecycle management — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class ActivateProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductLifecycleHandler:
    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
