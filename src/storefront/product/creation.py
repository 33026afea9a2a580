"""Product creation — command and handler."""

from protean import handle
from protean.fields import DateTime, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    title = String(required=True, max_length=255)
    price = Integer(required=True, min_value=0)
    stock = Integer(required=True, min_value=0)
    begin_at = DateTime(required=True)
    end_at = DateTime(required=True)
    status = String(max_length=20)


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            title=command.title,
            price=command.price,
            stock=command.stock,
            begin_at=command.begin_at,
            end_at=command.end_at,
            status=command.status,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), stock=product.stock, status=product.status)
        return str(product.id)
