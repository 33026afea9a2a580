"""Coupon creation — command and handler.

Coupon codes are unique; the check happens here, against the repository,
rather than as a storage constraint.
"""

from protean import handle
from protean.fields import DateTime, Integer, String
from protean.utils.globals import current_domain

from storefront.coupon.coupon import Coupon
from storefront.domain import storefront
from storefront.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=20)
    discount_value = Integer(required=True)
    valid_from = DateTime(required=True)
    valid_until = DateTime(required=True)


@storefront.command_handler(part_of=Coupon)
class CreateCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        if repo.find_by_code(command.code) is not None:
            raise ConflictError("Coupon code already exists")

        coupon = Coupon.create(
            code=command.code,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            valid_from=command.valid_from,
            valid_until=command.valid_until,
        )
        repo.add(coupon)

        logger.info("Coupon created", coupon_id=str(coupon.id), code=coupon.code, status=coupon.status)
        return str(coupon.id)
