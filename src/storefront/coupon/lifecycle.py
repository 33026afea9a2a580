"""Administrative coupon status changes — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.coupon.coupon import Coupon, CouponStatus
from storefront.domain import storefront


@storefront.command(part_of="Coupon")
class ChangeCouponStatus:
    coupon_id = Identifier(required=True)
    status = String(required=True, choices=CouponStatus)


@storefront.command_handler(part_of=Coupon)
class ChangeCouponStatusHandler:
    @handle(ChangeCouponStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(command.coupon_id)
        coupon.change_status(command.status)
        repo.add(coupon)
