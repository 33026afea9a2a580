"""Repository for the Coupon aggregate.

Every read reconciles the coupon's status with the clock and writes the
correction back when it changed, so stored status heals lazily.
"""

from protean.core.repository import BaseRepository

from storefront.coupon.coupon import Coupon, CouponStatus
from storefront.domain import storefront
from storefront.shared.clock import with_utc_datetimes
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.repository(part_of=Coupon)
class CouponRepository:
    def get(self, identifier) -> Coupon:
        return self._reconciled(BaseRepository.get(self, identifier))

    def find_by_code(self, code: str) -> Coupon | None:
        coupons = self._dao.query.filter(code=code).all().items
        if not coupons:
            return None
        return self._reconciled(coupons[0])

    def list_all(self) -> list[Coupon]:
        """All coupons, newest first."""
        coupons = self._dao.query.order_by("-created_at").all().items
        return [self._reconciled(coupon) for coupon in coupons]

    def find_active(self) -> list[Coupon]:
        return [coupon for coupon in self.list_all() if coupon.status == CouponStatus.ACTIVE.value]

    def _reconciled(self, coupon: Coupon) -> Coupon:
        with_utc_datetimes(coupon)
        previous = coupon.status
        if coupon.reconcile():
            self.add(coupon)
            logger.info(
                "Coupon status reconciled",
                coupon_id=str(coupon.id),
                previous_status=previous,
                new_status=coupon.status,
            )
        return coupon
