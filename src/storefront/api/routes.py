"""FastAPI endpoints for the Storefront domain.

Writes go through Protean commands processed synchronously; reads go straight
to the repositories, which reconcile time-derived statuses as they load.
"""

from fastapi import APIRouter
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    CalculateDiscountRequest,
    CartResponse,
    ChangeCouponStatusRequest,
    CheckoutResponse,
    CouponResponse,
    CreateCartRequest,
    CreateCouponRequest,
    CreateOrderRequest,
    CreatePaymentRequest,
    CreateProductRequest,
    DiscountQuoteResponse,
    IdResponse,
    OrderResponse,
    PaymentResponse,
    ProductResponse,
    StatusResponse,
    UpdateCartCouponRequest,
    UpdateCartQuantityRequest,
    UpdateStockRequest,
)
from storefront.cart.cart import Cart
from storefront.cart.management import CreateCart, UpdateCartCoupon, UpdateCartQuantity
from storefront.checkout.checkout import CheckoutCart
from storefront.coupon.coupon import Coupon
from storefront.coupon.creation import CreateCoupon
from storefront.coupon.discount import quote_discount
from storefront.coupon.lifecycle import ChangeCouponStatus
from storefront.order.creation import CreateOrder
from storefront.order.lifecycle import CancelOrder, CompleteOrder, ConfirmOrder
from storefront.order.order import Order
from storefront.payment.creation import InitiatePayment
from storefront.payment.lifecycle import CompletePayment, FailPayment, RefundPayment
from storefront.payment.payment import Payment
from storefront.product.creation import CreateProduct
from storefront.product.lifecycle import ActivateProduct, DeactivateProduct
from storefront.product.product import Product
from storefront.product.stock import UpdateProductStock

product_router = APIRouter(prefix="/products", tags=["products"])
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])
cart_router = APIRouter(prefix="/carts", tags=["carts"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
payment_router = APIRouter(prefix="/payments", tags=["payments"])


def _optional_id(value) -> str | None:
    return str(value) if value else None


def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        title=product.title,
        price=product.price,
        stock=product.stock,
        begin_at=product.begin_at,
        end_at=product.end_at,
        status=product.status,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def _coupon_response(coupon: Coupon) -> CouponResponse:
    return CouponResponse(
        id=str(coupon.id),
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        valid_from=coupon.valid_from,
        valid_until=coupon.valid_until,
        status=coupon.status,
        created_at=coupon.created_at,
        updated_at=coupon.updated_at,
    )


def _cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        id=str(cart.id),
        product_id=str(cart.product_id),
        coupon_id=_optional_id(cart.coupon_id),
        quantity=cart.quantity,
        expired_at=cart.expired_at,
        keep_until=cart.keep_until,
        status=cart.status,
        created_at=cart.created_at,
        updated_at=cart.updated_at,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        cart_id=str(order.cart_id),
        product_id=str(order.product_id),
        coupon_id=_optional_id(order.coupon_id),
        quantity=order.quantity,
        paid_amount=order.paid_amount,
        discount_amount=order.discount_amount,
        status=order.status,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=str(payment.id),
        order_id=str(payment.order_id),
        amount=payment.amount,
        status=payment.status,
        paid_at=payment.paid_at,
        created_at=payment.created_at,
        updated_at=payment.updated_at,
    )


def _coupon_by_code(code: str) -> Coupon:
    coupon = current_domain.repository_for(Coupon).find_by_code(code)
    if coupon is None:
        raise ObjectNotFoundError({"_entity": "Coupon not found"})
    return coupon


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def list_products() -> list[ProductResponse]:
    return [_product_response(p) for p in current_domain.repository_for(Product).list_all()]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(current_domain.repository_for(Product).get(product_id))


@product_router.post("", status_code=201, response_model=IdResponse)
async def create_product(body: CreateProductRequest) -> IdResponse:
    command = CreateProduct(
        title=body.title,
        price=body.price,
        stock=body.stock,
        begin_at=body.begin_at,
        end_at=body.end_at,
        status=body.status,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@product_router.patch("/{product_id}/stock", response_model=StatusResponse)
async def update_product_stock(product_id: str, body: UpdateStockRequest) -> StatusResponse:
    current_domain.process(UpdateProductStock(product_id=product_id, stock=body.stock), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/activate", response_model=StatusResponse)
async def activate_product(product_id: str) -> StatusResponse:
    current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/deactivate", response_model=StatusResponse)
async def deactivate_product(product_id: str) -> StatusResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Coupon endpoints ---


@coupon_router.get("", response_model=list[CouponResponse])
async def list_coupons() -> list[CouponResponse]:
    return [_coupon_response(c) for c in current_domain.repository_for(Coupon).list_all()]


@coupon_router.get("/active", response_model=list[CouponResponse])
async def list_active_coupons() -> list[CouponResponse]:
    return [_coupon_response(c) for c in current_domain.repository_for(Coupon).find_active()]


@coupon_router.get("/{code}", response_model=CouponResponse)
async def get_coupon(code: str) -> CouponResponse:
    return _coupon_response(_coupon_by_code(code))


@coupon_router.post("", status_code=201, response_model=IdResponse)
async def create_coupon(body: CreateCouponRequest) -> IdResponse:
    command = CreateCoupon(
        code=body.code,
        discount_type=body.discount_type,
        discount_value=body.discount_value,
        valid_from=body.valid_from,
        valid_until=body.valid_until,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@coupon_router.post("/{code}/calculate", response_model=DiscountQuoteResponse)
async def calculate_discount(code: str, body: CalculateDiscountRequest) -> DiscountQuoteResponse:
    quote = quote_discount(code, body.original_price)
    return DiscountQuoteResponse(
        original_price=quote.original_price,
        discount_amount=quote.discount_amount,
        final_price=quote.final_price,
        coupon_code=quote.coupon_code,
    )


@coupon_router.put("/{code}/status", response_model=StatusResponse)
async def change_coupon_status(code: str, body: ChangeCouponStatusRequest) -> StatusResponse:
    coupon = _coupon_by_code(code)
    current_domain.process(ChangeCouponStatus(coupon_id=coupon.id, status=body.status), asynchronous=False)
    return StatusResponse()


# --- Cart endpoints ---


@cart_router.get("", response_model=list[CartResponse])
async def list_carts() -> list[CartResponse]:
    return [_cart_response(c) for c in current_domain.repository_for(Cart).list_all()]


@cart_router.get("/active", response_model=list[CartResponse])
async def list_active_carts() -> list[CartResponse]:
    return [_cart_response(c) for c in current_domain.repository_for(Cart).find_active()]


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    return _cart_response(current_domain.repository_for(Cart).get(cart_id))


@cart_router.post("", status_code=201, response_model=IdResponse)
async def create_cart(body: CreateCartRequest) -> IdResponse:
    command = CreateCart(
        product_id=body.product_id,
        quantity=body.quantity,
        coupon_id=body.coupon_id,
        expired_at=body.expired_at,
        keep_until=body.keep_until,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@cart_router.patch("/{cart_id}/coupon", response_model=StatusResponse)
async def update_cart_coupon(cart_id: str, body: UpdateCartCouponRequest) -> StatusResponse:
    current_domain.process(UpdateCartCoupon(cart_id=cart_id, coupon_id=body.coupon_id), asynchronous=False)
    return StatusResponse()


@cart_router.patch("/{cart_id}/quantity", response_model=StatusResponse)
async def update_cart_quantity(cart_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    current_domain.process(UpdateCartQuantity(cart_id=cart_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(cart_id: str) -> CheckoutResponse:
    result = current_domain.process(CheckoutCart(cart_id=cart_id), asynchronous=False)
    return CheckoutResponse(**result.to_dict())


# --- Order endpoints ---


@order_router.get("", response_model=list[OrderResponse])
async def list_orders() -> list[OrderResponse]:
    return [_order_response(o) for o in current_domain.repository_for(Order).list_all()]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(current_domain.repository_for(Order).get(order_id))


@order_router.post("", status_code=201, response_model=IdResponse)
async def create_order(body: CreateOrderRequest) -> IdResponse:
    command = CreateOrder(
        cart_id=body.cart_id,
        product_id=body.product_id,
        coupon_id=body.coupon_id,
        quantity=body.quantity,
        paid_amount=body.paid_amount,
        discount_amount=body.discount_amount,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@order_router.post("/{order_id}/confirm", response_model=StatusResponse)
async def confirm_order(order_id: str) -> StatusResponse:
    current_domain.process(ConfirmOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str) -> StatusResponse:
    current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


# --- Payment endpoints ---


@payment_router.get("", response_model=list[PaymentResponse])
async def list_payments() -> list[PaymentResponse]:
    return [_payment_response(p) for p in current_domain.repository_for(Payment).list_all()]


@payment_router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: str) -> PaymentResponse:
    return _payment_response(current_domain.repository_for(Payment).get(payment_id))


@payment_router.post("", status_code=201, response_model=IdResponse)
async def create_payment(body: CreatePaymentRequest) -> IdResponse:
    result = current_domain.process(InitiatePayment(order_id=body.order_id, amount=body.amount), asynchronous=False)
    return IdResponse(id=result)


@payment_router.post("/{payment_id}/complete", response_model=StatusResponse)
async def complete_payment(payment_id: str) -> StatusResponse:
    current_domain.process(CompletePayment(payment_id=payment_id), asynchronous=False)
    return StatusResponse()


@payment_router.post("/{payment_id}/fail", response_model=StatusResponse)
async def fail_payment(payment_id: str) -> StatusResponse:
    current_domain.process(FailPayment(payment_id=payment_id), asynchronous=False)
    return StatusResponse()


@payment_router.post("/{payment_id}/refund", response_model=StatusResponse)
async def refund_payment(payment_id: str) -> StatusResponse:
    current_domain.process(RefundPayment(payment_id=payment_id), asynchronous=False)
    return StatusResponse()
