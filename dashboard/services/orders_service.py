"""Order pricing: the server, not the client, decides ``total_amount``."""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from dashboard.core.errors import NotFoundError, ValidationError
from dashboard.models.schemas import OrderIn
from dashboard.store import Record, Store

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

# the only order columns a client may influence
WRITABLE_FIELDS = ("customer_id", "product_id", "quantity", "status")


def compute_total(price: Decimal, quantity: int) -> Decimal:
    try:
        total = (Decimal(price) * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError("Order total is out of range")
    if total < 0:
        raise ValidationError("Order total cannot be negative")
    return total


def build_order_record(order: OrderIn, price: Decimal) -> Record:
    """Row values for an insert/update, with the derived total filled in.

    Built from ``WRITABLE_FIELDS`` only, so whatever the client sent as
    ``total_amount`` (or any other extra field) never reaches the store.
    """
    extra = order.model_extra or {}
    if "total_amount" in extra:
        logger.debug("Ignoring client-supplied total_amount=%r", extra["total_amount"])

    record = {field: getattr(order, field) for field in WRITABLE_FIELDS}
    record["total_amount"] = compute_total(price, order.quantity)
    return record


def _price_order(store: Store, order: OrderIn) -> Record:
    if store.get_customer(order.customer_id) is None:
        raise ValidationError("Customer not found")
    price: Optional[Decimal] = store.get_product_price(order.product_id)
    if price is None:
        raise ValidationError("Product not found")
    return build_order_record(order, price)


def place_order(store: Store, order: OrderIn) -> Record:
    record = _price_order(store, order)
    created = store.create_order(record)
    logger.info("Order %s created (total %s)", created["id"], record["total_amount"])
    return created


def reprice_order(store: Store, order_id: int, order: OrderIn) -> Record:
    record = _price_order(store, order)
    updated = store.update_order(order_id, record)
    if updated is None:
        raise NotFoundError("Order not found")
    return updated
