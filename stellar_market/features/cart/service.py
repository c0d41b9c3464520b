"""Shopping cart state and per-seller payment aggregation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from stellar_market.shared.formatting import format_amount, quantize_stroops
from stellar_market.shared.validation import AmountValidator, QuantityValidator

logger = logging.getLogger(__name__)


@dataclass
class CartItem:
    """One cart line. Prices are decimal strings in XLM."""

    id: str
    name: str
    price: str
    seller: str
    quantity: int = 1
    image: str = ""

    def __post_init__(self) -> None:
        price_result = AmountValidator.validate_price(self.price)
        if not price_result.is_valid:
            raise ValueError(f"Invalid price for {self.id}: {price_result.error_message}")
        quantity_result = QuantityValidator.validate(self.quantity)
        if not quantity_result.is_valid:
            raise ValueError(
                f"Invalid quantity for {self.id}: {quantity_result.error_message}"
            )
        if not self.seller:
            raise ValueError(f"Item {self.id} has no seller")
        self.price = format(price_result.normalized_value, "f")
        self.quantity = quantity_result.normalized_value

    @property
    def unit_price(self) -> Decimal:
        return Decimal(self.price)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class Cart:
    """In-memory cart for the current session. Nothing is persisted."""

    def __init__(self, items: Iterable[CartItem] | None = None):
        self._items: list[CartItem] = []
        for item in items or []:
            self.add_item(item)

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def unit_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total_price(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal(0))

    def get_item(self, item_id: str) -> CartItem | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def add_item(self, item: CartItem) -> CartItem:
        existing = self.get_item(item.id)
        if existing is not None:
            existing.quantity += item.quantity
            logger.debug("Cart: %s quantity now %d", item.id, existing.quantity)
            return existing
        self._items.append(item)
        logger.debug("Cart: added %s x%d", item.id, item.quantity)
        return item

    def remove_item(self, item_id: str) -> bool:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                logger.debug("Cart: removed %s", item_id)
                return True
        return False

    def clear(self) -> None:
        self._items.clear()
        logger.debug("Cart cleared")


def aggregate_by_seller(items: Iterable[CartItem]) -> dict[str, Decimal]:
    """Sum price x quantity per seller, in first-seen order, truncated to stroops."""
    totals: dict[str, Decimal] = {}
    for item in items:
        totals[item.seller] = totals.get(item.seller, Decimal(0)) + item.subtotal
    return {seller: quantize_stroops(amount) for seller, amount in totals.items()}


def seller_payments(items: Iterable[CartItem]) -> dict[str, str]:
    return {
        seller: format_amount(amount)
        for seller, amount in aggregate_by_seller(items).items()
    }
