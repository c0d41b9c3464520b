"""Cart feature module for Stellar Market."""

from stellar_market.features.cart.handlers import CartHandlersMixin
from stellar_market.features.cart.service import (
    Cart,
    CartItem,
    aggregate_by_seller,
    seller_payments,
)

__all__ = [
    "CartHandlersMixin",
    "Cart",
    "CartItem",
    "aggregate_by_seller",
    "seller_payments",
]
