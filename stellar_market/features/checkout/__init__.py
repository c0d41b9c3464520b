"""Checkout feature module for Stellar Market."""

from stellar_market.features.checkout.handlers import CheckoutHandlersMixin
from stellar_market.features.checkout.screen import (
    CheckoutConfirmScreen,
    CheckoutResultScreen,
)
from stellar_market.features.checkout.service import (
    CheckoutError,
    CheckoutResult,
    CheckoutService,
    CheckoutStep,
)

__all__ = [
    "CheckoutHandlersMixin",
    "CheckoutConfirmScreen",
    "CheckoutResultScreen",
    "CheckoutError",
    "CheckoutResult",
    "CheckoutService",
    "CheckoutStep",
]
