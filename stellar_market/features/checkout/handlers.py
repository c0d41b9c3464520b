"""Checkout event handlers for the Stellar Market TUI."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from stellar_market.features.cart.service import Cart, seller_payments
from stellar_market.features.checkout.screen import (
    CheckoutConfirmScreen,
    CheckoutResultScreen,
)
from stellar_market.features.checkout.service import (
    CheckoutError,
    CheckoutResult,
    CheckoutService,
)
from stellar_market.shared.logging import format_error_for_user
from stellar_market.shared.task_state import TaskStatus

if TYPE_CHECKING:
    from stellar_market.__main__ import MarketApp

logger = logging.getLogger(__name__)


class CheckoutHandlersMixin:
    """Mixin class providing checkout handlers for MarketApp."""

    checkout_service: CheckoutService
    checkout_task: TaskStatus

    def start_checkout(self: "MarketApp") -> None:
        if self.checkout_task.is_busy or not self.session.is_connected or self.cart.is_empty:
            return
        self.push_screen(
            CheckoutConfirmScreen(
                seller_payments(self.cart.items),
                self.cart.total_price,
                self.cart.item_count,
            ),
            self._on_checkout_confirmed,
        )

    def _on_checkout_confirmed(self: "MarketApp", confirmed: bool | None) -> None:
        if confirmed:
            self._submit_checkout_async()

    def _submit_checkout_async(self: "MarketApp") -> None:
        if not self.checkout_task.start():
            return
        address = self.session.address
        snapshot = Cart(self.cart.items)
        self.set_status("Processing checkout...")
        self.update_cart_view()

        def worker() -> None:
            try:
                result = self.checkout_service.checkout(snapshot, address)
                self.call_from_thread(self._on_checkout_finished, result, None)
            except CheckoutError as e:
                self.call_from_thread(self._on_checkout_finished, None, e)

        threading.Thread(target=worker, daemon=True).start()

    def _on_checkout_finished(
        self: "MarketApp",
        result: CheckoutResult | None,
        error: CheckoutError | None,
    ) -> None:
        if error is not None or result is None:
            logger.error("Checkout failed: %s", error)
            self.checkout_task.fail(error or "empty result")
            self.set_status("Checkout failed. Check the log for details.")
            if error is not None:
                self.notify(format_error_for_user(error.message), severity="error")
            self.update_cart_view()
            return

        self.checkout_task.succeed()
        self.cart.clear()
        self.set_status(f"Successfully purchased {result.item_count} items!")
        self.update_cart_view()
        self.push_screen(CheckoutResultScreen(result))
        self.refresh_history_async()
