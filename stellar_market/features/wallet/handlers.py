"""Wallet connection event handlers for the Stellar Market TUI."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from stellar_market.features.wallet.screen import SecretKeyScreen, WalletSelectorScreen
from stellar_market.features.wallet.service import (
    KeypairWalletModule,
    WalletError,
    WalletSession,
)
from stellar_market.shared.horizon import HorizonClient
from stellar_market.shared.logging import format_error_for_user
from stellar_market.shared.task_state import TaskStatus

if TYPE_CHECKING:
    from stellar_market.__main__ import MarketApp

logger = logging.getLogger(__name__)


class WalletHandlersMixin:
    """Mixin class providing wallet-related event handlers for MarketApp."""

    session: WalletSession
    horizon: HorizonClient
    connect_task: TaskStatus

    def show_wallet_selector(self: "MarketApp") -> None:
        if self.connect_task.is_busy:
            return
        self.push_screen(
            WalletSelectorScreen(self.session.kit.available_wallets()),
            self._on_wallet_selected,
        )

    def _on_wallet_selected(self: "MarketApp", wallet_id: str | None) -> None:
        if not wallet_id:
            return
        try:
            module = self.session.kit.get_module(wallet_id)
        except WalletError as e:
            logger.error("Connection failed: %s", e)
            self.set_status("Failed to connect wallet.")
            return

        if isinstance(module, KeypairWalletModule) and module.needs_unlock and not module.is_unlocked:

            def on_secret(secret: str | None) -> None:
                if secret:
                    self._unlock_and_connect(module, secret)

            self.push_screen(SecretKeyScreen(), on_secret)
            return

        self.connect_wallet(wallet_id)

    def _unlock_and_connect(
        self: "MarketApp", module: KeypairWalletModule, secret: str
    ) -> None:
        try:
            module.unlock(secret)
        except WalletError as e:
            logger.warning("Unlock failed for %s: %s", module.wallet_id, e)
            self.set_status("Failed to connect wallet.")
            self.notify(str(e), severity="error")
            return
        self.connect_wallet(module.wallet_id)

    def connect_wallet(self: "MarketApp", wallet_id: str) -> None:
        if not self.connect_task.start():
            return
        try:
            address = self.session.connect(wallet_id)
        except Exception as e:
            logger.error("Connection failed: %s", e, exc_info=True)
            self.connect_task.fail(e)
            self.set_status("Failed to connect wallet.")
            return

        self.connect_task.succeed()
        self.set_status(f"Connected with public key: {address[:6]}...")
        self.show_market(True)
        self.update_cart_view()
        self.refresh_history_async()

    def disconnect_wallet(self: "MarketApp") -> None:
        if self.checkout_task.is_busy:
            self.notify("Checkout in progress", severity="warning")
            return
        self.session.disconnect()
        self.connect_task.reset()
        self.show_market(False)
        self.set_status("Wallet disconnected.")

    def fund_with_friendbot(self: "MarketApp") -> None:
        address = self.session.address
        if not address:
            self.notify("Connect a wallet first", severity="warning")
            return

        self.set_status("Requesting test XLM from Friendbot...")

        def worker() -> None:
            try:
                self.horizon.fund_with_friendbot(address)
                self.call_from_thread(self._on_friendbot_finished, None)
            except Exception as e:
                self.call_from_thread(self._on_friendbot_finished, e)

        threading.Thread(target=worker, daemon=True).start()

    def _on_friendbot_finished(self: "MarketApp", error: Exception | None) -> None:
        if error:
            logger.warning("Friendbot funding failed: %s", error)
            self.set_status("Friendbot funding failed.")
            self.notify(format_error_for_user(error), severity="error")
            return
        self.set_status("Account funded with test XLM.")
        self.refresh_history_async()

    def copy_address(self: "MarketApp") -> None:
        address = self.session.address
        if not address:
            return
        import pyperclip

        try:
            pyperclip.copy(address)
        except pyperclip.PyperclipException as e:
            logger.warning("Clipboard unavailable: %s", e)
            self.notify("Clipboard is not available", severity="warning")
            return
        self.notify("Address copied to clipboard!", severity="information")
