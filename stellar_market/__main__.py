"""Main application entry point for Stellar Market."""

from __future__ import annotations

import logging
import threading
from typing import cast

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Label,
    Static,
    Tab,
    Tabs,
)

from stellar_market.features.cart.handlers import CartHandlersMixin
from stellar_market.features.cart.service import Cart
from stellar_market.features.catalog.service import CatalogError, ProductCatalog
from stellar_market.features.checkout.handlers import CheckoutHandlersMixin
from stellar_market.features.checkout.service import CheckoutService
from stellar_market.features.history.handlers import HistoryHandlersMixin
from stellar_market.features.history.service import HistoryPolicy, HistoryService
from stellar_market.features.wallet.handlers import WalletHandlersMixin
from stellar_market.features.wallet.service import WalletKit, WalletSession
from stellar_market.shared.config import MarketConfig
from stellar_market.shared.horizon import HorizonClient
from stellar_market.shared.logging import format_error_for_user, setup_logging
from stellar_market.shared.network import NetworkError
from stellar_market.shared.task_state import TaskStatus
from stellar_market.styles import CSS

logger = logging.getLogger(__name__)


class MarketApp(
    WalletHandlersMixin,
    CartHandlersMixin,
    CheckoutHandlersMixin,
    HistoryHandlersMixin,
    App,
):
    CSS = CSS
    TITLE = "Stellar Market"

    BINDINGS = [
        ("c", "connect", "Connect"),
        ("a", "add_to_cart", "Add to cart"),
        ("r", "refresh_history", "Refresh"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: MarketConfig | None = None,
        horizon: HorizonClient | None = None,
        kit: WalletKit | None = None,
        catalog: ProductCatalog | None = None,
    ):
        super().__init__()
        self.config = config or MarketConfig()
        self.horizon = horizon or HorizonClient(
            horizon_url=self.config.horizon_url,
            friendbot_url=self.config.friendbot_url,
            timeout_config=self.config.timeout_config,
            retry_config=self.config.retry_config,
        )
        self.session = WalletSession(kit or WalletKit())
        self.catalog = catalog or ProductCatalog.from_file(self.config.catalog_path)
        self.cart = Cart()
        self.checkout_service = CheckoutService(
            self.horizon,
            self.session.kit,
            self.config.network_passphrase,
            self.config.transaction_timeout,
        )
        self.history_service = HistoryService(
            self.horizon,
            HistoryPolicy.from_settings(
                self.config.history_limit,
                self.config.history_strategy,
                self.config.history_keep_empty,
            ),
        )

        self.connect_task = TaskStatus("connect")
        self.checkout_task = TaskStatus("checkout")
        self.history_task = TaskStatus("history")
        self._history_generation = 0
        self._history_records = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("[dim]● Checking...[/dim]", id="connection-status")
        yield Static("Connect a wallet to start shopping.", id="status-line")

        with Container(id="connect-panel"):
            yield Horizontal(
                Button("🔌 Connect Wallet", id="connect-button", variant="primary"),
                Button("📋 Copy Address", id="copy-address-button", classes="hidden"),
                Button("💧 Fund (Friendbot)", id="friendbot-button", classes="hidden"),
                Button("⏏ Disconnect", id="disconnect-button", classes="hidden"),
                id="wallet-row",
            )

        self.tabs = Tabs(
            Tab("Market", id="market-tab-btn"),
            Tab("History", id="history-tab-btn"),
        )
        yield self.tabs

        with Container(id="market-tab"):
            with Horizontal(id="market-columns"):
                with Vertical(id="products-panel"):
                    yield Label("🛍 Products", id="market-title")
                    yield DataTable(id="products-table", cursor_type="row")
                    yield Button("➕ Add to Cart", id="add-to-cart-button")
                with Vertical(id="cart-panel"):
                    yield Label("🛒 Cart", id="cart-title")
                    yield DataTable(id="cart-table", cursor_type="row")
                    yield Static("Your cart is empty", id="cart-total")
                    yield Horizontal(
                        Button("🗑 Remove", id="remove-from-cart-button"),
                        Button("Checkout", id="checkout-button", variant="primary"),
                    )

        with Container(id="history-tab"):
            yield Label("📜 Transaction History", id="history-title")
            yield Static(id="history-status")
            yield DataTable(id="history-table", cursor_type="row")
            yield Button("🔄 Refresh", id="refresh-history-button")

        yield Footer()

    def on_mount(self) -> None:
        logger.info("Starting Stellar Market against %s", self.config.horizon_url)
        self.update_products_table()
        self.update_cart_view()
        self.action_switch_tab("market")
        self.test_horizon_connection()

    def set_status(self, message: str) -> None:
        logger.info("Status: %s", message)
        cast(Static, self.query_one("#status-line")).update(message)

    def show_market(self, connected: bool) -> None:
        for button_id in ("#copy-address-button", "#friendbot-button", "#disconnect-button"):
            self.query_one(button_id).set_class(not connected, "hidden")
        connect_button = cast(Button, self.query_one("#connect-button"))
        connect_button.set_class(connected, "hidden")

        if not connected:
            # Drops any history fetch still in flight for the old address.
            self._history_generation += 1
            self.history_task.reset()
            self._history_records = []
            cast(DataTable, self.query_one("#history-table")).clear()
            cast(Static, self.query_one("#history-status")).update("")
        self.update_cart_view()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if not event.tab or not event.tab.id:
            return
        self.action_switch_tab(event.tab.id.replace("-tab-btn", ""))

    def action_switch_tab(self, tab_name: str) -> None:
        for name in ("market", "history"):
            self.query_one(f"#{name}-tab").display = name == tab_name
        if tab_name == "history" and self.session.is_connected and not self.history_task.is_busy:
            self.refresh_history_async()

    def action_connect(self) -> None:
        if not self.session.is_connected:
            self.show_wallet_selector()

    def action_add_to_cart(self) -> None:
        self.add_selected_product()

    def action_refresh_history(self) -> None:
        self.refresh_history_async()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        logger.debug("Button pressed: %s", button_id)

        if button_id == "connect-button":
            self.show_wallet_selector()
        elif button_id == "disconnect-button":
            self.disconnect_wallet()
        elif button_id == "copy-address-button":
            self.copy_address()
        elif button_id == "friendbot-button":
            self.fund_with_friendbot()
        elif button_id == "add-to-cart-button":
            self.add_selected_product()
        elif button_id == "remove-from-cart-button":
            self.remove_selected_cart_item()
        elif button_id == "checkout-button":
            self.start_checkout()
        elif button_id == "refresh-history-button":
            self.refresh_history_async()
        else:
            logger.warning("Unknown button ID: %s", button_id)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        table_id = event.data_table.id
        if table_id == "products-table":
            self.add_selected_product()
        elif table_id == "history-table":
            self.show_history_detail(event.row_key.value)

    def test_horizon_connection(self) -> None:
        def worker() -> None:
            try:
                result = self.horizon.test_connection()
                self.call_from_thread(self._on_horizon_connection_tested, result, None)
            except NetworkError as e:
                self.call_from_thread(self._on_horizon_connection_tested, None, e)

        threading.Thread(target=worker, daemon=True).start()

    def _on_horizon_connection_tested(
        self, result: dict | None, error: NetworkError | None
    ) -> None:
        status = cast(Static, self.query_one("#connection-status"))
        if error or not result or not result.get("healthy"):
            logger.warning("Horizon health check failed: %s", error)
            status.update("[red]● Horizon unreachable[/red]")
            if error:
                self.notify(format_error_for_user(error), severity="warning")
            return
        status.update(
            f"[green]● Horizon {result['horizon_version']} "
            f"(ledger {result['latest_ledger']})[/green]"
        )


def main() -> None:
    """Entry point for the application."""
    setup_logging()
    config = MarketConfig.load()
    try:
        catalog = ProductCatalog.from_file(config.catalog_path)
    except CatalogError as e:
        logger.error("Could not load product catalog: %s", e)
        raise SystemExit(f"Could not load product catalog: {e}") from e
    app = MarketApp(config=config, catalog=catalog)
    app.run()


if __name__ == "__main__":
    main()
