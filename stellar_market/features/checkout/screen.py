"""Checkout confirmation and result screens."""

from decimal import Decimal

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Label, Static

from stellar_market.features.checkout.service import CheckoutResult
from stellar_market.screens import BaseModalScreen
from stellar_market.shared.formatting import format_price, short_address

EXPLORER_URL = "https://stellar.expert/explorer/testnet/tx/"


class CheckoutConfirmScreen(BaseModalScreen):
    BINDINGS = BaseModalScreen.BINDINGS + [("enter", "confirm", "Confirm")]

    def __init__(self, payments: dict[str, str], total: Decimal, item_count: int):
        super().__init__()
        self.payments = payments
        self.total = total
        self.item_count = item_count

    def compose(self) -> ComposeResult:
        yield Label("🛒 Confirm Purchase", id="confirm-title")
        yield Static(f"Items: {self.item_count}")
        yield Label("Payments:")
        lines = [
            f"  - {amount} XLM → {short_address(seller)}"
            for seller, amount in self.payments.items()
        ]
        yield Static("\n".join(lines), id="payments-list")
        yield Static(f"Total: {format_price(self.total)} XLM")
        yield Static(
            "The transaction is valid for 30 seconds after it is built.",
            classes="hint",
        )
        yield Horizontal(
            Button("✓ Confirm", id="confirm-button", variant="primary"),
            Button("✗ Cancel", id="cancel-button"),
        )

    def action_confirm(self) -> None:
        self.dismiss(True)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "confirm-button":
            self.dismiss(True)
        elif event.button.id == "cancel-button":
            self.dismiss(False)


class CheckoutResultScreen(BaseModalScreen):
    def __init__(self, result: CheckoutResult):
        super().__init__()
        self.result = result

    def compose(self) -> ComposeResult:
        yield Label("✅ Purchase Complete!", id="result-title")
        yield Static(
            f"Paid {self.result.seller_count} seller(s) for {self.result.item_count} item(s)"
        )
        yield Label("Transaction Hash:")
        yield Static(self.result.hash, id="tx-hash-display")
        yield Label(f"Explorer: {EXPLORER_URL}{self.result.hash}")
        yield Button("📋 Copy Hash", id="copy-hash-button", variant="primary")
        yield Button("❌ Close", id="close-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "copy-hash-button":
            import pyperclip

            try:
                pyperclip.copy(self.result.hash)
            except pyperclip.PyperclipException:
                self.notify("Clipboard is not available", severity="warning")
                return
            self.notify("Transaction hash copied to clipboard!", severity="information")
        elif event.button.id == "close-button":
            self.dismiss(None)
