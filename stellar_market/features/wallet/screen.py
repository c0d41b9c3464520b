"""Wallet connection modal screens for Stellar Market."""

from typing import cast

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Input, Label, Static

from stellar_market.features.wallet.service import WalletInfo
from stellar_market.screens import BaseModalScreen


class WalletSelectorScreen(BaseModalScreen):
    """Lists the kit's wallet modules; dismisses with the chosen wallet id."""

    def __init__(self, wallets: list[WalletInfo]):
        super().__init__()
        self.wallets = wallets

    def compose(self) -> ComposeResult:
        yield Label("🔌 Connect Wallet", id="wallet-selector-title")
        for wallet in self.wallets:
            yield Button(
                wallet.name if wallet.available else f"{wallet.name} (not configured)",
                id=f"wallet-{wallet.wallet_id}",
                variant="primary" if wallet.available else "default",
                disabled=not wallet.available,
            )
        yield Button("✗ Cancel", id="cancel-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "cancel-button":
            self.dismiss(None)
        elif button_id.startswith("wallet-"):
            self.dismiss(button_id.removeprefix("wallet-"))


class SecretKeyScreen(BaseModalScreen):
    BINDINGS = BaseModalScreen.BINDINGS + [("enter", "confirm", "Unlock")]

    def compose(self) -> ComposeResult:
        yield Label("🔑 Unlock with Secret Key", id="secret-title")
        yield Input(placeholder="S... (secret seed)", id="secret-input", password=True)
        yield Static(
            "The key stays in memory for this session only. Never share it.",
            classes="hint",
        )
        yield Horizontal(
            Button("✓ Unlock", id="unlock-button", variant="primary"),
            Button("✗ Cancel", id="cancel-button"),
        )

    def action_confirm(self) -> None:
        secret = cast(Input, self.query_one("#secret-input")).value.strip()
        if secret:
            self.dismiss(secret)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "unlock-button":
            self.action_confirm()
        elif event.button.id == "cancel-button":
            self.dismiss(None)
