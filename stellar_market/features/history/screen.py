"""Transaction detail screen."""

from textual.app import ComposeResult
from textual.widgets import Button, Label, Static

from stellar_market.features.history.service import TransactionRecord
from stellar_market.screens import BaseModalScreen


def describe_payments(record: TransactionRecord) -> str:
    if not record.payments:
        return "No payment details available for this transaction."
    return "\n".join(
        f"To: {payment.short_destination}  Amount: {payment.amount} {payment.asset_label}"
        for payment in record.payments
    )


class TransactionDetailScreen(BaseModalScreen):
    def __init__(self, record: TransactionRecord):
        super().__init__()
        self.record = record

    def compose(self) -> ComposeResult:
        record = self.record
        status_color = "green" if record.successful else "red"
        yield Label("📜 Transaction", id="detail-title")
        yield Static(f"ID: {record.short_hash}")
        yield Static(record.display_date)
        yield Static(f"[{status_color}]{record.status_label}[/{status_color}]")
        yield Label("Payments Made:")
        yield Static(describe_payments(record), id="payment-details")
        if record.memo:
            yield Static(f"Memo: {record.memo}", markup=False)
        yield Static(f"Fee Paid: {record.fee_display}")
        yield Button("❌ Close", id="close-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "close-button":
            self.dismiss(None)
