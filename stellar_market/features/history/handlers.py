"""Transaction history event handlers for the Stellar Market TUI."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, cast

from textual.widgets import DataTable, Static

from stellar_market.features.history.screen import TransactionDetailScreen
from stellar_market.features.history.service import (
    HistoryError,
    HistoryService,
    TransactionRecord,
)
from stellar_market.shared.task_state import TaskStatus

if TYPE_CHECKING:
    from stellar_market.__main__ import MarketApp

logger = logging.getLogger(__name__)


class HistoryHandlersMixin:
    """Mixin class providing history handlers for MarketApp."""

    history_service: HistoryService
    history_task: TaskStatus
    _history_generation: int
    _history_records: list[TransactionRecord]

    def refresh_history_async(self: "MarketApp") -> None:
        status = cast(Static, self.query_one("#history-status"))
        address = self.session.address
        if not address:
            status.update("[red]Error: Wallet not connected.[/red]")
            return

        # A newer request supersedes one still in flight; the older result
        # is discarded when it arrives.
        self._history_generation += 1
        generation = self._history_generation
        self.history_task.start()
        status.update("[yellow]Loading transactions...[/yellow]")

        def worker() -> None:
            try:
                records = self.history_service.fetch(address)
                self.call_from_thread(
                    self._on_history_loaded, generation, address, records, None
                )
            except HistoryError as e:
                self.call_from_thread(
                    self._on_history_loaded, generation, address, None, e
                )

        threading.Thread(target=worker, daemon=True).start()

    def _on_history_loaded(
        self: "MarketApp",
        generation: int,
        address: str,
        records: list[TransactionRecord] | None,
        error: HistoryError | None,
    ) -> None:
        if generation != self._history_generation or address != self.session.address:
            logger.info("Discarding stale history result for %s", address)
            return

        status = cast(Static, self.query_one("#history-status"))
        if error is not None or records is None:
            self.history_task.fail(error or "empty result")
            logger.error("History fetch failed: %s", error)
            status.update(f"[red]Error: {error}[/red]")
            return

        self.history_task.succeed()
        self.render_history(records)

    def render_history(self: "MarketApp", records: list[TransactionRecord]) -> None:
        self._history_records = records
        table = cast(DataTable, self.query_one("#history-table"))
        table.clear(columns=True)
        table.add_column("ID", key="hash")
        table.add_column("Date", key="date")
        table.add_column("Status", key="status")
        table.add_column("Payments", key="payments")
        table.add_column("Fee", key="fee")

        status = cast(Static, self.query_one("#history-status"))
        if not records:
            status.update("No purchase transactions found.")
            return

        status.update(f"{len(records)} recent transactions (select a row for details)")
        for index, record in enumerate(records):
            if record.payments:
                payments = ", ".join(
                    f"{p.amount} {p.asset_label} → {p.short_destination}"
                    for p in record.payments
                )
            else:
                payments = "-"
            table.add_row(
                record.short_hash,
                record.display_date,
                "[green]Success[/green]" if record.successful else "[red]Failed[/red]",
                payments,
                record.fee_display,
                key=str(index),
            )

    def show_history_detail(self: "MarketApp", row_key: str | None) -> None:
        if row_key is None:
            return
        try:
            record = self._history_records[int(row_key)]
        except (ValueError, IndexError):
            return
        self.push_screen(TransactionDetailScreen(record))
