"""Outgoing payment history for the connected account."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol

from stellar_market.shared.formatting import (
    NATIVE_ASSET_LABEL,
    format_amount,
    format_timestamp,
    parse_timestamp,
    short_address,
    short_hash,
    stroops_to_xlm,
)

logger = logging.getLogger(__name__)


class HistoryStrategy(Enum):
    # List transactions, then query each one's operations.
    PER_TRANSACTION = "per_transaction"
    # One payments query with the parent transactions joined in.
    JOINED = "joined"


@dataclass(frozen=True)
class HistoryPolicy:
    limit: int = 20
    strategy: HistoryStrategy = HistoryStrategy.PER_TRANSACTION
    keep_empty: bool = True

    @classmethod
    def from_settings(
        cls, limit: int, strategy: str, keep_empty: bool
    ) -> "HistoryPolicy":
        try:
            parsed = HistoryStrategy(strategy)
        except ValueError:
            logger.warning("Unknown history strategy %r, listing per transaction", strategy)
            parsed = HistoryStrategy.PER_TRANSACTION
        return cls(limit=limit, strategy=parsed, keep_empty=keep_empty)


class HistoryError(Exception):
    pass


class HistoryReader(Protocol):
    def transactions_for_account(
        self, address: str, limit: int = 20, order: str = "desc"
    ) -> list[dict[str, Any]]: ...
    def operations_for_transaction(self, tx_id: str) -> list[dict[str, Any]]: ...
    def payments_for_account(
        self,
        address: str,
        limit: int = 20,
        order: str = "desc",
        join_transactions: bool = True,
    ) -> list[dict[str, Any]]: ...


@dataclass
class PaymentDetail:
    destination: str
    amount: str
    asset_type: str = "native"
    asset_code: str = NATIVE_ASSET_LABEL

    @property
    def asset_label(self) -> str:
        if self.asset_type == "native":
            return NATIVE_ASSET_LABEL
        return self.asset_code

    @property
    def short_destination(self) -> str:
        return short_address(self.destination)


@dataclass
class TransactionRecord:
    id: str
    hash: str
    successful: bool
    created_at: datetime | None
    payments: list[PaymentDetail] = field(default_factory=list)
    memo: str | None = None
    fee_charged: Decimal = Decimal(0)

    @property
    def short_hash(self) -> str:
        return short_hash(self.hash)

    @property
    def display_date(self) -> str:
        return format_timestamp(self.created_at)

    @property
    def status_label(self) -> str:
        return "Success" if self.successful else "Failed"

    @property
    def fee_display(self) -> str:
        return f"{format_amount(self.fee_charged)} {NATIVE_ASSET_LABEL}"


def outgoing_payments(
    operations: list[dict[str, Any]], address: str
) -> list[PaymentDetail]:
    """Keep payment operations whose source is ``address``."""
    payments = []
    for op in operations:
        if op.get("type") != "payment" or op.get("source_account") != address:
            continue
        payments.append(
            PaymentDetail(
                destination=op.get("to") or op.get("destination") or "",
                amount=format_amount(op.get("amount")),
                asset_type=op.get("asset_type") or "native",
                asset_code=op.get("asset_code") or NATIVE_ASSET_LABEL,
            )
        )
    return payments


def to_record(tx: dict[str, Any], payments: list[PaymentDetail]) -> TransactionRecord:
    memo = (tx.get("memo") or "").strip()
    return TransactionRecord(
        id=tx.get("id") or "",
        hash=tx.get("hash") or "",
        successful=bool(tx.get("successful", False)),
        created_at=parse_timestamp(tx.get("created_at")),
        payments=payments,
        memo=memo or None,
        fee_charged=stroops_to_xlm(tx.get("fee_charged")),
    )


class HistoryService:
    def __init__(self, horizon: HistoryReader, policy: HistoryPolicy | None = None):
        self.horizon = horizon
        self.policy = policy or HistoryPolicy()

    def fetch(self, address: str) -> list[TransactionRecord]:
        if not address:
            raise HistoryError("Wallet not connected.")

        try:
            if self.policy.strategy == HistoryStrategy.JOINED:
                records = self._fetch_joined(address)
            else:
                records = self._fetch_per_transaction(address)
        except HistoryError:
            raise
        except Exception as e:
            logger.error("Failed to fetch transactions for %s: %s", address, e)
            raise HistoryError(f"Failed to load transactions: {e}") from e

        if not self.policy.keep_empty:
            records = [record for record in records if record.payments]

        logger.info(
            "Fetched %d transactions for %s (%s)",
            len(records),
            address,
            self.policy.strategy.value,
        )
        return records

    def _fetch_per_transaction(self, address: str) -> list[TransactionRecord]:
        transactions = self.horizon.transactions_for_account(
            address, limit=self.policy.limit, order="desc"
        )
        records = []
        for tx in transactions:
            tx_id = tx.get("id") or tx.get("hash") or ""
            try:
                operations = self.horizon.operations_for_transaction(tx_id)
            except Exception as e:
                logger.warning("Failed to fetch operations for transaction %s: %s", tx_id, e)
                operations = []
            records.append(to_record(tx, outgoing_payments(operations, address)))
        return records

    def _fetch_joined(self, address: str) -> list[TransactionRecord]:
        operations = self.horizon.payments_for_account(
            address, limit=self.policy.limit, order="desc", join_transactions=True
        )

        grouped: dict[str, tuple[dict[str, Any], list[dict[str, Any]]]] = {}
        for op in operations:
            tx_hash = op.get("transaction_hash") or ""
            if tx_hash not in grouped:
                tx = op.get("transaction") or {
                    "id": tx_hash,
                    "hash": tx_hash,
                    "successful": op.get("transaction_successful", False),
                    "created_at": op.get("created_at"),
                }
                grouped[tx_hash] = (tx, [])
            grouped[tx_hash][1].append(op)

        records = [
            to_record(tx, outgoing_payments(ops, address))
            for tx, ops in grouped.values()
        ]
        return records[: self.policy.limit]
