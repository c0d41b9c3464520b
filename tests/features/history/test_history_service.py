"""Tests for transaction history loading."""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import pytest
from stellar_sdk import Keypair

from stellar_market.features.history.screen import describe_payments
from stellar_market.features.history.service import (
    HistoryError,
    HistoryPolicy,
    HistoryService,
    HistoryStrategy,
    PaymentDetail,
    TransactionRecord,
    outgoing_payments,
    to_record,
)
from stellar_market.shared.config import DEFAULT_HISTORY_STRATEGY, HISTORY_STRATEGIES
from stellar_market.shared.network import NetworkError, NetworkErrorType


def _tx(tx_id: str, memo: str = "", fee: str = "200", successful: bool = True) -> dict[str, Any]:
    return {
        "id": tx_id,
        "hash": tx_id * 8,
        "successful": successful,
        "created_at": "2024-05-01T12:00:00Z",
        "memo": memo,
        "fee_charged": fee,
    }


def _payment(source: str, to: str, amount: str = "10.0000000", **extra) -> dict[str, Any]:
    op = {
        "type": "payment",
        "source_account": source,
        "to": to,
        "amount": amount,
        "asset_type": "native",
    }
    op.update(extra)
    return op


class MockHorizon:
    def __init__(self):
        self.transactions_for_account = MagicMock(return_value=[])
        self.operations_for_transaction = MagicMock(return_value=[])
        self.payments_for_account = MagicMock(return_value=[])


@pytest.fixture
def buyer():
    return Keypair.random().public_key


@pytest.fixture
def seller():
    return Keypair.random().public_key


class TestHistoryPolicy:
    def test_defaults(self):
        policy = HistoryPolicy()
        assert policy.limit == 20
        assert policy.strategy == HistoryStrategy.PER_TRANSACTION
        assert policy.keep_empty is True

    def test_from_settings(self):
        policy = HistoryPolicy.from_settings(3, "joined", False)
        assert policy == HistoryPolicy(limit=3, strategy=HistoryStrategy.JOINED, keep_empty=False)

    def test_from_settings_unknown_strategy(self):
        policy = HistoryPolicy.from_settings(5, "sideways", True)
        assert policy.strategy == HistoryStrategy.PER_TRANSACTION

    def test_config_strategy_names_match(self):
        assert set(HISTORY_STRATEGIES) == {strategy.value for strategy in HistoryStrategy}
        assert DEFAULT_HISTORY_STRATEGY == HistoryPolicy().strategy.value


class TestOutgoingPayments:
    def test_keeps_only_payments_from_address(self, buyer, seller):
        operations = [
            _payment(buyer, seller, "5"),
            _payment(seller, buyer, "1"),
            {"type": "create_account", "source_account": buyer},
        ]
        payments = outgoing_payments(operations, buyer)
        assert payments == [PaymentDetail(destination=seller, amount="5.0000000")]

    def test_custom_asset_label(self, buyer, seller):
        operations = [
            _payment(buyer, seller, asset_type="credit_alphanum4", asset_code="USDC")
        ]
        payment = outgoing_payments(operations, buyer)[0]
        assert payment.asset_label == "USDC"

    def test_native_asset_label(self, buyer, seller):
        assert outgoing_payments([_payment(buyer, seller)], buyer)[0].asset_label == "XLM"


class TestToRecord:
    def test_fields(self):
        record = to_record(_tx("a", memo="order 42", fee="300"), [])
        assert record.id == "a"
        assert record.successful is True
        assert record.memo == "order 42"
        assert record.fee_charged == Decimal("0.00003")
        assert record.fee_display == "0.0000300 XLM"
        assert record.created_at is not None

    def test_blank_memo_is_none(self):
        assert to_record(_tx("a", memo="  "), []).memo is None

    def test_missing_date(self):
        tx = _tx("a")
        del tx["created_at"]
        record = to_record(tx, [])
        assert record.display_date == "Date Unknown"

    def test_status_label(self):
        assert to_record(_tx("a", successful=False), []).status_label == "Failed"


class TestPerTransactionStrategy:
    def test_k_payments_per_transaction(self, buyer, seller):
        horizon = MockHorizon()
        horizon.transactions_for_account.return_value = [_tx("a"), _tx("b")]
        other = Keypair.random().public_key
        horizon.operations_for_transaction.side_effect = lambda tx_id: {
            "a": [_payment(buyer, seller), _payment(buyer, other)],
            "b": [],
        }[tx_id]

        records = HistoryService(horizon).fetch(buyer)

        assert [len(r.payments) for r in records] == [2, 0]
        horizon.transactions_for_account.assert_called_once_with(buyer, limit=20, order="desc")

    def test_drop_empty_transactions(self, buyer, seller):
        horizon = MockHorizon()
        horizon.transactions_for_account.return_value = [_tx("a"), _tx("b")]
        horizon.operations_for_transaction.side_effect = lambda tx_id: (
            [_payment(buyer, seller)] if tx_id == "a" else [_payment(seller, buyer)]
        )

        service = HistoryService(horizon, HistoryPolicy(keep_empty=False))
        records = service.fetch(buyer)

        assert [r.id for r in records] == ["a"]

    def test_limit_passed_through(self, buyer):
        horizon = MockHorizon()
        HistoryService(horizon, HistoryPolicy(limit=3)).fetch(buyer)
        horizon.transactions_for_account.assert_called_once_with(buyer, limit=3, order="desc")

    def test_operation_failure_degrades_to_empty(self, buyer, seller):
        horizon = MockHorizon()
        horizon.transactions_for_account.return_value = [_tx("a"), _tx("b")]

        def operations(tx_id):
            if tx_id == "a":
                raise NetworkError(error_type=NetworkErrorType.TIMEOUT, message="timeout")
            return [_payment(buyer, seller)]

        horizon.operations_for_transaction.side_effect = operations

        records = HistoryService(horizon).fetch(buyer)

        assert [len(r.payments) for r in records] == [0, 1]

    def test_top_level_failure_raises_history_error(self, buyer):
        horizon = MockHorizon()
        horizon.transactions_for_account.side_effect = NetworkError(
            error_type=NetworkErrorType.CONNECTION_ERROR, message="Cannot connect to Horizon"
        )

        with pytest.raises(HistoryError, match="Failed to load transactions"):
            HistoryService(horizon).fetch(buyer)

    def test_no_transactions(self, buyer):
        assert HistoryService(MockHorizon()).fetch(buyer) == []

    def test_requires_address(self):
        with pytest.raises(HistoryError, match="Wallet not connected"):
            HistoryService(MockHorizon()).fetch("")


class TestJoinedStrategy:
    def test_groups_payments_by_transaction(self, buyer, seller):
        horizon = MockHorizon()
        tx_a = _tx("a", memo="joined")
        horizon.payments_for_account.return_value = [
            _payment(buyer, seller, "1", transaction_hash="a", transaction=tx_a),
            _payment(buyer, seller, "2", transaction_hash="a", transaction=tx_a),
            _payment(buyer, seller, "3", transaction_hash="b", transaction_successful=True),
        ]
        policy = HistoryPolicy(strategy=HistoryStrategy.JOINED)

        records = HistoryService(horizon, policy).fetch(buyer)

        assert [r.id for r in records] == ["a", "b"]
        assert [p.amount for p in records[0].payments] == ["1.0000000", "2.0000000"]
        assert records[0].memo == "joined"
        assert records[1].hash == "b"
        horizon.operations_for_transaction.assert_not_called()
        horizon.payments_for_account.assert_called_once_with(
            buyer, limit=20, order="desc", join_transactions=True
        )

    def test_incoming_only_is_dropped_without_keep_empty(self, buyer, seller):
        horizon = MockHorizon()
        horizon.payments_for_account.return_value = [
            _payment(seller, buyer, transaction_hash="a", transaction=_tx("a")),
        ]
        policy = HistoryPolicy(strategy=HistoryStrategy.JOINED, keep_empty=False)

        assert HistoryService(horizon, policy).fetch(buyer) == []

    def test_truncates_to_limit(self, buyer, seller):
        horizon = MockHorizon()
        horizon.payments_for_account.return_value = [
            _payment(buyer, seller, transaction_hash=str(i), transaction=_tx(str(i)))
            for i in range(5)
        ]
        policy = HistoryPolicy(limit=2, strategy=HistoryStrategy.JOINED)

        assert len(HistoryService(horizon, policy).fetch(buyer)) == 2


class TestDescribePayments:
    def test_empty(self):
        record = TransactionRecord(id="a", hash="h", successful=True, created_at=None)
        assert describe_payments(record) == "No payment details available for this transaction."

    def test_lists_payments(self, seller):
        record = TransactionRecord(
            id="a",
            hash="h",
            successful=True,
            created_at=None,
            payments=[PaymentDetail(destination=seller, amount="10.0000000")],
        )
        assert "10.0000000 XLM" in describe_payments(record)
