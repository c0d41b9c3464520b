"""Unit tests for the Horizon client with HTTP patched out."""

import pytest
from unittest.mock import Mock, patch
from requests.exceptions import HTTPError, Timeout

from stellar_market.shared.horizon import (
    DEFAULT_BASE_FEE,
    MAX_OPERATIONS_PAGE,
    HorizonClient,
)
from stellar_market.shared.network import NetworkError, NetworkErrorType, RetryConfig


def _response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    if status_code >= 400:
        response.text = "error"
        response.raise_for_status.side_effect = HTTPError(response=response)
    return response


def _page(*records):
    return {"_embedded": {"records": list(records)}}


@pytest.fixture
def horizon():
    return HorizonClient(
        horizon_url="https://horizon.example/",
        friendbot_url="https://friendbot.example",
        retry_config=RetryConfig(max_retries=2, base_delay=0.01),
    )


@pytest.mark.unit
class TestLoadAccount:
    def test_returns_account_with_sequence(self, horizon, keypair):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(
                200, {"account_id": keypair.public_key, "sequence": "123456789"}
            )
            account = horizon.load_account(keypair.public_key)

        assert account.sequence == 123456789
        assert mock_get.call_args[0][0] == (
            f"https://horizon.example/accounts/{keypair.public_key}"
        )

    def test_missing_account_raises_network_error(self, horizon, keypair):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(404, {"title": "Resource Missing"})
            with pytest.raises(NetworkError) as exc_info:
                horizon.load_account(keypair.public_key)

        assert exc_info.value.is_not_found
        assert "Load account" in str(exc_info.value)


@pytest.mark.unit
class TestFetchBaseFee:
    def test_reads_last_ledger_base_fee(self, horizon):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, {"last_ledger_base_fee": "200"})
            assert horizon.fetch_base_fee() == 200

    def test_falls_back_on_malformed_payload(self, horizon):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, {"last_ledger_base_fee": "abc"})
            assert horizon.fetch_base_fee() == DEFAULT_BASE_FEE

    def test_network_failure_propagates(self, horizon):
        with patch("requests.get") as mock_get:
            mock_get.side_effect = Timeout("slow")
            with pytest.raises(NetworkError) as exc_info:
                horizon.fetch_base_fee()

        assert exc_info.value.error_type == NetworkErrorType.TIMEOUT
        assert mock_get.call_count == 3


@pytest.mark.unit
class TestSubmitTransaction:
    def test_posts_xdr_as_form_field(self, horizon):
        with patch("requests.post") as mock_post:
            mock_post.return_value = _response(200, {"hash": "ab" * 32, "ledger": 42})
            result = horizon.submit_transaction("AAAAXDR")

        assert result["ledger"] == 42
        assert mock_post.call_args[0][0] == "https://horizon.example/transactions"
        assert mock_post.call_args[1]["data"] == {"tx": "AAAAXDR"}

    def test_failure_carries_result_codes_and_is_not_retried(self, horizon):
        problem = {
            "title": "Transaction Failed",
            "extras": {
                "result_codes": {
                    "transaction": "tx_failed",
                    "operations": ["op_underfunded"],
                }
            },
        }
        with patch("requests.post") as mock_post:
            mock_post.return_value = _response(400, problem)
            with pytest.raises(NetworkError) as exc_info:
                horizon.submit_transaction("AAAAXDR")

        assert mock_post.call_count == 1
        assert exc_info.value.result_codes["operations"] == ["op_underfunded"]

    def test_server_error_is_not_retried(self, horizon):
        with patch("requests.post") as mock_post:
            mock_post.return_value = _response(503)
            with pytest.raises(NetworkError):
                horizon.submit_transaction("AAAAXDR")

        assert mock_post.call_count == 1


@pytest.mark.unit
class TestHistoryQueries:
    def test_transactions_for_account_passes_limit_and_order(self, horizon, keypair):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, _page({"id": "t1"}, {"id": "t2"}))
            records = horizon.transactions_for_account(keypair.public_key, limit=3)

        assert [r["id"] for r in records] == ["t1", "t2"]
        assert mock_get.call_args[1]["params"] == {"limit": 3, "order": "desc"}

    def test_transactions_for_unfunded_account_is_empty(self, horizon, keypair):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(404)
            assert horizon.transactions_for_account(keypair.public_key) == []

    def test_operations_for_transaction(self, horizon):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, _page({"type": "payment"}))
            operations = horizon.operations_for_transaction("t1")

        assert operations == [{"type": "payment"}]
        assert mock_get.call_args[0][0] == "https://horizon.example/transactions/t1/operations"
        assert mock_get.call_args[1]["params"] == {"limit": MAX_OPERATIONS_PAGE}

    def test_payments_for_account_joins_transactions(self, horizon, keypair):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, _page())
            horizon.payments_for_account(keypair.public_key, limit=5)

        assert mock_get.call_args[1]["params"] == {
            "limit": 5,
            "order": "desc",
            "join": "transactions",
        }

    def test_payments_for_account_without_join(self, horizon, keypair):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, _page())
            horizon.payments_for_account(keypair.public_key, join_transactions=False)

        assert "join" not in mock_get.call_args[1]["params"]


@pytest.mark.unit
class TestFriendbotAndHealth:
    def test_fund_with_friendbot(self, horizon, keypair):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, {"hash": "f" * 64})
            horizon.fund_with_friendbot(keypair.public_key)

        assert mock_get.call_args[0][0] == "https://friendbot.example/"
        assert mock_get.call_args[1]["params"] == {"addr": keypair.public_key}

    def test_connection_healthy(self, horizon):
        root = {
            "horizon_version": "2.30.0",
            "history_latest_ledger": 1234,
            "network_passphrase": "Test SDF Network ; September 2015",
        }
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, root)
            info = horizon.test_connection()

        assert info["healthy"] is True
        assert info["latest_ledger"] == 1234
        assert info["url"] == "https://horizon.example"

    def test_connection_unhealthy_without_version(self, horizon):
        with patch("requests.get") as mock_get:
            mock_get.return_value = _response(200, {})
            assert horizon.test_connection()["healthy"] is False
