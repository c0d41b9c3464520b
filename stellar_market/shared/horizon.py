"""Horizon ledger-access client for Stellar Market."""

from __future__ import annotations

import logging
from typing import Any

from stellar_sdk import Account, TransactionEnvelope

from stellar_market.shared.network import (
    NetworkClient,
    NetworkError,
    RetryConfig,
    TimeoutConfig,
)

logger = logging.getLogger(__name__)

TESTNET_HORIZON_URL = "https://horizon-testnet.stellar.org"
TESTNET_FRIENDBOT_URL = "https://friendbot.stellar.org"
DEFAULT_BASE_FEE = 100
MAX_OPERATIONS_PAGE = 200


def _records(page: dict[str, Any] | None) -> list[dict[str, Any]]:
    if not page:
        return []
    return list(page.get("_embedded", {}).get("records", []))


class HorizonClient:
    """Thin wrapper over the Horizon REST endpoints the market needs.

    Reads go through the retrying transport; transaction submission is
    sent exactly once.
    """

    def __init__(
        self,
        horizon_url: str = TESTNET_HORIZON_URL,
        friendbot_url: str = TESTNET_FRIENDBOT_URL,
        timeout_config: TimeoutConfig | None = None,
        retry_config: RetryConfig | None = None,
        network_client: NetworkClient | None = None,
    ):
        self.horizon_url = horizon_url.rstrip("/")
        self.friendbot_url = friendbot_url.rstrip("/")
        self._client = network_client or NetworkClient(
            base_url=self.horizon_url,
            timeout_config=timeout_config,
            retry_config=retry_config,
        )

    def load_account(self, address: str) -> Account:
        data = self._client.get(f"/accounts/{address}", context="Load account")
        sequence = int(data["sequence"])
        logger.debug("Loaded account %s at sequence %d", address, sequence)
        return Account(address, sequence)

    def fetch_base_fee(self) -> int:
        data = self._client.get("/fee_stats", context="Fetch base fee")
        try:
            return int(data["last_ledger_base_fee"])
        except (KeyError, TypeError, ValueError):
            logger.warning(
                "fee_stats has no usable last_ledger_base_fee, using %d",
                DEFAULT_BASE_FEE,
            )
            return DEFAULT_BASE_FEE

    def submit_transaction(self, envelope: TransactionEnvelope | str) -> dict[str, Any]:
        xdr = envelope if isinstance(envelope, str) else envelope.to_xdr()
        try:
            result = self._client.post(
                "/transactions",
                context="Submit transaction",
                data={"tx": xdr},
            )
        except NetworkError as e:
            logger.error("Transaction submission failed: %s", e.message)
            raise
        logger.info(
            "Transaction %s accepted in ledger %s",
            result.get("hash", "unknown"),
            result.get("ledger", "?"),
        )
        return result

    def transactions_for_account(
        self, address: str, limit: int = 20, order: str = "desc"
    ) -> list[dict[str, Any]]:
        page = self._client.get_optional(
            f"/accounts/{address}/transactions",
            context="Fetch transactions",
            params={"limit": limit, "order": order},
        )
        return _records(page)

    def operations_for_transaction(self, tx_id: str) -> list[dict[str, Any]]:
        page = self._client.get(
            f"/transactions/{tx_id}/operations",
            context="Fetch operations",
            params={"limit": MAX_OPERATIONS_PAGE},
        )
        return _records(page)

    def payments_for_account(
        self,
        address: str,
        limit: int = 20,
        order: str = "desc",
        join_transactions: bool = True,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"limit": limit, "order": order}
        if join_transactions:
            params["join"] = "transactions"
        page = self._client.get_optional(
            f"/accounts/{address}/payments",
            context="Fetch payments",
            params=params,
        )
        return _records(page)

    def fund_with_friendbot(self, address: str) -> dict[str, Any]:
        result = self._client.get(
            f"{self.friendbot_url}/",
            context="Friendbot funding",
            params={"addr": address},
        )
        logger.info("Friendbot funded %s", address)
        return result

    def test_connection(self) -> dict[str, Any]:
        root = self._client.get("/", context="Horizon health check")
        info = {
            "healthy": bool(root.get("horizon_version")),
            "horizon_version": root.get("horizon_version", ""),
            "latest_ledger": root.get("history_latest_ledger", 0),
            "network_passphrase": root.get("network_passphrase", ""),
            "url": self.horizon_url,
        }
        logger.info(
            "Horizon connection test: %s - version %s, ledger %s",
            self.horizon_url,
            info["horizon_version"],
            info["latest_ledger"],
        )
        return info
