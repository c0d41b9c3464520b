"""Checkout: one multi-payment transaction for the whole cart."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from stellar_sdk import Account, Asset, TransactionBuilder, TransactionEnvelope

from stellar_market.features.cart.service import Cart, seller_payments
from stellar_market.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TRANSACTION_TIMEOUT = 30


class HorizonLike(Protocol):
    def load_account(self, address: str) -> Account: ...
    def fetch_base_fee(self) -> int: ...
    def submit_transaction(
        self, envelope: TransactionEnvelope | str
    ) -> dict[str, Any]: ...


class SignerLike(Protocol):
    def sign_transaction(
        self, xdr: str, address: str, network_passphrase: str
    ) -> str: ...


class CheckoutStep(Enum):
    VALIDATE = "validate"
    LOAD_ACCOUNT = "load_account"
    BUILD = "build"
    SIGN = "sign"
    SUBMIT = "submit"


class CheckoutError(Exception):
    def __init__(self, step: CheckoutStep, message: str):
        super().__init__(message)
        self.step = step
        self.message = message

    def __str__(self) -> str:
        return f"{self.step.value}: {self.message}"


@dataclass
class CheckoutResult:
    hash: str
    item_count: int
    payments: dict[str, str] = field(default_factory=dict)
    ledger: int | None = None

    @property
    def seller_count(self) -> int:
        return len(self.payments)


class CheckoutService:
    """Builds, signs and submits a purchase.

    Every step either completes or raises ``CheckoutError``; the cart is only
    cleared after Horizon accepts the transaction.
    """

    def __init__(
        self,
        horizon: HorizonLike,
        signer: SignerLike,
        network_passphrase: str,
        transaction_timeout: int = DEFAULT_TRANSACTION_TIMEOUT,
    ):
        self.horizon = horizon
        self.signer = signer
        self.network_passphrase = network_passphrase
        self.transaction_timeout = transaction_timeout

    def build_transaction(
        self, account: Account, base_fee: int, payments: dict[str, str]
    ) -> TransactionEnvelope:
        builder = TransactionBuilder(
            source_account=account,
            network_passphrase=self.network_passphrase,
            base_fee=base_fee,
        )
        for seller, amount in payments.items():
            builder.append_payment_op(
                destination=seller, asset=Asset.native(), amount=amount
            )
        builder.set_timeout(self.transaction_timeout)
        return builder.build()

    def checkout(self, cart: Cart, address: str | None) -> CheckoutResult:
        if not address:
            raise CheckoutError(CheckoutStep.VALIDATE, "Wallet is not connected")
        if cart.is_empty:
            raise CheckoutError(CheckoutStep.VALIDATE, "Cart is empty")

        log = logger.with_context(address=address, items=cart.item_count)
        log.info("Starting checkout")

        try:
            account = self.horizon.load_account(address)
            base_fee = self.horizon.fetch_base_fee()
        except Exception as e:
            log.error("Could not load buyer account: %s", e)
            raise CheckoutError(CheckoutStep.LOAD_ACCOUNT, str(e)) from e

        try:
            payments = seller_payments(cart.items)
            log.info("Paying %d sellers", len(payments))
            envelope = self.build_transaction(account, base_fee, payments)
        except Exception as e:
            log.error("Could not build transaction: %s", e)
            raise CheckoutError(CheckoutStep.BUILD, str(e)) from e

        try:
            signed_xdr = self.signer.sign_transaction(
                envelope.to_xdr(),
                address=address,
                network_passphrase=self.network_passphrase,
            )
            signed = TransactionBuilder.from_xdr(signed_xdr, self.network_passphrase)
        except Exception as e:
            log.warning("Signing failed: %s", e)
            raise CheckoutError(CheckoutStep.SIGN, str(e)) from e

        try:
            response = self.horizon.submit_transaction(signed)
        except Exception as e:
            log.error("Submission failed: %s", e)
            raise CheckoutError(CheckoutStep.SUBMIT, str(e)) from e

        result = CheckoutResult(
            hash=response.get("hash") or signed.hash_hex(),
            item_count=cart.item_count,
            payments=payments,
            ledger=response.get("ledger"),
        )
        cart.clear()
        log.info("Checkout complete: %s", result.hash)
        return result
