"""Wallet kit and session for connecting a signer to the market."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Protocol

from stellar_sdk import Keypair, TransactionBuilder
from stellar_sdk.exceptions import Ed25519SecretSeedInvalidError

from stellar_market.shared.validation import AddressValidator

logger = logging.getLogger(__name__)

ENV_KEYPAIR_ID = "env-keypair"
SECRET_KEY_ID = "secret-key"
SECRET_KEY_ENV_VAR = "STELLAR_MARKET_SECRET_KEY"


class WalletError(Exception):
    pass


class WalletLockedError(WalletError):
    pass


class WalletModule(Protocol):
    """A signer the kit can select, in the spirit of browser wallet extensions."""

    wallet_id: str
    name: str

    def is_available(self) -> bool: ...
    def get_address(self) -> str: ...
    def sign_transaction(
        self, xdr: str, address: str, network_passphrase: str
    ) -> str: ...


@dataclass
class WalletInfo:
    wallet_id: str
    name: str
    available: bool


class KeypairWalletModule:
    """Signs with an ed25519 secret seed held in memory.

    The seed comes either from an environment variable, read on demand, or
    from ``unlock()``. It is never written anywhere.
    """

    def __init__(
        self,
        wallet_id: str,
        name: str,
        secret_env: str | None = None,
        needs_unlock: bool = False,
    ):
        self.wallet_id = wallet_id
        self.name = name
        self.secret_env = secret_env
        self.needs_unlock = needs_unlock
        self._keypair: Keypair | None = None

    def is_available(self) -> bool:
        if self.secret_env:
            return bool(os.getenv(self.secret_env))
        return True

    @property
    def is_unlocked(self) -> bool:
        return self._keypair is not None

    def unlock(self, secret: str) -> str:
        try:
            self._keypair = Keypair.from_secret(secret.strip())
        except (Ed25519SecretSeedInvalidError, ValueError) as e:
            raise WalletError("Invalid secret seed") from e
        return self._keypair.public_key

    def lock(self) -> None:
        self._keypair = None

    def _require_keypair(self) -> Keypair:
        if self._keypair is None and self.secret_env:
            secret = os.getenv(self.secret_env, "")
            if not secret:
                raise WalletLockedError(f"{self.secret_env} is not set")
            self.unlock(secret)
        if self._keypair is None:
            raise WalletLockedError(f"{self.name} is locked")
        return self._keypair

    def get_address(self) -> str:
        return self._require_keypair().public_key

    def sign_transaction(self, xdr: str, address: str, network_passphrase: str) -> str:
        keypair = self._require_keypair()
        if address != keypair.public_key:
            raise WalletError(
                f"{self.name} rejected signing: it holds the key for a different account"
            )
        envelope = TransactionBuilder.from_xdr(xdr, network_passphrase)
        envelope.sign(keypair)
        logger.info("%s signed transaction for %s", self.name, address)
        return envelope.to_xdr()


def default_modules() -> list[KeypairWalletModule]:
    return [
        KeypairWalletModule(
            ENV_KEYPAIR_ID,
            "Environment key",
            secret_env=SECRET_KEY_ENV_VAR,
        ),
        KeypairWalletModule(SECRET_KEY_ID, "Secret key", needs_unlock=True),
    ]


class WalletKit:
    """Registry of wallet modules with one selected at a time."""

    def __init__(
        self,
        modules: list[WalletModule] | None = None,
        selected_wallet_id: str | None = None,
    ):
        module_list = default_modules() if modules is None else modules
        self._modules: dict[str, WalletModule] = {m.wallet_id: m for m in module_list}
        self._selected: WalletModule | None = None
        if selected_wallet_id:
            self.set_wallet(selected_wallet_id)

    def available_wallets(self) -> list[WalletInfo]:
        return [
            WalletInfo(m.wallet_id, m.name, m.is_available())
            for m in self._modules.values()
        ]

    def get_module(self, wallet_id: str) -> WalletModule:
        try:
            return self._modules[wallet_id]
        except KeyError:
            raise WalletError(f"Unknown wallet: {wallet_id}") from None

    def set_wallet(self, wallet_id: str) -> None:
        self._selected = self.get_module(wallet_id)
        logger.info("Selected wallet module %s", wallet_id)

    @property
    def selected_or_none(self) -> WalletModule | None:
        return self._selected

    @property
    def selected(self) -> WalletModule:
        if self._selected is None:
            raise WalletError("No wallet selected")
        return self._selected

    def get_address(self) -> str:
        return self.selected.get_address()

    def sign_transaction(self, xdr: str, address: str, network_passphrase: str) -> str:
        return self.selected.sign_transaction(
            xdr, address=address, network_passphrase=network_passphrase
        )


class WalletSession:
    """Holds the connected address; everything else is delegated to the kit."""

    def __init__(self, kit: WalletKit):
        self.kit = kit
        self._address: str | None = None

    @property
    def address(self) -> str | None:
        return self._address

    @property
    def is_connected(self) -> bool:
        return self._address is not None

    def connect(self, wallet_id: str) -> str:
        self.kit.set_wallet(wallet_id)
        address = self.kit.get_address()
        result = AddressValidator.validate(address)
        if not result.is_valid:
            raise WalletError(f"Wallet returned an invalid address: {result.error_message}")
        self._address = result.normalized_value
        logger.info("Wallet connected: %s via %s", self._address, wallet_id)
        return self._address

    def disconnect(self) -> None:
        logger.info("Wallet disconnected: %s", self._address)
        self._address = None
        if isinstance(self.kit.selected_or_none, KeypairWalletModule):
            self.kit.selected_or_none.lock()
