"""Wallet feature module for Stellar Market."""

from stellar_market.features.wallet.handlers import WalletHandlersMixin
from stellar_market.features.wallet.screen import SecretKeyScreen, WalletSelectorScreen
from stellar_market.features.wallet.service import (
    KeypairWalletModule,
    WalletError,
    WalletInfo,
    WalletKit,
    WalletLockedError,
    WalletModule,
    WalletSession,
)

__all__ = [
    "WalletHandlersMixin",
    "SecretKeyScreen",
    "WalletSelectorScreen",
    "KeypairWalletModule",
    "WalletError",
    "WalletInfo",
    "WalletKit",
    "WalletLockedError",
    "WalletModule",
    "WalletSession",
]
