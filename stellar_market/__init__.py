"""Stellar Market - A terminal marketplace that pays sellers on the Stellar testnet.

This package is organized into feature-based modules:
- features.catalog: Product catalog loading
- features.cart: Cart state and per-seller aggregation
- features.wallet: Wallet kit, signing modules and the connected session
- features.checkout: Building, signing and submitting the purchase
- features.history: Recent transactions and their payments
- shared: Shared utilities (Horizon client, network, logging, etc.)
"""

from stellar_market.features.cart.service import Cart, CartItem
from stellar_market.features.catalog.service import Product, ProductCatalog
from stellar_market.features.checkout.service import (
    CheckoutError,
    CheckoutResult,
    CheckoutService,
)
from stellar_market.features.history.service import (
    HistoryError,
    HistoryService,
    TransactionRecord,
)
from stellar_market.features.wallet.service import WalletError, WalletKit, WalletSession
from stellar_market.shared import (
    HorizonClient,
    NetworkClient,
    NetworkError,
    NetworkErrorType,
    RetryConfig,
    TimeoutConfig,
)

__version__ = "0.1.0"
__all__ = [
    "Cart",
    "CartItem",
    "Product",
    "ProductCatalog",
    "CheckoutError",
    "CheckoutResult",
    "CheckoutService",
    "HistoryError",
    "HistoryService",
    "TransactionRecord",
    "WalletError",
    "WalletKit",
    "WalletSession",
    "HorizonClient",
    "NetworkClient",
    "NetworkError",
    "NetworkErrorType",
    "RetryConfig",
    "TimeoutConfig",
]
