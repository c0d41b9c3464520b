"""Feature modules for Stellar Market.

- catalog: Products offered for sale
- cart: Cart lines and per-seller totals
- wallet: Wallet selection, unlocking and signing
- checkout: One payment transaction per purchase
- history: Transaction history for the connected account
"""

from stellar_market.features import catalog
from stellar_market.features import cart
from stellar_market.features import wallet
from stellar_market.features import checkout
from stellar_market.features import history

__all__ = ["catalog", "cart", "wallet", "checkout", "history"]
