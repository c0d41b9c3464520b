"""Transaction history feature module for Stellar Market."""

from stellar_market.features.history.handlers import HistoryHandlersMixin
from stellar_market.features.history.screen import TransactionDetailScreen
from stellar_market.features.history.service import (
    HistoryError,
    HistoryPolicy,
    HistoryService,
    HistoryStrategy,
    PaymentDetail,
    TransactionRecord,
)

__all__ = [
    "HistoryHandlersMixin",
    "TransactionDetailScreen",
    "HistoryError",
    "HistoryPolicy",
    "HistoryService",
    "HistoryStrategy",
    "PaymentDetail",
    "TransactionRecord",
]
