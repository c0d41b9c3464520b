"""Shared utilities for Stellar Market."""

from stellar_market.shared.horizon import HorizonClient
from stellar_market.shared.logging import (
    ContextAdapter,
    LoggingConfig,
    LogLevel,
    format_error_for_user,
    get_logger,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from stellar_market.shared.network import (
    NetworkClient,
    NetworkError,
    NetworkErrorType,
    RetryConfig,
    TimeoutConfig,
)
from stellar_market.shared.task_state import TaskState, TaskStatus
from stellar_market.shared.validation import (
    AddressValidator,
    AmountValidator,
    QuantityValidator,
    ValidationResult,
)

__all__ = [
    "HorizonClient",
    "NetworkClient",
    "NetworkError",
    "NetworkErrorType",
    "RetryConfig",
    "TimeoutConfig",
    "TaskState",
    "TaskStatus",
    "AddressValidator",
    "AmountValidator",
    "QuantityValidator",
    "ValidationResult",
    "ContextAdapter",
    "LoggingConfig",
    "LogLevel",
    "format_error_for_user",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
