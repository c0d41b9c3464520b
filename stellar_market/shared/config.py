"""Application configuration for Stellar Market.

Settings live in ``config.json`` inside the application directory and can be
overridden per run with ``STELLAR_MARKET_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stellar_sdk import Network

from stellar_market.shared.horizon import TESTNET_FRIENDBOT_URL, TESTNET_HORIZON_URL
from stellar_market.shared.logging import DEFAULT_APP_DIR
from stellar_market.shared.network import RetryConfig, TimeoutConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
DEFAULT_TRANSACTION_TIMEOUT = 30
MAX_TRANSACTION_TIMEOUT = 300
DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 200
MAX_RETRIES = 10
HISTORY_STRATEGIES = ("per_transaction", "joined")
DEFAULT_HISTORY_STRATEGY = HISTORY_STRATEGIES[0]

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def resolve_app_dir(app_dir: str | Path | None = None) -> Path:
    if app_dir:
        return Path(app_dir).expanduser()
    env_dir = os.getenv("STELLAR_MARKET_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return DEFAULT_APP_DIR


def _parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    logger.warning("Ignoring invalid boolean setting %r", value)
    return default


def _parse_int(value: Any, default: int, name: str, minimum: int, maximum: int) -> int:
    if isinstance(value, bool):
        logger.warning("Ignoring invalid %s %r", name, value)
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s %r", name, value)
        return default
    if not minimum <= number <= maximum:
        logger.warning(
            "%s %d out of range %d-%d, using %d",
            name.capitalize(),
            number,
            minimum,
            maximum,
            default,
        )
        return default
    return number


def _parse_limit(value: Any, default: int) -> int:
    return _parse_int(value, default, "history limit", 1, MAX_HISTORY_LIMIT)


def _parse_seconds(value: Any, default: float, name: str) -> float:
    if isinstance(value, bool):
        logger.warning("Ignoring invalid %s %r", name, value)
        return default
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s %r", name, value)
        return default
    if not 0 < seconds < float("inf"):
        logger.warning("Ignoring non-positive %s %r", name, value)
        return default
    return seconds


def _parse_strategy(value: Any, default: str) -> str:
    strategy = str(value).strip().lower()
    if strategy not in HISTORY_STRATEGIES:
        logger.warning("Ignoring unknown history strategy %r", value)
        return default
    return strategy


def _parse_text(value: Any, default: str | None, name: str) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    logger.warning("Ignoring invalid %s %r", name, value)
    return default


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key, {})
    if isinstance(section, dict):
        return section
    logger.warning("Ignoring %r settings: expected an object, got %r", key, section)
    return {}


@dataclass
class MarketConfig:
    horizon_url: str = TESTNET_HORIZON_URL
    network_passphrase: str = Network.TESTNET_NETWORK_PASSPHRASE
    friendbot_url: str = TESTNET_FRIENDBOT_URL
    catalog_path: str | None = None
    transaction_timeout: int = DEFAULT_TRANSACTION_TIMEOUT
    history_limit: int = DEFAULT_HISTORY_LIMIT
    history_strategy: str = DEFAULT_HISTORY_STRATEGY
    history_keep_empty: bool = True
    timeout_config: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry_config: RetryConfig = field(default_factory=RetryConfig)
    app_dir: Path = field(default_factory=resolve_app_dir)

    @property
    def config_file(self) -> Path:
        return self.app_dir / CONFIG_FILENAME

    @classmethod
    def load(cls, app_dir: str | Path | None = None) -> "MarketConfig":
        config = cls(app_dir=resolve_app_dir(app_dir))
        config.app_dir.mkdir(parents=True, exist_ok=True)

        if config.config_file.exists():
            try:
                with open(config.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(
                    "Could not read %s, using defaults: %s", config.config_file, e
                )
                data = {}
            if isinstance(data, dict):
                config._apply(data)
            else:
                logger.warning(
                    "%s does not hold a settings object, using defaults",
                    config.config_file,
                )
        else:
            config.save()

        config._apply_environment()
        logger.info(
            "Configuration loaded: horizon=%s history=%s/%d keep_empty=%s",
            config.horizon_url,
            config.history_strategy,
            config.history_limit,
            config.history_keep_empty,
        )
        return config

    def _apply(self, data: dict[str, Any]) -> None:
        for name in ("horizon_url", "network_passphrase", "friendbot_url"):
            if name in data:
                setattr(self, name, _parse_text(data[name], getattr(self, name), name))
        if data.get("catalog_path") is not None:
            self.catalog_path = _parse_text(
                data["catalog_path"], self.catalog_path, "catalog_path"
            )
        if "transaction_timeout" in data:
            self.transaction_timeout = _parse_int(
                data["transaction_timeout"],
                self.transaction_timeout,
                "transaction timeout",
                1,
                MAX_TRANSACTION_TIMEOUT,
            )

        history = _section(data, "history")
        if "limit" in history:
            self.history_limit = _parse_limit(history["limit"], self.history_limit)
        if "strategy" in history:
            self.history_strategy = _parse_strategy(
                history["strategy"], self.history_strategy
            )
        if "keep_empty" in history:
            self.history_keep_empty = _parse_bool(
                history["keep_empty"], self.history_keep_empty
            )

        timeout_cfg = _section(data, "timeout")
        if timeout_cfg:
            defaults = TimeoutConfig()
            self.timeout_config = TimeoutConfig(
                connect_timeout=_parse_seconds(
                    timeout_cfg.get("connect_timeout", defaults.connect_timeout),
                    defaults.connect_timeout,
                    "connect timeout",
                ),
                read_timeout=_parse_seconds(
                    timeout_cfg.get("read_timeout", defaults.read_timeout),
                    defaults.read_timeout,
                    "read timeout",
                ),
            )
        retry_cfg = _section(data, "retry")
        if retry_cfg:
            defaults = RetryConfig()
            self.retry_config = RetryConfig(
                max_retries=_parse_int(
                    retry_cfg.get("max_retries", defaults.max_retries),
                    defaults.max_retries,
                    "retry count",
                    0,
                    MAX_RETRIES,
                ),
                base_delay=_parse_seconds(
                    retry_cfg.get("base_delay", defaults.base_delay),
                    defaults.base_delay,
                    "retry base delay",
                ),
                max_delay=_parse_seconds(
                    retry_cfg.get("max_delay", defaults.max_delay),
                    defaults.max_delay,
                    "retry max delay",
                ),
            )

    def _apply_environment(self) -> None:
        horizon_url = os.getenv("STELLAR_MARKET_HORIZON_URL")
        if horizon_url:
            self.horizon_url = horizon_url
        catalog = os.getenv("STELLAR_MARKET_CATALOG")
        if catalog:
            self.catalog_path = catalog
        limit = os.getenv("STELLAR_MARKET_HISTORY_LIMIT")
        if limit:
            self.history_limit = _parse_limit(limit, self.history_limit)
        strategy = os.getenv("STELLAR_MARKET_HISTORY_STRATEGY")
        if strategy:
            self.history_strategy = _parse_strategy(strategy, self.history_strategy)
        keep_empty = os.getenv("STELLAR_MARKET_HISTORY_KEEP_EMPTY")
        if keep_empty:
            self.history_keep_empty = _parse_bool(keep_empty, self.history_keep_empty)

    def save(self) -> None:
        data = {
            "horizon_url": self.horizon_url,
            "network_passphrase": self.network_passphrase,
            "friendbot_url": self.friendbot_url,
            "catalog_path": self.catalog_path,
            "transaction_timeout": self.transaction_timeout,
            "history": {
                "limit": self.history_limit,
                "strategy": self.history_strategy,
                "keep_empty": self.history_keep_empty,
            },
            "timeout": {
                "connect_timeout": self.timeout_config.connect_timeout,
                "read_timeout": self.timeout_config.read_timeout,
            },
            "retry": {
                "max_retries": self.retry_config.max_retries,
                "base_delay": self.retry_config.base_delay,
                "max_delay": self.retry_config.max_delay,
            },
        }
        self.app_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
