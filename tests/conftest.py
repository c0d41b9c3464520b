import tempfile
from pathlib import Path

import pytest
from stellar_sdk import Keypair


@pytest.fixture
def keypair():
    """Fixture providing a random ed25519 keypair"""
    return Keypair.random()


@pytest.fixture
def buyer_keypair():
    """Fixture providing the buyer's keypair"""
    return Keypair.random()


@pytest.fixture
def seller_addresses():
    """Fixture providing three distinct seller addresses"""
    return [Keypair.random().public_key for _ in range(3)]


@pytest.fixture
def testnet_horizon_url():
    """Fixture providing the testnet Horizon URL"""
    return "https://horizon-testnet.stellar.org"


@pytest.fixture(autouse=True)
def isolate_app_dir(monkeypatch):
    """Run tests with an isolated app directory and no ambient configuration."""
    for name in (
        "STELLAR_MARKET_SECRET_KEY",
        "STELLAR_MARKET_HORIZON_URL",
        "STELLAR_MARKET_HISTORY_LIMIT",
        "STELLAR_MARKET_HISTORY_STRATEGY",
        "STELLAR_MARKET_HISTORY_KEEP_EMPTY",
        "STELLAR_MARKET_CATALOG",
        "STELLAR_MARKET_LOG_LEVEL",
        "STELLAR_MARKET_LOG_FORMAT",
        "STELLAR_MARKET_LOG_STDOUT",
    ):
        monkeypatch.delenv(name, raising=False)

    with tempfile.TemporaryDirectory(prefix="stellar-market-test-") as tmp_dir:
        monkeypatch.setenv("STELLAR_MARKET_DIR", str(Path(tmp_dir)))
        yield
