import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from txcodec.intents import FeeMarketIntent, LegacyIntent

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5ecb4765d5e97f8e4dc6e8fa6a4de3b8a3a2f55b"
DEAD_ADDRESS = bytes.fromhex("deadbeef" * 5)


def raw_transaction(signed):
    """eth_account renamed rawTransaction -> raw_transaction; accept either."""
    raw = getattr(signed, "raw_transaction", None)
    if raw is None:
        raw = signed.rawTransaction
    return bytes(raw)


@pytest.fixture
def private_key():
    return TEST_PRIVATE_KEY


@pytest.fixture
def sender_address():
    from eth_account import Account

    return Account.from_key(TEST_PRIVATE_KEY).address


@pytest.fixture
def legacy_intent():
    return LegacyIntent(
        nonce=5,
        gas_price=30_000_000_000,
        gas_limit=21000,
        to=DEAD_ADDRESS,
        value=1_500_000_000_000_000_000,
        data=b"",
        chain_id=1,
    )


@pytest.fixture
def fee_market_intent():
    return FeeMarketIntent(
        chain_id=80002,
        nonce=1,
        max_priority_fee_per_gas=2_000_000_000,
        max_fee_per_gas=100_000_000_000,
        gas_limit=21000,
        to=DEAD_ADDRESS,
        value=0,
        data=b"",
    )


@pytest.fixture(autouse=True)
def _isolate_signer_env(monkeypatch):
    for k in ("PRIVATE_KEY", "SIGNER_TYPE", "KEYSTORE_PATH", "KEYSTORE_PASSWORD", "RPC_URL"):
        monkeypatch.delenv(k, raising=False)
