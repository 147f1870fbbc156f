import pytest

from conftest import DEAD_ADDRESS
from errors import FieldValueError
from txcodec.intents import FeeMarketIntent, LegacyIntent, TxKind, intent_from_dict, to_int

TO = "0xdeadbeefdeadbeefdeadbeefdeadbeefdeadbeef"


def test_legacy_to_dict(legacy_intent):
    d = legacy_intent.to_dict()
    assert d["type"] == "legacy"
    assert d["to"] == "0xDeaDbeefdEAdbeefdEadbEEFdeadbeEFdEaDbeeF"
    assert d["data"] == "0x"
    assert d["gasPrice"] == 30_000_000_000


def test_fee_market_kind(fee_market_intent):
    assert fee_market_intent.kind is TxKind.FEE_MARKET
    assert fee_market_intent.to_dict()["accessList"] == []


@pytest.mark.parametrize(
    "override",
    [
        {"nonce": -1},
        {"nonce": True},
        {"value": 2**256},
        {"gas_price": "30"},
        {"to": b"\x11" * 19},
        {"data": "0x"},
    ],
)
def test_legacy_invariants(override):
    fields = dict(nonce=0, gas_price=1, gas_limit=21000, to=DEAD_ADDRESS, value=0, data=b"", chain_id=1)
    fields.update(override)
    with pytest.raises(FieldValueError):
        LegacyIntent(**fields)


def test_intents_are_frozen(legacy_intent):
    with pytest.raises(Exception):
        legacy_intent.nonce = 6


def test_from_dict_legacy(legacy_intent):
    tx = {
        "nonce": "5",
        "gasPrice": hex(30_000_000_000),
        "gas": 21000,
        "to": TO,
        "value": 1_500_000_000_000_000_000,
        "chainId": 1,
    }
    assert intent_from_dict(tx) == legacy_intent


def test_from_dict_fee_market_by_field_presence(fee_market_intent):
    tx = {
        "chainId": 80002,
        "nonce": 1,
        "maxPriorityFeePerGas": 2_000_000_000,
        "maxFeePerGas": 100_000_000_000,
        "gas": 21000,
        "to": TO,
        "value": 0,
        "data": "0x",
        "accessList": [],
    }
    assert intent_from_dict(tx) == fee_market_intent
    assert intent_from_dict({**tx, "type": "0x2"}) == fee_market_intent


def test_from_dict_chain_id_override():
    tx = {"nonce": 0, "gasPrice": 1, "gas": 21000, "to": TO, "chainId": 1}
    assert intent_from_dict(tx, chain_id=137).chain_id == 137


def test_from_dict_rejects_unsupported_type():
    with pytest.raises(FieldValueError):
        intent_from_dict({"type": 1, "chainId": 1, "nonce": 0, "gas": 1, "to": TO})


def test_from_dict_rejects_access_list_entries():
    tx = {
        "type": 2,
        "chainId": 1,
        "nonce": 0,
        "maxPriorityFeePerGas": 1,
        "maxFeePerGas": 2,
        "gas": 21000,
        "to": TO,
        "accessList": [{"address": TO, "storageKeys": []}],
    }
    with pytest.raises(FieldValueError):
        intent_from_dict(tx)


def test_to_int():
    assert to_int("0x10", name="n") == 16
    assert to_int(" 42 ", name="n") == 42
    with pytest.raises(FieldValueError):
        to_int(None, name="n")
    with pytest.raises(FieldValueError):
        to_int("0xzz", name="n")
    with pytest.raises(FieldValueError):
        FeeMarketIntent(
            chain_id=1, nonce=0, max_priority_fee_per_gas=1, max_fee_per_gas=1,
            gas_limit=1, to=DEAD_ADDRESS, value=0, data=b"", access_list=[1],
        )
