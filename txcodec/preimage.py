"""
Canonical unsigned signing payloads.

Legacy (EIP-155):
    RLP([nonce, gasPrice, gasLimit, to, value, data, chainId, "", ""])

Fee market (EIP-1559):
    0x02 || RLP([chainId, nonce, maxPriorityFeePerGas, maxFeePerGas, gasLimit, to, value, data, []])

`signing_hash` is the keccak-256 digest the signer signs.
"""

from __future__ import annotations

from typing import List

from eth_utils import keccak

from .intents import FEE_MARKET_TX_TYPE, FeeMarketIntent, LegacyIntent, TransactionIntent
from .rlp_items import RlpTree, encode, encode_int


def legacy_body(intent: LegacyIntent) -> List[RlpTree]:
    """The six fields shared by the legacy preimage and the signed legacy list."""
    return [
        encode_int(intent.nonce, field="nonce"),
        encode_int(intent.gas_price, field="gas_price"),
        encode_int(intent.gas_limit, field="gas_limit"),
        intent.to,
        encode_int(intent.value, field="value"),
        intent.data,
    ]


def fee_market_body(intent: FeeMarketIntent) -> List[RlpTree]:
    """The nine fields shared by the type-2 signing payload and the signed type-2 list."""
    return [
        encode_int(intent.chain_id, field="chain_id"),
        encode_int(intent.nonce, field="nonce"),
        encode_int(intent.max_priority_fee_per_gas, field="max_priority_fee_per_gas"),
        encode_int(intent.max_fee_per_gas, field="max_fee_per_gas"),
        encode_int(intent.gas_limit, field="gas_limit"),
        intent.to,
        encode_int(intent.value, field="value"),
        intent.data,
        [],
    ]


def build_legacy(intent: LegacyIntent) -> bytes:
    return encode(legacy_body(intent) + [encode_int(intent.chain_id, field="chain_id"), b"", b""])


def build_fee_market(intent: FeeMarketIntent) -> bytes:
    return bytes([FEE_MARKET_TX_TYPE]) + encode(fee_market_body(intent))


def build_preimage(intent: TransactionIntent) -> bytes:
    if isinstance(intent, LegacyIntent):
        return build_legacy(intent)
    if isinstance(intent, FeeMarketIntent):
        return build_fee_market(intent)
    raise TypeError(f"Unsupported intent type: {type(intent).__name__}")


def signing_hash(intent: TransactionIntent) -> bytes:
    """keccak-256 over the canonical preimage, rebuilt from the intent."""
    return keccak(build_preimage(intent))
