from __future__ import annotations

from errors import FormatError

from .intents import FEE_MARKET_TX_TYPE, FeeMarketIntent, LegacyIntent, TransactionIntent
from .rlp_items import RlpItem

UNSIGNED_ITEM_COUNT = 9


def _expect_list(item: RlpItem, count: int, *, stage: str) -> None:
    if not item.is_list or item.item_count() != count:
        raise FormatError(f"expected {count} items", stage=stage)


def _is_empty_string(item: RlpItem) -> bool:
    return item.is_data and len(item.raw) == 0


def parse_legacy_unsigned(data: bytes) -> LegacyIntent:
    r = RlpItem.decode(data)
    _expect_list(r, UNSIGNED_ITEM_COUNT, stage="legacy")
    if not (_is_empty_string(r.at(7)) and _is_empty_string(r.at(8))):
        raise FormatError("expected canonical r,s placeholders", stage="legacy")
    return LegacyIntent(
        nonce=r.int_at(0, "nonce"),
        gas_price=r.int_at(1, "gasPrice"),
        gas_limit=r.int_at(2, "gasLimit"),
        to=r.address_at(3, "to"),
        value=r.int_at(4, "value"),
        data=r.bytes_at(5, "data"),
        chain_id=r.int_at(6, "chainId"),
    )


def parse_fee_market_unsigned(payload: bytes) -> FeeMarketIntent:
    """Parse the RLP list that follows the 0x02 type byte."""
    r = RlpItem.decode(payload)
    _expect_list(r, UNSIGNED_ITEM_COUNT, stage="fee_market")
    access_list = r.at(8)
    if not (access_list.is_list and access_list.item_count() == 0):
        raise FormatError("access lists with entries are not supported", stage="fee_market", index=8)
    return FeeMarketIntent(
        chain_id=r.int_at(0, "chainId"),
        nonce=r.int_at(1, "nonce"),
        max_priority_fee_per_gas=r.int_at(2, "maxPriorityFeePerGas"),
        max_fee_per_gas=r.int_at(3, "maxFeePerGas"),
        gas_limit=r.int_at(4, "gasLimit"),
        to=r.address_at(5, "to"),
        value=r.int_at(6, "value"),
        data=r.bytes_at(7, "data"),
    )


def parse_unsigned(data: bytes) -> TransactionIntent:
    """
    Inverse of the preimage builder.

    A leading 0x02 selects the fee-market layout. Legacy lists always start
    with an RLP list prefix (>= 0xc0), so the discrimination is unambiguous.
    """
    if not data:
        raise FormatError("empty transaction payload", stage="parse")
    if data[0] == FEE_MARKET_TX_TYPE:
        return parse_fee_market_unsigned(data[1:])
    return parse_legacy_unsigned(data)
