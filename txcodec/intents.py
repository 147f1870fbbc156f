from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

from eth_utils import keccak, to_checksum_address

from errors import FieldValueError

from .rlp_items import ADDRESS_LEN, UINT256_MAX

FEE_MARKET_TX_TYPE = 0x02


class TxKind(Enum):
    """Closed set of supported transaction formats."""

    LEGACY = "legacy"
    FEE_MARKET = "fee_market"


def _check_uint(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FieldValueError(f"{name} must be an integer, got {type(value).__name__}", field=name)
    if value < 0 or value > UINT256_MAX:
        raise FieldValueError(f"{name} out of uint256 range: {value}", field=name)


def _check_address(name: str, value: Any) -> None:
    if not isinstance(value, (bytes, bytearray)) or len(value) != ADDRESS_LEN:
        raise FieldValueError(f"{name} must be exactly 20 bytes", field=name)


def _check_bytes(name: str, value: Any) -> None:
    if not isinstance(value, (bytes, bytearray)):
        raise FieldValueError(f"{name} must be bytes, got {type(value).__name__}", field=name)


@dataclass(frozen=True)
class LegacyIntent:
    """
    EIP-155 legacy transaction fields.

    Signing binds `chain_id` into the preimage through the trailing empty
    r, s placeholders.
    """

    kind: ClassVar[TxKind] = TxKind.LEGACY

    nonce: int
    gas_price: int
    gas_limit: int
    to: bytes
    value: int
    data: bytes
    chain_id: int

    def __post_init__(self) -> None:
        for name in ("nonce", "gas_price", "gas_limit", "value", "chain_id"):
            _check_uint(name, getattr(self, name))
        _check_address("to", self.to)
        _check_bytes("data", self.data)
        object.__setattr__(self, "to", bytes(self.to))
        object.__setattr__(self, "data", bytes(self.data))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "chainId": self.chain_id,
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
            "to": to_checksum_address(self.to),
            "value": self.value,
            "data": "0x" + self.data.hex(),
        }


@dataclass(frozen=True)
class FeeMarketIntent:
    """EIP-1559 (type 2) transaction fields; only an empty access list is supported."""

    kind: ClassVar[TxKind] = TxKind.FEE_MARKET

    chain_id: int
    nonce: int
    max_priority_fee_per_gas: int
    max_fee_per_gas: int
    gas_limit: int
    to: bytes
    value: int
    data: bytes
    access_list: Tuple[Any, ...] = field(default=())

    def __post_init__(self) -> None:
        for name in ("chain_id", "nonce", "max_priority_fee_per_gas", "max_fee_per_gas", "gas_limit", "value"):
            _check_uint(name, getattr(self, name))
        _check_address("to", self.to)
        _check_bytes("data", self.data)
        if len(self.access_list) != 0:
            raise FieldValueError("access lists with entries are not supported", field="access_list")
        object.__setattr__(self, "to", bytes(self.to))
        object.__setattr__(self, "data", bytes(self.data))
        object.__setattr__(self, "access_list", ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "chainId": self.chain_id,
            "nonce": self.nonce,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
            "gas": self.gas_limit,
            "to": to_checksum_address(self.to),
            "value": self.value,
            "data": "0x" + self.data.hex(),
            "accessList": [],
        }


TransactionIntent = Union[LegacyIntent, FeeMarketIntent]


@dataclass(frozen=True)
class Signature:
    v: int
    r: int
    s: int

    def to_dict(self) -> Dict[str, Any]:
        return {"v": self.v, "r": hex(self.r), "s": hex(self.s)}


@dataclass(frozen=True)
class SignedTransaction:
    intent: TransactionIntent
    signature: Signature
    raw: bytes

    @property
    def raw_hex(self) -> str:
        return self.raw.hex()

    @property
    def tx_hash(self) -> str:
        return "0x" + keccak(self.raw).hex()


def to_int(v: Any, *, name: str) -> int:
    if v is None:
        raise FieldValueError(f"Missing required tx field: {name}", field=name)
    if isinstance(v, bool):
        raise FieldValueError(f"Invalid int field {name}: {v}", field=name)
    if isinstance(v, int):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        try:
            if s.startswith("0x"):
                return int(s, 16)
            return int(s, 10)
        except ValueError as e:
            raise FieldValueError(f"Invalid int field {name}: {v!r}", field=name) from e
    raise FieldValueError(f"Invalid int field {name}: {type(v).__name__}", field=name)


def to_bytes(v: Any, *, name: str) -> bytes:
    if v is None:
        return b""
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        if s == "":
            return b""
        try:
            return bytes.fromhex(s)
        except ValueError as e:
            raise FieldValueError(f"Invalid hex in field {name}: {e}", field=name) from e
    raise FieldValueError(f"Invalid bytes field {name}: {type(v).__name__}", field=name)


def to_address_bytes(v: Any, *, name: str = "to") -> bytes:
    b = to_bytes(v, name=name)
    if len(b) != ADDRESS_LEN:
        raise FieldValueError(f"{name} must be 20 bytes, got {len(b)}", field=name)
    return b


def _tx_kind(tx: Dict[str, Any]) -> TxKind:
    tx_type = tx.get("type")
    if isinstance(tx_type, str):
        s = tx_type.strip().lower()
        if s in (TxKind.LEGACY.value, TxKind.FEE_MARKET.value):
            return TxKind(s)
        tx_type = to_int(s, name="type")
    if tx_type is None:
        if "maxFeePerGas" in tx or "maxPriorityFeePerGas" in tx:
            return TxKind.FEE_MARKET
        return TxKind.LEGACY
    if int(tx_type) == 0:
        return TxKind.LEGACY
    if int(tx_type) == FEE_MARKET_TX_TYPE:
        return TxKind.FEE_MARKET
    raise FieldValueError(f"Unsupported tx type: {tx_type} (supported: 0, 2)", field="type")


def intent_from_dict(tx: Dict[str, Any], *, chain_id: Optional[int] = None) -> TransactionIntent:
    """
    Build an intent from a Web3-style tx dict (camelCase keys, ints or hex strings).

    `chain_id`, when given, overrides the dict's `chainId`.
    """
    cid = chain_id if chain_id is not None else to_int(tx.get("chainId"), name="chainId")
    kind = _tx_kind(tx)
    if kind is TxKind.LEGACY:
        return LegacyIntent(
            nonce=to_int(tx.get("nonce"), name="nonce"),
            gas_price=to_int(tx.get("gasPrice"), name="gasPrice"),
            gas_limit=to_int(tx.get("gas"), name="gas"),
            to=to_address_bytes(tx.get("to")),
            value=to_int(tx.get("value", 0), name="value"),
            data=to_bytes(tx.get("data", b""), name="data"),
            chain_id=cid,
        )
    if kind is TxKind.FEE_MARKET:
        access_list = tx.get("accessList") or []
        if not isinstance(access_list, (list, tuple)):
            raise FieldValueError("accessList must be a list", field="accessList")
        return FeeMarketIntent(
            chain_id=cid,
            nonce=to_int(tx.get("nonce"), name="nonce"),
            max_priority_fee_per_gas=to_int(tx.get("maxPriorityFeePerGas"), name="maxPriorityFeePerGas"),
            max_fee_per_gas=to_int(tx.get("maxFeePerGas"), name="maxFeePerGas"),
            gas_limit=to_int(tx.get("gas"), name="gas"),
            to=to_address_bytes(tx.get("to")),
            value=to_int(tx.get("value", 0), name="value"),
            data=to_bytes(tx.get("data", b""), name="data"),
            access_list=tuple(access_list),
        )
    raise FieldValueError(f"Unsupported tx kind: {kind}", field="type")
