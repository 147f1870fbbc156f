from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from eth_utils import keccak

from errors import AppError, FormatError
from observability import build_log_context, log_event

from .intents import FEE_MARKET_TX_TYPE, LegacyIntent, Signature, TransactionIntent
from .parser import parse_fee_market_unsigned, parse_legacy_unsigned
from .preimage import signing_hash
from .recovery import recover_sender, split_legacy_v
from .rlp_items import RlpItem, encode

SIGNED_FEE_MARKET_ITEM_COUNT = 12
LEGACY_ITEM_COUNT = 9

INSPECT_CTX = build_log_context(tool="inspector")


@dataclass(frozen=True)
class DecodeResult:
    intent: TransactionIntent
    signature: Optional[Signature] = None
    sender: Optional[str] = None
    sender_error: Optional[str] = None
    tx_hash: Optional[str] = None
    replay_protected: bool = True

    @property
    def signed(self) -> bool:
        return self.signature is not None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "kind": self.intent.kind.value,
            "signed": self.signed,
            "fields": self.intent.to_dict(),
        }
        if self.signature is not None:
            out["signature"] = self.signature.to_dict()
            out["tx_hash"] = self.tx_hash
            out["replay_protected"] = self.replay_protected
            out["sender"] = self.sender if self.sender else "unknown"
            if self.sender_error:
                out["sender_error"] = self.sender_error
        return out


@dataclass(frozen=True)
class AttemptFailure:
    attempt: str
    reason: str


@dataclass(frozen=True)
class DecodeExhausted:
    """No known transaction shape matched the input."""

    failures: Tuple[AttemptFailure, ...] = field(default=())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "undecodable",
            "attempts": [{"attempt": f.attempt, "reason": f.reason} for f in self.failures],
        }


AttemptOutcome = Union[DecodeResult, AttemptFailure]
Attempt = Tuple[str, Callable[[bytes], DecodeResult]]


def _with_sender(result: DecodeResult, msg_hash: bytes, recovery_id: int) -> DecodeResult:
    sig = result.signature
    try:
        sender = recover_sender(msg_hash, recovery_id, sig.r, sig.s)
    except AppError as e:
        return replace(result, sender=None, sender_error=str(e))
    return replace(result, sender=sender, sender_error=None)


def _decode_typed(data: bytes) -> DecodeResult:
    if not data or data[0] != FEE_MARKET_TX_TYPE:
        raise FormatError("not a type-2 transaction", stage="typed")
    r = RlpItem.decode(data[1:])
    if not r.is_list:
        raise FormatError("expected RLP list", stage="typed")
    count = r.item_count()
    if count == LEGACY_ITEM_COUNT:
        return DecodeResult(intent=parse_fee_market_unsigned(data[1:]))
    if count != SIGNED_FEE_MARKET_ITEM_COUNT:
        raise FormatError(f"expected 9 or 12 items, got {count}", stage="typed")

    # The first nine items are exactly the unsigned payload.
    intent = parse_fee_market_unsigned(encode(r.raw[:LEGACY_ITEM_COUNT]))
    sig = Signature(v=r.int_at(9), r=r.int_at(10), s=r.int_at(11))
    result = DecodeResult(intent=intent, signature=sig, tx_hash="0x" + keccak(data).hex())
    if sig.v not in (0, 1):
        return replace(result, sender_error=f"invalid y-parity: {sig.v}")
    return _with_sender(result, signing_hash(intent), sig.v)


def _decode_legacy_signed(data: bytes) -> DecodeResult:
    r = RlpItem.decode(data)
    if not r.is_list or r.item_count() != LEGACY_ITEM_COUNT:
        raise FormatError("expected 9 items", stage="legacy_signed")
    if len(r.bytes_at(7)) == 0 and len(r.bytes_at(8)) == 0:
        raise FormatError("r,s are unsigned placeholders", stage="legacy_signed")
    sig = Signature(v=r.int_at(6), r=r.int_at(7), s=r.int_at(8))
    tx_hash = "0x" + keccak(data).hex()

    try:
        recid, chain_id = split_legacy_v(sig.v)
    except AppError as e:
        recid, chain_id, v_error = None, None, str(e)
    else:
        v_error = None

    intent = LegacyIntent(
        nonce=r.int_at(0),
        gas_price=r.int_at(1),
        gas_limit=r.int_at(2),
        to=r.address_at(3),
        value=r.int_at(4),
        data=r.bytes_at(5),
        chain_id=chain_id or 0,
    )
    result = DecodeResult(intent=intent, signature=sig, tx_hash=tx_hash, replay_protected=chain_id is not None)
    if recid is None:
        return replace(result, sender_error=v_error)
    if chain_id is None:
        # Pre-EIP-155: the hash covers only the first six fields.
        return _with_sender(result, keccak(encode(r.raw[:6])), recid)
    return _with_sender(result, signing_hash(intent), recid)


def _decode_legacy_unsigned(data: bytes) -> DecodeResult:
    return DecodeResult(intent=parse_legacy_unsigned(data))


ATTEMPTS: List[Attempt] = [
    ("typed", _decode_typed),
    ("legacy_signed", _decode_legacy_signed),
    ("legacy_unsigned", _decode_legacy_unsigned),
]


def _run(attempt: Attempt, data: bytes) -> AttemptOutcome:
    name, fn = attempt
    try:
        return fn(data)
    except AppError as e:
        return AttemptFailure(attempt=name, reason=str(e))


def decode(data: bytes, attempts: Optional[List[Attempt]] = None) -> Union[DecodeResult, DecodeExhausted]:
    """
    Best-effort classification of arbitrary transaction bytes.

    Attempts run in order and the first `DecodeResult` wins. A failed sender
    recovery is reported on the result and does not invalidate the decode.
    """
    failures: List[AttemptFailure] = []
    for attempt in attempts or ATTEMPTS:
        outcome = _run(attempt, data)
        if isinstance(outcome, DecodeResult):
            log_event(
                "tx_decoded",
                ctx=INSPECT_CTX,
                data={"attempt": attempt[0], "kind": outcome.intent.kind.value, "signed": outcome.signed},
            )
            return outcome
        failures.append(outcome)
    log_event("tx_undecodable", ctx=INSPECT_CTX, data={"bytes": len(data)}, level="warning")
    return DecodeExhausted(failures=tuple(failures))
