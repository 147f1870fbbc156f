from .inspector import AttemptFailure, DecodeExhausted, DecodeResult, decode
from .intents import (
    FEE_MARKET_TX_TYPE,
    FeeMarketIntent,
    LegacyIntent,
    Signature,
    SignedTransaction,
    TransactionIntent,
    TxKind,
    intent_from_dict,
)
from .parser import parse_unsigned
from .preimage import build_fee_market, build_legacy, build_preimage, signing_hash
from .recovery import legacy_v, recover_sender, split_legacy_v
from .rlp_items import RlpItem, encode, encode_int

__all__ = [
    "AttemptFailure",
    "DecodeExhausted",
    "DecodeResult",
    "decode",
    "FEE_MARKET_TX_TYPE",
    "FeeMarketIntent",
    "LegacyIntent",
    "Signature",
    "SignedTransaction",
    "TransactionIntent",
    "TxKind",
    "intent_from_dict",
    "parse_unsigned",
    "build_fee_market",
    "build_legacy",
    "build_preimage",
    "signing_hash",
    "legacy_v",
    "recover_sender",
    "split_legacy_v",
    "RlpItem",
    "encode",
    "encode_int",
]
