from __future__ import annotations

from typing import Tuple, Union

from errors import CryptoError
from observability import build_log_context, log_event
from txcodec.intents import FEE_MARKET_TX_TYPE, FeeMarketIntent, LegacyIntent, Signature, SignedTransaction, TransactionIntent
from txcodec.preimage import fee_market_body, legacy_body, signing_hash
from txcodec.recovery import legacy_v
from txcodec.rlp_items import encode, encode_int

from .base import Signer
from .env_private_key import PrivateKeySigner

SECP256K1_N = int(
    "0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141",
    16,
)

SIGN_CTX = build_log_context(tool="signer")


def _check_sig(sig: Tuple[int, int, int]) -> None:
    recid, r, s = sig
    if recid not in (0, 1):
        raise CryptoError(f"invalid recovery id: {recid}")
    if r <= 0 or r >= SECP256K1_N:
        raise CryptoError("invalid r")
    if s <= 0 or s >= SECP256K1_N:
        raise CryptoError("invalid s")


def assemble_signed(intent: TransactionIntent, signature: Signature) -> bytes:
    sig_fields = [
        encode_int(signature.v, field="v"),
        encode_int(signature.r, field="r"),
        encode_int(signature.s, field="s"),
    ]
    if isinstance(intent, LegacyIntent):
        return encode(legacy_body(intent) + sig_fields)
    if isinstance(intent, FeeMarketIntent):
        return bytes([FEE_MARKET_TX_TYPE]) + encode(fee_market_body(intent) + sig_fields)
    raise TypeError(f"Unsupported intent type: {type(intent).__name__}")


def sign_transaction(intent: TransactionIntent, signer: Signer) -> SignedTransaction:
    """
    Sign `intent` and return the broadcast-ready transaction.

    The preimage is always regenerated from the parsed model so that two byte
    strings parsing to the same intent can never yield different signatures.
    """
    digest = signing_hash(intent)
    recid, r, s = signer.sign_msg_hash(digest)
    _check_sig((recid, r, s))

    if isinstance(intent, LegacyIntent):
        v = legacy_v(recid, intent.chain_id)
    elif isinstance(intent, FeeMarketIntent):
        v = recid
    else:
        raise TypeError(f"Unsupported intent type: {type(intent).__name__}")

    sig = Signature(v=v, r=r, s=s)
    signed = SignedTransaction(intent=intent, signature=sig, raw=assemble_signed(intent, sig))
    log_event(
        "tx_signed",
        ctx=SIGN_CTX,
        data={"kind": intent.kind.value, "chain_id": intent.chain_id, "tx_hash": signed.tx_hash, "bytes": len(signed.raw)},
    )
    return signed


def sign(intent: TransactionIntent, private_key: Union[str, bytes]) -> SignedTransaction:
    return sign_transaction(intent, PrivateKeySigner(private_key))
