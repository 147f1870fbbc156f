from __future__ import annotations

from typing import Optional, Tuple

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError

from errors import CryptoError

EIP155_V_OFFSET = 35
PRE_EIP155_V = (27, 28)


def legacy_v(recovery_id: int, chain_id: int) -> int:
    return recovery_id + chain_id * 2 + EIP155_V_OFFSET


def split_legacy_v(v: int) -> Tuple[int, Optional[int]]:
    """
    Return (recovery_id, chain_id) for a legacy v value.

    chain_id is None for pre-EIP-155 signatures (v = 27 or 28).
    """
    if v in PRE_EIP155_V:
        return v - PRE_EIP155_V[0], None
    if v >= EIP155_V_OFFSET:
        return (v - EIP155_V_OFFSET) % 2, (v - EIP155_V_OFFSET) // 2
    raise CryptoError(f"unsupported legacy v value: {v}")


def recover_sender(msg_hash: bytes, recovery_id: int, r: int, s: int) -> str:
    """Checksummed address of the key that produced (r, s) over `msg_hash`."""
    try:
        sig = keys.Signature(vrs=(recovery_id, r, s))
        pub = sig.recover_public_key_from_msg_hash(msg_hash)
    except (BadSignature, ValidationError, ValueError) as e:
        raise CryptoError(f"sender recovery failed: {e}") from e
    return pub.to_checksum_address()
