from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Tuple


class Signer(ABC):
    """
    A minimal signing interface for EVM transaction digests.

    Transaction assembly lives in `signing.transaction`; a signer only has to
    produce a recoverable secp256k1 signature over a 32-byte digest.
    """

    @abstractmethod
    def get_address(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def sign_msg_hash(self, digest32: bytes) -> Tuple[int, int, int]:
        """Return (recovery_id, r, s)."""
        raise NotImplementedError
