from __future__ import annotations

import os
from typing import Tuple, Union

from eth_account import Account
from eth_keys import keys
from eth_keys.exceptions import ValidationError

from errors import CryptoError

from .base import Signer


class PrivateKeySigner(Signer):
    """
    Local signer over a raw secp256k1 private key (hex with or without 0x, or 32 bytes).
    """

    def __init__(self, private_key: Union[str, bytes]) -> None:
        if isinstance(private_key, str):
            private_key = private_key.strip()
        try:
            self._account = Account.from_key(private_key)
            self._key = keys.PrivateKey(bytes(self._account.key))
        except (ValueError, TypeError, ValidationError) as e:
            # The exception text can echo key material; keep only the type.
            raise CryptoError(f"malformed private key ({type(e).__name__})") from None

    def get_address(self) -> str:
        return self._account.address

    def sign_msg_hash(self, digest32: bytes) -> Tuple[int, int, int]:
        try:
            sig = self._key.sign_msg_hash(digest32)
        except (ValidationError, ValueError) as e:
            raise CryptoError(f"signing failed: {e}") from e
        return sig.v, sig.r, sig.s


class EnvPrivateKeySigner(PrivateKeySigner):
    """
    Development signer that reads a raw hex private key from PRIVATE_KEY env var.
    """

    def __init__(self, env_var: str = "PRIVATE_KEY") -> None:
        pk = os.getenv(env_var)
        if not pk:
            raise ValueError(f"{env_var} environment variable not set")
        super().__init__(pk)
