from __future__ import annotations

import os
from typing import Optional

from .base import Signer
from .encrypted_keystore import EncryptedKeystoreSigner
from .env_private_key import EnvPrivateKeySigner, PrivateKeySigner


def get_signer(private_key: Optional[str] = None) -> Signer:
    """
    Select a signer.

    An explicit `private_key` wins. Otherwise SIGNER_TYPE decides:
    - env_private_key (default): uses PRIVATE_KEY env var
    - keystore: uses KEYSTORE_PATH + KEYSTORE_PASSWORD
    """
    if private_key:
        return PrivateKeySigner(private_key)
    signer_type = os.getenv("SIGNER_TYPE", "env_private_key").strip().lower()
    if signer_type == "env_private_key":
        return EnvPrivateKeySigner()
    if signer_type == "keystore":
        return EncryptedKeystoreSigner()
    raise ValueError(f"Unsupported SIGNER_TYPE: {signer_type}")
