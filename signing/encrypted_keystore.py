from __future__ import annotations

import json
import os
from pathlib import Path

from eth_account import Account

from errors import CryptoError, TxFileError

from .env_private_key import PrivateKeySigner


class EncryptedKeystoreSigner(PrivateKeySigner):
    """
    Decrypts an Ethereum keystore JSON using a passphrase.

    Env vars:
    - KEYSTORE_PATH: path to keystore json file
    - KEYSTORE_PASSWORD: passphrase
    """

    def __init__(self, keystore_path_env: str = "KEYSTORE_PATH", password_env: str = "KEYSTORE_PASSWORD") -> None:  # nosec B107
        path_raw = os.getenv(keystore_path_env)
        password = os.getenv(password_env)
        if not path_raw:
            raise ValueError(f"{keystore_path_env} environment variable not set")
        if not password:
            raise ValueError(f"{password_env} environment variable not set")

        path = Path(path_raw).expanduser()
        try:
            keystore = json.loads(path.read_text())
        except OSError as e:
            raise TxFileError(f"Keystore file not readable: {e}", path=str(path)) from e
        except json.JSONDecodeError as e:
            raise TxFileError(f"Keystore file is not valid JSON: {e}", path=str(path)) from e

        try:
            pk_bytes = Account.decrypt(keystore, password)
        except ValueError as e:
            raise CryptoError(f"keystore decryption failed: {e}") from e
        super().__init__(bytes(pk_bytes))
