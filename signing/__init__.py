from .base import Signer
from .encrypted_keystore import EncryptedKeystoreSigner
from .env_private_key import EnvPrivateKeySigner, PrivateKeySigner
from .factory import get_signer
from .transaction import assemble_signed, sign, sign_transaction

__all__ = [
    "Signer",
    "PrivateKeySigner",
    "EnvPrivateKeySigner",
    "EncryptedKeystoreSigner",
    "get_signer",
    "assemble_signed",
    "sign",
    "sign_transaction",
]
