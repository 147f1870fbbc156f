import json

import pytest
from eth_account import Account

from conftest import TEST_PRIVATE_KEY
from errors import CryptoError, TxFileError
from signing import EncryptedKeystoreSigner, EnvPrivateKeySigner, PrivateKeySigner, get_signer


def _write_keystore(tmp_path, password="correct horse"):
    keystore = Account.encrypt(TEST_PRIVATE_KEY, password, kdf="pbkdf2", iterations=2)
    path = tmp_path / "keystore.json"
    path.write_text(json.dumps(keystore))
    return path


def test_explicit_key_wins(monkeypatch, sender_address):
    monkeypatch.setenv("SIGNER_TYPE", "keystore")
    signer = get_signer(TEST_PRIVATE_KEY)
    assert isinstance(signer, PrivateKeySigner)
    assert signer.get_address() == sender_address


def test_env_private_key_default(monkeypatch, sender_address):
    monkeypatch.setenv("PRIVATE_KEY", TEST_PRIVATE_KEY[2:])
    signer = get_signer()
    assert isinstance(signer, EnvPrivateKeySigner)
    assert signer.get_address() == sender_address


def test_env_private_key_missing():
    with pytest.raises(ValueError):
        EnvPrivateKeySigner()


def test_keystore_signer(monkeypatch, tmp_path, sender_address):
    monkeypatch.setenv("SIGNER_TYPE", "keystore")
    monkeypatch.setenv("KEYSTORE_PATH", str(_write_keystore(tmp_path)))
    monkeypatch.setenv("KEYSTORE_PASSWORD", "correct horse")

    signer = get_signer()
    assert isinstance(signer, EncryptedKeystoreSigner)
    assert signer.get_address() == sender_address


def test_keystore_wrong_password(monkeypatch, tmp_path):
    monkeypatch.setenv("KEYSTORE_PATH", str(_write_keystore(tmp_path)))
    monkeypatch.setenv("KEYSTORE_PASSWORD", "wrong")
    with pytest.raises(CryptoError):
        EncryptedKeystoreSigner()


def test_keystore_unreadable(monkeypatch, tmp_path):
    monkeypatch.setenv("KEYSTORE_PATH", str(tmp_path / "missing.json"))
    monkeypatch.setenv("KEYSTORE_PASSWORD", "pw")
    with pytest.raises(TxFileError):
        EncryptedKeystoreSigner()


def test_keystore_not_json(monkeypatch, tmp_path):
    path = tmp_path / "keystore.json"
    path.write_text("not json")
    monkeypatch.setenv("KEYSTORE_PATH", str(path))
    monkeypatch.setenv("KEYSTORE_PASSWORD", "pw")
    with pytest.raises(TxFileError):
        EncryptedKeystoreSigner()


def test_unsupported_signer_type(monkeypatch):
    monkeypatch.setenv("SIGNER_TYPE", "hsm")
    with pytest.raises(ValueError) as e:
        get_signer()
    assert "Unsupported SIGNER_TYPE" in str(e.value)


def test_malformed_key_message_does_not_echo_key():
    with pytest.raises(CryptoError) as e:
        PrivateKeySigner("0xnot-a-key-secret")
    assert "secret" not in str(e.value)
