from unittest.mock import MagicMock, patch

import pytest
import requests

from errors import AppError, ProtocolError, classify_exception
from execution.evm import build_send_raw_payload, chain_id_for, rpc_url_for, send_raw_transaction

RAW = bytes.fromhex("f86c808504e3b2920082520894deadbeefdeadbeefdeadbeefdeadbeefdeadbeef88016345785d8a000080018080")


def _response(body=None, status=200, json_error=None):
    r = MagicMock()
    r.status_code = status
    if json_error is not None:
        r.json.side_effect = json_error
    else:
        r.json.return_value = body
    return r


def test_payload_shape():
    payload = build_send_raw_payload(b"\x01\x02")
    assert payload == {"jsonrpc": "2.0", "method": "eth_sendRawTransaction", "params": ["0x0102"], "id": 1}


@patch("execution.evm.requests.post")
def test_send_returns_hash(mock_post):
    mock_post.return_value = _response({"jsonrpc": "2.0", "id": 1, "result": "0xabc"})

    assert send_raw_transaction("http://node", RAW, timeout=5) == "0xabc"
    mock_post.assert_called_once_with("http://node", json=build_send_raw_payload(RAW), timeout=5)


@pytest.mark.parametrize("status", [200, 500])
@patch("execution.evm.requests.post")
def test_error_member_fails_regardless_of_status(mock_post, status):
    mock_post.return_value = _response({"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "nonce too low"}}, status)

    with pytest.raises(ProtocolError) as e:
        send_raw_transaction("http://node", RAW, timeout=5)
    assert e.value.code == "rpc_error"
    assert "Error broadcasting transaction" in str(e.value)
    assert "nonce too low" in str(e.value)
    assert e.value.data["error"]["code"] == -32000


@patch("execution.evm.requests.post")
def test_missing_result(mock_post):
    mock_post.return_value = _response({"jsonrpc": "2.0", "id": 1})
    with pytest.raises(ProtocolError) as e:
        send_raw_transaction("http://node", RAW, timeout=5)
    assert "Failed to get transaction hash" in str(e.value)


@patch("execution.evm.requests.post")
def test_non_json_response(mock_post):
    mock_post.return_value = _response(status=502, json_error=ValueError("no json"))
    with pytest.raises(ProtocolError) as e:
        send_raw_transaction("http://node", RAW, timeout=5)
    assert e.value.data["status_code"] == 502


@patch("execution.evm.requests.post")
def test_timeout(mock_post):
    mock_post.side_effect = requests.Timeout("slow")
    with pytest.raises(ProtocolError) as e:
        send_raw_transaction("http://node", RAW, timeout=0.5)
    assert e.value.code == "rpc_timeout"


@patch("execution.evm.requests.post")
def test_transport_error(mock_post):
    mock_post.side_effect = requests.ConnectionError("refused")
    with pytest.raises(ProtocolError) as e:
        send_raw_transaction("http://node", RAW, timeout=5)
    assert e.value.code == "rpc_transport_error"


def test_rpc_url_precedence(monkeypatch):
    monkeypatch.setenv("RPC_URL", "http://default")
    monkeypatch.setenv("RPC_URL_POLYGON", "http://polygon")
    assert rpc_url_for() == "http://default"
    assert rpc_url_for("polygon") == "http://polygon"
    monkeypatch.setenv("EVM_RPC_URL_POLYGON", "http://evm-polygon")
    assert rpc_url_for("polygon") == "http://evm-polygon"
    assert rpc_url_for("base") == "http://default"


def test_rpc_url_missing(monkeypatch):
    monkeypatch.delenv("RPC_URL", raising=False)
    monkeypatch.delenv("EVM_RPC_URL_SEPOLIA", raising=False)
    monkeypatch.delenv("RPC_URL_SEPOLIA", raising=False)
    with pytest.raises(ValueError):
        rpc_url_for("sepolia")


def test_chain_ids():
    assert chain_id_for("Ethereum") == 1
    assert chain_id_for("amoy") == 80002
    with pytest.raises(ValueError):
        chain_id_for("dogechain")


def test_classify_exception():
    assert classify_exception(requests.Timeout("x")).code == "rpc_timeout"
    assert classify_exception(requests.ConnectionError("x")).code == "rpc_transport_error"
    assert classify_exception(FileNotFoundError("x")).code == "io_error"
    assert classify_exception(ValueError("x")).code == "invalid_value"
    assert classify_exception(RuntimeError("x")).code == "unknown_error"
    err = ProtocolError("boom")
    assert classify_exception(err) is err
    assert isinstance(classify_exception(KeyError("x")), AppError)
