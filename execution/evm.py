from __future__ import annotations

import os
from typing import Any, Dict, Optional

import requests

from errors import ProtocolError
from observability import build_log_context, log_event

CHAIN_ID_BY_NAME: Dict[str, int] = {
    "ethereum": 1,
    "sepolia": 11155111,
    "polygon": 137,
    "amoy": 80002,
    "base": 8453,
    "arbitrum": 42161,
    "optimism": 10,
}

BROADCAST_CTX = build_log_context(tool="broadcaster")


def chain_id_for(chain: str) -> int:
    c = (chain or "").strip().lower()
    if c in CHAIN_ID_BY_NAME:
        return CHAIN_ID_BY_NAME[c]
    raise ValueError(f"Unsupported chain: {chain}")


def _env(name: str) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return None
    v = v.strip()
    return v or None


def rpc_url_for(chain: Optional[str] = None) -> str:
    """
    Resolve the JSON-RPC URL.

    Env precedence (chain=polygon -> POLYGON):
    - EVM_RPC_URL_<CHAIN>
    - RPC_URL_<CHAIN>
    - RPC_URL
    """
    key = (chain or "").strip().upper()
    url = None
    if key:
        url = _env(f"EVM_RPC_URL_{key}") or _env(f"RPC_URL_{key}")
    url = url or _env("RPC_URL")
    if not url:
        hint = f"EVM_RPC_URL_{key} (or RPC_URL_{key}, RPC_URL)" if key else "RPC_URL"
        raise ValueError(f"Missing RPC URL. Pass --rpc-url or set {hint}.")
    return url


def build_send_raw_payload(raw_tx: bytes) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "method": "eth_sendRawTransaction",
        "params": ["0x" + bytes(raw_tx).hex()],
        "id": 1,
    }


def send_raw_transaction(rpc_url: str, raw_tx: bytes, *, timeout: float) -> str:
    """
    Submit signed bytes via eth_sendRawTransaction and return the tx hash.

    An `error` member in the response is a failure regardless of HTTP status.
    """
    payload = build_send_raw_payload(raw_tx)
    log_event("broadcast_request", ctx=BROADCAST_CTX, data={"bytes": len(raw_tx), "timeout": timeout})
    try:
        r = requests.post(rpc_url, json=payload, timeout=timeout)
    except requests.Timeout as e:
        raise ProtocolError(f"RPC timed out after {timeout}s", code="rpc_timeout") from e
    except requests.RequestException as e:
        raise ProtocolError(f"RPC transport error: {e}", code="rpc_transport_error") from e

    try:
        data = r.json()
    except ValueError as e:
        raise ProtocolError(
            f"RPC returned non-JSON response (HTTP {r.status_code})",
            data={"status_code": r.status_code},
        ) from e

    if not isinstance(data, dict):
        raise ProtocolError("RPC response is not a JSON object", data={"status_code": r.status_code})

    error = data.get("error")
    if error is not None:
        message = error.get("message") if isinstance(error, dict) else str(error)
        log_event("broadcast_rejected", ctx=BROADCAST_CTX, data={"error": error}, level="warning")
        raise ProtocolError(f"Error broadcasting transaction: {message}", data={"error": error})

    tx_hash = data.get("result")
    if not isinstance(tx_hash, str) or not tx_hash:
        raise ProtocolError("Failed to get transaction hash", data={"status_code": r.status_code})

    log_event("broadcast_accepted", ctx=BROADCAST_CTX, data={"tx_hash": tx_hash})
    return tx_hash
