from __future__ import annotations

import argparse
from typing import Optional

from app.core.settings import settings
from app.tools.common import _json_from_exception, _json_ok
from app.txfile import read_hex_file
from execution.evm import rpc_url_for, send_raw_transaction


def broadcast_file(
    input_path: str,
    *,
    rpc_url: Optional[str] = None,
    chain: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """Submit a signed transaction file via eth_sendRawTransaction."""
    try:
        raw = read_hex_file(input_path)
        url = rpc_url or (settings.RPC_URL if not chain else None) or rpc_url_for(chain)
        tx_hash = send_raw_transaction(url, raw, timeout=timeout or settings.HTTP_TIMEOUT_SEC)
        return _json_ok({"tx_hash": tx_hash, "bytes": len(raw)})
    except Exception as e:
        return _json_from_exception(e)


def _run(args: argparse.Namespace) -> str:
    return broadcast_file(args.input, rpc_url=args.rpc_url, chain=args.chain, timeout=args.timeout)


def register_broadcast_command(subparsers) -> None:
    p = subparsers.add_parser("broadcast", help="Broadcast a signed transaction over JSON-RPC.")
    p.add_argument("--input", required=True, help="Signed transaction file input (hex)")
    target = p.add_mutually_exclusive_group()
    target.add_argument("--rpc-url", help="RPC URL to broadcast to")
    target.add_argument("--chain", help="Chain name; resolves EVM_RPC_URL_<CHAIN> / RPC_URL_<CHAIN>")
    p.add_argument("--timeout", type=float, help="RPC timeout in seconds (default HTTP_TIMEOUT_SEC)")
    p.set_defaults(func=_run)
