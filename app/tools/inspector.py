from __future__ import annotations

import argparse

from app.tools.common import _json_err, _json_from_exception, _json_ok
from app.txfile import read_hex_file
from txcodec.inspector import DecodeExhausted, decode


def inspect_file(input_path: str) -> str:
    """Decode a signed or unsigned transaction file of unknown type."""
    try:
        raw = read_hex_file(input_path)
    except Exception as e:
        return _json_from_exception(e)

    result = decode(raw)
    if isinstance(result, DecodeExhausted):
        return _json_err(
            "decode_exhausted",
            "Failed to decode transaction as typed or legacy.",
            result.to_dict(),
        )
    return _json_ok({"bytes": len(raw), **result.to_dict()})


def _run(args: argparse.Namespace) -> str:
    return inspect_file(args.input)


def register_inspect_command(subparsers) -> None:
    p = subparsers.add_parser("inspect", help="Inspect an RLP-encoded transaction (signed or unsigned).")
    p.add_argument("--input", required=True, help="Path to file with hex-encoded transaction")
    p.set_defaults(func=_run)
