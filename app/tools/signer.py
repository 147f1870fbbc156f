from __future__ import annotations

import argparse
from typing import Optional

from app.core.settings import settings
from app.tools.common import _json_from_exception, _json_ok, emit_qr
from app.txfile import parse_hex, read_hex_file, write_hex_file
from errors import FieldValueError
from observability import build_log_context, log_event
from qr import decode_qr_file
from signing import get_signer, sign_transaction
from txcodec.parser import parse_unsigned

SIGN_CTX = build_log_context(tool="tx_signer")


def read_unsigned(input_path: Optional[str] = None, input_qr: Optional[str] = None) -> bytes:
    if input_qr:
        log_event("unsigned_read", ctx=SIGN_CTX, data={"source": "qr", "path": input_qr})
        return parse_hex(decode_qr_file(input_qr))
    if input_path:
        log_event("unsigned_read", ctx=SIGN_CTX, data={"source": "file", "path": input_path})
        return read_hex_file(input_path)
    raise FieldValueError("one of --input or --input-qr is required", field="input")


def sign_unsigned(
    output: str,
    *,
    input_path: Optional[str] = None,
    input_qr: Optional[str] = None,
    private_key: Optional[str] = None,
    qr: bool = False,
) -> str:
    """Parse an unsigned preimage, sign it and write the signed hex."""
    try:
        signer = get_signer(private_key)
        unsigned = read_unsigned(input_path, input_qr)
        intent = parse_unsigned(unsigned)
        signed = sign_transaction(intent, signer)
        path = write_hex_file(output, signed.raw)
        result = {
            "kind": intent.kind.value,
            "from": signer.get_address(),
            "output": str(path),
            "tx_hash": signed.tx_hash,
            "signature": signed.signature.to_dict(),
            "intent": intent.to_dict(),
        }
        if qr:
            result["qr_png"] = emit_qr(signed.raw_hex, settings.QR_SIGNED_PNG)
        return _json_ok(result)
    except Exception as e:
        return _json_from_exception(e)


def _run(args: argparse.Namespace) -> str:
    return sign_unsigned(
        args.output,
        input_path=args.input,
        input_qr=args.input_qr,
        private_key=args.private_key,
        qr=args.qr,
    )


def register_sign_command(subparsers) -> None:
    p = subparsers.add_parser("sign", help="Sign an unsigned tx preimage.")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--input", help="Input unsigned transaction (hex file)")
    src.add_argument("--input-qr", help="Input unsigned transaction QR image (PNG, JPEG, ...)")
    p.add_argument("--output", required=True, help="Signed transaction file output (hex)")
    p.add_argument(
        "--private-key",
        help="Private key hex (0x optional). Defaults to PRIVATE_KEY / SIGNER_TYPE configuration.",
    )
    p.add_argument("--qr", action="store_true", help="Also render the signed transaction as a QR code")
    p.set_defaults(func=_run)
