from __future__ import annotations

import argparse
from decimal import Decimal, InvalidOperation
from typing import Optional

from app.core.settings import settings
from app.tools.common import _json_from_exception, _json_ok, emit_qr
from app.txfile import format_hex, write_hex_file
from errors import FieldValueError
from observability import build_log_context, log_event
from txcodec.intents import FeeMarketIntent, LegacyIntent, TransactionIntent, to_address_bytes, to_bytes
from txcodec.preimage import build_preimage

BUILD_CTX = build_log_context(tool="tx_builder")

ETHER_DECIMALS = 18
GWEI_DECIMALS = 9


def to_atomic(amount: str, decimals: int, *, name: str) -> int:
    """Exact decimal-string to integer base units; rejects sub-unit precision."""
    try:
        d = Decimal(str(amount).strip())
    except InvalidOperation:
        raise FieldValueError(f"{name} is not a decimal number: {amount!r}", field=name) from None
    if not d.is_finite() or d < 0:
        raise FieldValueError(f"{name} must be a non-negative number: {amount!r}", field=name)
    scaled = d.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise FieldValueError(f"{name} has more than {decimals} decimal places: {amount!r}", field=name)
    return int(scaled)


def build_intent(
    *,
    to: str,
    value: str,
    gas_limit: int,
    nonce: int,
    chain_id: int,
    data: str = "",
    gas_price: Optional[str] = None,
    eip1559: bool = False,
    max_fee_gwei: Optional[str] = None,
    priority_fee_gwei: Optional[str] = None,
) -> TransactionIntent:
    to_b = to_address_bytes(to)
    value_wei = to_atomic(value, ETHER_DECIMALS, name="value")
    data_b = to_bytes(data, name="data")

    if eip1559:
        if gas_price is not None:
            raise FieldValueError("--gas-price conflicts with --eip1559", field="gas_price")
        if max_fee_gwei is None or priority_fee_gwei is None:
            raise FieldValueError("--max-fee-gwei and --priority-fee-gwei are required with --eip1559", field="fees")
        return FeeMarketIntent(
            chain_id=chain_id,
            nonce=nonce,
            max_priority_fee_per_gas=to_atomic(priority_fee_gwei, GWEI_DECIMALS, name="priority_fee_gwei"),
            max_fee_per_gas=to_atomic(max_fee_gwei, GWEI_DECIMALS, name="max_fee_gwei"),
            gas_limit=gas_limit,
            to=to_b,
            value=value_wei,
            data=data_b,
        )

    if max_fee_gwei is not None or priority_fee_gwei is not None:
        raise FieldValueError("--max-fee-gwei/--priority-fee-gwei require --eip1559", field="fees")
    if gas_price is None:
        raise FieldValueError("--gas-price is required for legacy transactions", field="gas_price")
    return LegacyIntent(
        nonce=nonce,
        gas_price=to_atomic(gas_price, GWEI_DECIMALS, name="gas_price"),
        gas_limit=gas_limit,
        to=to_b,
        value=value_wei,
        data=data_b,
        chain_id=chain_id,
    )


def build_unsigned(output: str, *, qr: bool = False, **fields) -> str:
    """Build an unsigned preimage (legacy by default) and write it as hex."""
    try:
        intent = build_intent(**fields)
        raw = build_preimage(intent)
        path = write_hex_file(output, raw)
        result = {"kind": intent.kind.value, "output": str(path), "bytes": len(raw), "intent": intent.to_dict()}
        if qr:
            result["qr_png"] = emit_qr(format_hex(raw), settings.QR_UNSIGNED_PNG)
        log_event("unsigned_built", ctx=BUILD_CTX, data={"kind": intent.kind.value, "bytes": len(raw)})
        return _json_ok(result)
    except Exception as e:
        return _json_from_exception(e)


def _run(args: argparse.Namespace) -> str:
    return build_unsigned(
        args.output,
        qr=args.qr,
        to=args.to,
        value=args.value,
        gas_limit=args.gas_limit,
        nonce=args.nonce,
        chain_id=args.chain_id,
        data=args.data,
        gas_price=args.gas_price,
        eip1559=args.eip1559,
        max_fee_gwei=args.max_fee_gwei,
        priority_fee_gwei=args.priority_fee_gwei,
    )


def register_build_command(subparsers) -> None:
    p = subparsers.add_parser("build", help="Build an unsigned tx preimage (legacy or EIP-1559).")
    p.add_argument("--to", required=True, help="Recipient address")
    p.add_argument("--value", required=True, help='Value in ETH, e.g. "0.0015"')
    p.add_argument("--gas-price", help="LEGACY: gas price in gwei")
    p.add_argument("--eip1559", action="store_true", help="Build a type-2 signing payload")
    p.add_argument("--max-fee-gwei", help="EIP-1559: max fee per gas (gwei)")
    p.add_argument("--priority-fee-gwei", help="EIP-1559: max priority fee per gas (gwei)")
    p.add_argument("--gas-limit", type=int, required=True)
    p.add_argument("--nonce", type=int, required=True)
    p.add_argument("--chain-id", type=int, required=True)
    p.add_argument("--data", default="", help="Optional data payload (hex, with or without 0x)")
    p.add_argument("--output", required=True, help="Output file for hex-encoded preimage")
    p.add_argument("--qr", action="store_true", help="Also render the preimage as a QR code")
    p.set_defaults(func=_run)
