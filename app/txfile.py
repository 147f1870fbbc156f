"""
Hex transaction files.

One convention for every tool: files are written as bare lowercase hex (no
`0x`, no trailing newline). Readers strip whitespace and accept a single
optional leading `0x`, so files produced by other tools still load.
"""

from __future__ import annotations

import string
from pathlib import Path
from typing import Union

from errors import FieldValueError, TxFileError

_HEX_DIGITS = frozenset(string.hexdigits)


def parse_hex(text: str) -> bytes:
    s = "".join(text.split())
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    if not s:
        raise FieldValueError("empty hex string", field="hex")
    if len(s) % 2 != 0:
        raise FieldValueError(f"Hex string has an odd number of characters: {len(s)}", field="hex")
    bad = sorted({c for c in s if c not in _HEX_DIGITS})
    if bad:
        raise FieldValueError(f"Invalid hex characters: {''.join(bad)!r}", field="hex")
    return bytes.fromhex(s)


def format_hex(raw: bytes) -> str:
    return bytes(raw).hex()


def read_hex_file(path: Union[str, Path]) -> bytes:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TxFileError(f"cannot read {p}: {e}", path=str(p)) from e
    return parse_hex(text)


def write_hex_file(path: Union[str, Path], raw: bytes) -> Path:
    p = Path(path)
    try:
        p.write_text(format_hex(raw), encoding="utf-8")
    except OSError as e:
        raise TxFileError(f"cannot write {p}: {e}", path=str(p)) from e
    return p
