from __future__ import annotations

import io
from pathlib import Path
from typing import Union

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

from errors import TxFileError

_EC_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


def _make_qr(data: str, *, error_correction: str = "Q", box_size: int = 12, border: int = 6) -> qrcode.QRCode:
    try:
        level = _EC_LEVELS[error_correction.upper()]
    except KeyError:
        raise ValueError(f"unknown QR error correction level: {error_correction}") from None
    qr = qrcode.QRCode(error_correction=level, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def render_terminal(data: str, *, error_correction: str = "Q") -> str:
    """Half-block text rendering suitable for a terminal."""
    out = io.StringIO()
    _make_qr(data, error_correction=error_correction, border=2).print_ascii(out=out, invert=True)
    return out.getvalue()


def save_png(
    data: str,
    path: Union[str, Path],
    *,
    error_correction: str = "Q",
    box_size: int = 12,
    border: int = 6,
) -> Path:
    p = Path(path)
    img = _make_qr(data, error_correction=error_correction, box_size=box_size, border=border).make_image(
        fill_color="black", back_color="white"
    )
    try:
        img.save(str(p))
    except OSError as e:
        raise TxFileError(f"cannot write QR image {p}: {e}", path=str(p)) from e
    return p
