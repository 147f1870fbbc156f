from __future__ import annotations

import json
import sys
from typing import Any, Dict

from app.core.settings import settings
from errors import AppError, classify_exception
from qr import render_terminal, save_png


def _json_ok(data: Dict[str, Any] | None = None) -> str:
    payload = {"ok": True, "data": data or {}}
    return json.dumps(payload, indent=2, sort_keys=True)


def _json_err(code: str, message: str, data: Dict[str, Any] | None = None) -> str:
    payload = {"ok": False, "error": {"code": code, "message": message, "data": data or {}}}
    return json.dumps(payload, indent=2, sort_keys=True)


def _json_from_exception(e: Exception) -> str:
    err: AppError = classify_exception(e)
    return _json_err(err.code, err.message, err.data)


def emit_qr(hex_text: str, png_path: str) -> str:
    """Print the QR to stderr (stdout carries the JSON result) and save a PNG copy."""
    sys.stderr.write(render_terminal(hex_text, error_correction=settings.QR_ERROR_CORRECTION))
    sys.stderr.flush()
    save_png(
        hex_text,
        png_path,
        error_correction=settings.QR_ERROR_CORRECTION,
        box_size=settings.QR_BOX_SIZE,
        border=settings.QR_BORDER,
    )
    return png_path
