from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


@dataclass
class AppError(Exception):
    code: str
    message: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        return self.message


class FormatError(AppError):
    """
    Wrong RLP shape, item count or placeholder.

    `data` carries the failing `stage` and, when known, the item `index`.
    """

    def __init__(self, message: str, *, stage: str = "rlp", index: Optional[int] = None) -> None:
        data: Dict[str, Any] = {"stage": stage}
        if index is not None:
            data["index"] = index
        super().__init__("format_error", message, data)

    @property
    def index(self) -> Optional[int]:
        return self.data.get("index")


class FieldValueError(AppError, ValueError):
    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__("invalid_value", message, {"field": field} if field else {})


class CryptoError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__("crypto_error", message, {})


class TxFileError(AppError):
    def __init__(self, message: str, *, path: str, code: str = "io_error") -> None:
        super().__init__(code, message, {"path": path})


class QrDecodeError(TxFileError):
    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message, path=path, code="qr_undecodable")


class ProtocolError(AppError):
    def __init__(self, message: str, *, code: str = "rpc_error", data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(code, message, data or {})


def classify_exception(e: Exception) -> AppError:
    """
    Map library / OS issues into stable error codes.
    """
    if isinstance(e, AppError):
        return e
    if isinstance(e, requests.Timeout):
        return ProtocolError(str(e), code="rpc_timeout")
    if isinstance(e, requests.RequestException):
        return ProtocolError(str(e), code="rpc_transport_error")
    if isinstance(e, OSError):
        return AppError("io_error", str(e), {})
    if isinstance(e, ValueError):
        return AppError("invalid_value", str(e), {})

    return AppError("unknown_error", str(e), {})
