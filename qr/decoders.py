"""
QR image decoding with ordered fallbacks.

Captured images are lossy, so several independent detectors are tried in
priority order and the first non-empty payload wins.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

import cv2
import numpy as np

from errors import QrDecodeError, TxFileError
from observability import build_log_context, log_event

QR_CTX = build_log_context(tool="qr")


class QrDecoder(Protocol):
    name: str

    def decode(self, image: np.ndarray) -> Optional[str]:
        ...


def _first_text(detector, image: np.ndarray) -> Optional[str]:
    # Prefer detectAndDecodeMulti if available, else single-code detection
    if hasattr(detector, "detectAndDecodeMulti"):
        ok, data_list, _pts, _ = detector.detectAndDecodeMulti(image)
        if ok:
            found = next((d for d in data_list if d), None)
            if found:
                return found
    text, _pts, _ = detector.detectAndDecode(image)
    return text or None


class OpenCvQrDecoder:
    """Classic OpenCV finder-pattern detector."""

    name = "opencv"

    def __init__(self) -> None:
        self._detector = cv2.QRCodeDetector()

    def decode(self, image: np.ndarray) -> Optional[str]:
        try:
            return _first_text(self._detector, image)
        except cv2.error as e:
            log_event("qr_decoder_error", ctx=QR_CTX, data={"decoder": self.name, "error": str(e)}, level="debug")
            return None


class ArucoQrDecoder:
    """
    ArUco-based detector; more tolerant of blur and perspective.

    Binarizes the image first so its result does not depend on the same
    preprocessing as the classic detector.
    """

    name = "opencv_aruco"

    def __init__(self) -> None:
        factory = getattr(cv2, "QRCodeDetectorAruco", None)
        self._detector = factory() if factory is not None else None

    def decode(self, image: np.ndarray) -> Optional[str]:
        if self._detector is None:
            log_event("qr_decoder_unavailable", ctx=QR_CTX, data={"decoder": self.name}, level="debug")
            return None
        try:
            _, binary = cv2.threshold(image, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
            return _first_text(self._detector, binary)
        except cv2.error as e:
            log_event("qr_decoder_error", ctx=QR_CTX, data={"decoder": self.name, "error": str(e)}, level="debug")
            return None


def default_decoders() -> Sequence[QrDecoder]:
    return (OpenCvQrDecoder(), ArucoQrDecoder())


def load_image(path: Union[str, Path]) -> np.ndarray:
    p = Path(path)
    image = cv2.imread(str(p), cv2.IMREAD_GRAYSCALE)
    if image is None:
        raise TxFileError(f"cannot read image {p}", path=str(p))
    return image


def decode_image(image: np.ndarray, decoders: Optional[Sequence[QrDecoder]] = None) -> Optional[str]:
    for decoder in decoders if decoders is not None else default_decoders():
        text = decoder.decode(image)
        if text:
            log_event("qr_decoded", ctx=QR_CTX, data={"decoder": decoder.name, "chars": len(text)})
            return text
        log_event("qr_decoder_miss", ctx=QR_CTX, data={"decoder": decoder.name})
    return None


def decode_qr_file(path: Union[str, Path], decoders: Optional[Sequence[QrDecoder]] = None) -> str:
    """
    Decode the text payload of a QR image file, trying each decoder in order.
    """
    chain = decoders if decoders is not None else default_decoders()
    text = decode_image(load_image(path), chain)
    if text is None:
        names = " or ".join(d.name for d in chain)
        raise QrDecodeError(f"No QR code could be decoded by {names}", path=str(path))
    return text
