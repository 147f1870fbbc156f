from .decoders import ArucoQrDecoder, OpenCvQrDecoder, QrDecoder, decode_image, decode_qr_file, default_decoders
from .render import render_terminal, save_png

__all__ = [
    "ArucoQrDecoder",
    "OpenCvQrDecoder",
    "QrDecoder",
    "decode_image",
    "decode_qr_file",
    "default_decoders",
    "render_terminal",
    "save_png",
]
