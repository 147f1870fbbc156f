from unittest.mock import patch

import numpy as np
import pytest

from errors import QrDecodeError, TxFileError
from qr import decode_image, decode_qr_file, render_terminal, save_png
from qr.decoders import load_image

SIGNED_HEX = "f86c808504e3b2920082520894deadbeefdeadbeefdeadbeefdeadbeefdeadbeef88016345785d8a000080018080"


class FakeDecoder:
    def __init__(self, name, text):
        self.name = name
        self.text = text
        self.calls = 0

    def decode(self, image):
        self.calls += 1
        return self.text


def test_falls_back_to_next_decoder():
    first = FakeDecoder("first", None)
    second = FakeDecoder("second", "abcd")
    third = FakeDecoder("third", "never")

    assert decode_image(np.zeros((4, 4), dtype=np.uint8), [first, second, third]) == "abcd"
    assert (first.calls, second.calls, third.calls) == (1, 1, 0)


def test_empty_text_counts_as_miss():
    assert decode_image(np.zeros((4, 4), dtype=np.uint8), [FakeDecoder("a", ""), FakeDecoder("b", None)]) is None


@patch("qr.decoders.load_image")
def test_all_decoders_fail(mock_load):
    mock_load.return_value = np.zeros((4, 4), dtype=np.uint8)
    with pytest.raises(QrDecodeError) as e:
        decode_qr_file("capture.png", [FakeDecoder("opencv", None), FakeDecoder("opencv_aruco", None)])
    assert e.value.code == "qr_undecodable"
    assert "opencv or opencv_aruco" in str(e.value)


def test_load_image_missing_file(tmp_path):
    with pytest.raises(TxFileError):
        load_image(tmp_path / "missing.png")


def test_render_terminal_is_text():
    out = render_terminal(SIGNED_HEX)
    assert isinstance(out, str)
    assert len(out.splitlines()) > 10


def test_unknown_error_correction_level(tmp_path):
    with pytest.raises(ValueError):
        save_png(SIGNED_HEX, tmp_path / "x.png", error_correction="Z")


def test_png_round_trip(tmp_path):
    path = save_png(SIGNED_HEX, tmp_path / "signed_qr.png")
    assert path.exists()
    assert decode_qr_file(path) == SIGNED_HEX
