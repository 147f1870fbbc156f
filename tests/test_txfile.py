import pytest

from app.txfile import parse_hex, read_hex_file, write_hex_file
from errors import FieldValueError, TxFileError


@pytest.mark.parametrize("text", ["deadbeef", "0xdeadbeef", "0XDEADBEEF", "  dead\nbeef\n", "0xDeAdBeEf"])
def test_parse_hex_accepts_common_spellings(text):
    assert parse_hex(text) == bytes.fromhex("deadbeef")


@pytest.mark.parametrize("text", ["", "0x", "abc", "0xzz", "de ad be eg"])
def test_parse_hex_rejects_invalid(text):
    with pytest.raises(FieldValueError) as e:
        parse_hex(text)
    assert e.value.code == "invalid_value"


def test_write_is_bare_lowercase_hex(tmp_path):
    p = write_hex_file(tmp_path / "tx.hex", b"\xDE\xAD\xBE\xEF")
    assert p.read_text() == "deadbeef"
    assert read_hex_file(p) == b"\xde\xad\xbe\xef"


def test_read_accepts_prefixed_file(tmp_path):
    p = tmp_path / "tx.hex"
    p.write_text("0xc0\n")
    assert read_hex_file(p) == b"\xc0"


def test_missing_file(tmp_path):
    with pytest.raises(TxFileError) as e:
        read_hex_file(tmp_path / "nope.hex")
    assert e.value.code == "io_error"
    assert e.value.data["path"].endswith("nope.hex")


def test_unwritable_path(tmp_path):
    with pytest.raises(TxFileError):
        write_hex_file(tmp_path / "missing-dir" / "tx.hex", b"\x00")
