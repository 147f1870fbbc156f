from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

import rlp
from rlp.exceptions import DecodingError, DeserializationError
from rlp.sedes import big_endian_int

from errors import FieldValueError, FormatError

UINT256_MAX = 2**256 - 1
ADDRESS_LEN = 20

RlpTree = Union[bytes, Sequence["RlpTree"]]


def encode(item: RlpTree) -> bytes:
    return rlp.encode(item)


def encode_int(value: int, *, field: Optional[str] = None) -> bytes:
    """Minimal big-endian bytes; zero encodes as the empty string."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise FieldValueError(f"{field or 'value'} must be an integer", field=field)
    if value < 0 or value > UINT256_MAX:
        raise FieldValueError(f"{field or 'value'} out of uint256 range: {value}", field=field)
    if value == 0:
        return b""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def _label(index: int, name: Optional[str]) -> str:
    return f"item {index} ({name})" if name else f"item {index}"


class RlpItem:
    """
    Read-only view over a decoded RLP node.

    Accessors that take an index validate the child's shape and raise
    `FormatError` carrying that index on mismatch.
    """

    __slots__ = ("_node",)

    def __init__(self, node: Any) -> None:
        self._node = node

    @classmethod
    def decode(cls, data: bytes) -> "RlpItem":
        if not data:
            raise FormatError("empty RLP input")
        try:
            return cls(rlp.decode(bytes(data), strict=True))
        except DecodingError as e:
            raise FormatError(f"malformed RLP: {e}") from e

    @property
    def is_list(self) -> bool:
        return isinstance(self._node, list)

    @property
    def is_data(self) -> bool:
        return isinstance(self._node, (bytes, bytearray))

    @property
    def raw(self) -> Any:
        return self._node

    def item_count(self) -> int:
        if not self.is_list:
            raise FormatError("expected RLP list, got byte string")
        return len(self._node)

    def at(self, index: int) -> "RlpItem":
        if not self.is_list:
            raise FormatError("expected RLP list, got byte string", index=index)
        if index < 0 or index >= len(self._node):
            raise FormatError(f"item {index} out of range ({len(self._node)} items)", index=index)
        return RlpItem(self._node[index])

    def bytes_at(self, index: int, name: Optional[str] = None) -> bytes:
        child = self.at(index)
        if not child.is_data:
            raise FormatError(f"{_label(index, name)}: expected byte string, got list", index=index)
        return bytes(child.raw)

    def int_at(self, index: int, name: Optional[str] = None) -> int:
        b = self.bytes_at(index, name)
        if len(b) > 32:
            raise FormatError(f"{_label(index, name)}: integer wider than 256 bits", index=index)
        try:
            return big_endian_int.deserialize(b)
        except DeserializationError as e:
            raise FormatError(f"{_label(index, name)}: non-canonical integer ({e})", index=index) from e

    def address_at(self, index: int, name: Optional[str] = None) -> bytes:
        b = self.bytes_at(index, name)
        if len(b) != ADDRESS_LEN:
            raise FormatError(f"{_label(index, name)}: expected 20-byte address, got {len(b)} bytes", index=index)
        return b

    def list_at(self, index: int) -> List["RlpItem"]:
        child = self.at(index)
        if not child.is_list:
            raise FormatError(f"item {index}: expected list, got byte string", index=index)
        return [RlpItem(n) for n in child.raw]

    def __repr__(self) -> str:
        return f"RlpItem({self._node!r})"
