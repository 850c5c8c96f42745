"""Growable output buffers for the instruction stream and track offsets."""

from array import array

from atm_txt.errors import AtmRangeError

VLE_MAX_GROUPS = 5


def encode_vle(value: int) -> bytes:
    # 7-bit groups, most significant first, bit 7 set on all but the last byte
    value &= 0xFFFFFFFF
    groups = []
    while True:
        groups.append(value & 0x7F)
        value >>= 7
        if not value or len(groups) >= VLE_MAX_GROUPS:
            break
    out = bytearray()
    for i in range(len(groups), 0, -1):
        b = groups[i - 1]
        if i != 1:
            b |= 0x80
        out.append(b)
    return bytes(out)


class ByteBuffer:
    def __init__(self) -> None:
        self._data = bytearray()

    def push(self, value: int) -> None:
        self._data.append(value & 0xFF)

    def extend(self, values) -> None:
        for v in values:
            self.push(v)

    def push_vle(self, value: int) -> None:
        self._data += encode_vle(value)

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def __bytes__(self) -> bytes:
        return self.getvalue()

    def __len__(self) -> int:
        return len(self._data)


class OffsetBuffer:
    """16-bit values, serialized little-endian for the song header."""

    def __init__(self) -> None:
        self._items = array("H")

    def push(self, value: int) -> None:
        if value < 0 or value > 0xFFFF:
            raise AtmRangeError(f"offset {value} does not fit in 16 bits")
        self._items.append(value)

    def to_le_bytes(self) -> bytes:
        out = bytearray()
        for off in self._items:
            out.append(off & 0xFF)
            out.append((off >> 8) & 0xFF)
        return bytes(out)

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
