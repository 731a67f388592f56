"""Unsigned LEB128 varints as used by multicodec prefixes."""

from __future__ import annotations

from didtrust.errors import InvalidVarintError, TruncatedPayloadError

MAX_VARINT_LEN = 9


def put_uvarint(value: int) -> bytes:
    if value < 0:
        raise ValueError("uvarint value must not be negative")

    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def read_uvarint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a varint at ``offset``; returns ``(value, bytes_read)``."""
    value = 0
    shift = 0
    for index in range(offset, len(data)):
        read = index - offset + 1
        if read > MAX_VARINT_LEN:
            raise InvalidVarintError("varint larger than 63 bits")

        byte = data[index]
        value |= (byte & 0x7F) << shift
        if byte < 0x80:
            if byte == 0 and read > 1:
                raise InvalidVarintError("varint not minimally encoded")
            return value, read
        shift += 7

    raise TruncatedPayloadError("varint truncated before its final byte")
