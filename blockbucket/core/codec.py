"""Encoding and decoding of single key/value blocks."""
import struct
from typing import Iterable, NamedTuple, Optional, Tuple

from .errors import CorruptBlockError

# Format: [key_len(4, LE)][value_len(4, LE)][key][value]
HEADER = struct.Struct('<II')
HEADER_SIZE = HEADER.size
MAX_FIELD_SIZE = 0xFFFFFFFF


class Record(NamedTuple):
    """One stored key/value pair. Unpacks as ``key, value``."""
    key: bytes
    value: bytes


def to_bytes(data, name: str = 'data') -> bytes:
    """Return ``data`` as bytes, rejecting text and fields too large for the header."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like, not {type(data).__name__}")
    data = bytes(data)
    if len(data) > MAX_FIELD_SIZE:
        raise ValueError(f"{name} is too large ({len(data)} bytes, max {MAX_FIELD_SIZE})")
    return data


def encode(key: bytes, value: bytes) -> bytes:
    """Encode a key/value pair as one block."""
    key = to_bytes(key, 'key')
    value = to_bytes(value, 'value')
    return HEADER.pack(len(key), len(value)) + key + value


def encode_many(items: Iterable[Tuple[bytes, bytes]]) -> bytes:
    """Encode pairs back to back, preserving their order."""
    return b''.join(encode(key, value) for key, value in items)


def decode(buffer, offset: int = 0) -> Optional[Tuple[Record, int]]:
    """
    Decode the block starting at ``offset``.

    Returns (record, end_offset), or None when the buffer is exhausted.
    Raises CorruptBlockError for a torn header or a body shorter than its
    declared lengths.
    """
    size = len(buffer)
    remaining = size - offset
    if remaining <= 0:
        return None
    if remaining < HEADER_SIZE:
        raise CorruptBlockError(
            f"Truncated header at offset {offset}: {remaining} of {HEADER_SIZE} bytes",
            offset=offset)

    key_len, value_len = HEADER.unpack_from(buffer, offset)
    key_start = offset + HEADER_SIZE
    value_start = key_start + key_len
    end = value_start + value_len
    if end > size:
        raise CorruptBlockError(
            f"Block at offset {offset} declares {key_len + value_len} bytes, "
            f"only {size - key_start} remain",
            offset=offset)

    key = bytes(buffer[key_start:value_start])
    value = bytes(buffer[value_start:end])
    return Record(key, value), end
