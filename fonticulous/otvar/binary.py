"""
Big-endian binary helpers shared by the variation codecs.
"""

import struct

from fontTools.misc.fixedTools import fixedToFloat, floatToFixed

from fonticulous.config.limits import F2DOT14_MAX, F2DOT14_MIN
from fonticulous.otvar.errors import EncoderPreconditionError, TruncatedInputError

F2DOT14_BITS = 14


def read(fmt: str, data: bytes, offset: int) -> tuple[tuple, int]:
    """
    Unpack a big-endian struct format at offset.

    Args:
        fmt: struct format without byte order prefix
        data: Buffer to read from
        offset: Position of the first byte

    Returns:
        Tuple of (unpacked values, offset after the read)

    Raises:
        TruncatedInputError: If the buffer ends before the format does
    """
    fmt = ">" + fmt
    size = struct.calcsize(fmt)
    end = offset + size
    if offset < 0 or end > len(data):
        raise TruncatedInputError(
            f"need {size} bytes at offset {offset}, buffer has {len(data)}"
        )
    return struct.unpack_from(fmt, data, offset), end


def read_u8(data: bytes, offset: int) -> tuple[int, int]:
    (value,), offset = read("B", data, offset)
    return value, offset


def read_u16(data: bytes, offset: int) -> tuple[int, int]:
    (value,), offset = read("H", data, offset)
    return value, offset


def to_f2dot14(value: float) -> int:
    """Convert a float to its F2Dot14 integer representation."""
    if not F2DOT14_MIN <= value <= F2DOT14_MAX:
        raise EncoderPreconditionError(f"{value} is out of F2Dot14 range")
    return floatToFixed(value, F2DOT14_BITS)


def from_f2dot14(value: int) -> float:
    """Convert an F2Dot14 integer to a float."""
    return fixedToFloat(value, F2DOT14_BITS)


def pack_f2dot14_tuple(coords) -> bytes:
    return struct.pack(f">{len(coords)}h", *(to_f2dot14(v) for v in coords))


def read_f2dot14_tuple(
    data: bytes, offset: int, axis_count: int
) -> tuple[tuple[float, ...], int]:
    values, offset = read(f"{axis_count}h", data, offset)
    return tuple(from_f2dot14(v) for v in values), offset


def f2dot14_key(coords) -> tuple[int, ...]:
    """Quantized key for comparing coordinate tuples."""
    return tuple(to_f2dot14(v) for v in coords)
