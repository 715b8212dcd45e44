"""
Packed point numbers.

A sparse, ascending set of point indices stored as a total count followed
by runs of differences between successive indices. An empty set is the
single byte 0x00 and means "all points" to the caller.
"""

from fonticulous.config.limits import MAX_POINT_COUNT, MAX_POINT_INDEX, MAX_POINT_RUN
from fonticulous.otvar.binary import read_u8
from fonticulous.otvar.errors import EncoderPreconditionError, SizeMismatchError

POINTS_ARE_WORDS = 0x80
POINT_RUN_COUNT_MASK = 0x7F


def _check_points(points) -> list[int]:
    points = list(points)
    previous = -1
    for point in points:
        if point <= previous:
            raise EncoderPreconditionError(
                f"Point numbers must be ascending and unique, got {point} after {previous}"
            )
        previous = point
    if points and points[-1] > MAX_POINT_INDEX:
        raise EncoderPreconditionError(f"Point number {points[-1]} does not fit 16 bits")
    if len(points) > MAX_POINT_COUNT:
        raise EncoderPreconditionError(f"Too many points ({len(points)})")
    return points


def encode(points) -> bytes:
    """
    Encode an ascending set of point indices.

    Args:
        points: Ascending, unique, non-negative point indices; empty for all points

    Returns:
        Packed point numbers

    Raises:
        EncoderPreconditionError: If the indices are unsorted, duplicated or too large
    """
    points = _check_points(points)
    count = len(points)

    result = bytearray()
    if count <= 0x7F:
        result.append(count)
    else:
        result.append((count >> 8) | 0x80)
        result.append(count & 0xFF)

    pos = 0
    last_value = 0
    while pos < count:
        header_pos = len(result)
        result.append(0)

        # Width is fixed by the first difference of the run
        use_bytes = points[pos] - last_value <= 0xFF
        run_length = 0
        while pos < count and run_length < MAX_POINT_RUN:
            delta = points[pos] - last_value
            if use_bytes and delta > 0xFF:
                break
            if use_bytes:
                result.append(delta)
            else:
                result.append(delta >> 8)
                result.append(delta & 0xFF)
            last_value = points[pos]
            pos += 1
            run_length += 1

        result[header_pos] = run_length - 1
        if not use_bytes:
            result[header_pos] |= POINTS_ARE_WORDS

    return bytes(result)


def decode(data: bytes, offset: int = 0) -> tuple[tuple[int, ...], int]:
    """
    Decode packed point numbers.

    Args:
        data: Buffer holding the packed points
        offset: Position of the count field

    Returns:
        Tuple of (point indices, bytes consumed); empty indices mean all points

    Raises:
        TruncatedInputError: If the runs end before the declared count
        SizeMismatchError: If a run produces more points than declared
    """
    start = offset
    count, offset = read_u8(data, offset)
    if count & POINTS_ARE_WORDS:
        low, offset = read_u8(data, offset)
        count = ((count & POINT_RUN_COUNT_MASK) << 8) | low

    points: list[int] = []
    last_value = 0
    while len(points) < count:
        control, offset = read_u8(data, offset)
        run_length = (control & POINT_RUN_COUNT_MASK) + 1
        if len(points) + run_length > count:
            raise SizeMismatchError(
                f"Point run of {run_length} overruns declared count {count}"
            )
        for _ in range(run_length):
            if control & POINTS_ARE_WORDS:
                high, offset = read_u8(data, offset)
                low, offset = read_u8(data, offset)
                delta = (high << 8) | low
            else:
                delta, offset = read_u8(data, offset)
            last_value += delta
            points.append(last_value)

    return tuple(points), offset - start
