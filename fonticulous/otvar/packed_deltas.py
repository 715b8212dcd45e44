"""
Packed deltas.

An ordered sequence of signed 16-bit values stored as runs of zeroes,
bytes or words. The stream does not record its own length: the caller
knows how many values to expect.
"""

import struct

from fonticulous.config.limits import MAX_DELTA_RUN
from fonticulous.otvar.binary import read, read_u8
from fonticulous.otvar.errors import EncoderPreconditionError, SizeMismatchError

DELTAS_ARE_ZERO = 0x80
DELTAS_ARE_WORDS = 0x40
DELTA_RUN_COUNT_MASK = 0x3F

# Run kinds
ZEROES = "zeroes"
BYTES = "bytes"
WORDS = "words"


def _kind(value: int) -> str:
    if value == 0:
        return ZEROES
    if -128 <= value <= 127:
        return BYTES
    if -32768 <= value <= 32767:
        return WORDS
    raise EncoderPreconditionError(f"Delta {value} does not fit 16 bits")


def _encode_run(kind: str, run: list[int]) -> bytes:
    control = len(run) - 1
    if kind == ZEROES:
        return bytes([control | DELTAS_ARE_ZERO])
    if kind == BYTES:
        return bytes([control]) + struct.pack(f">{len(run)}b", *run)
    return bytes([control | DELTAS_ARE_WORDS]) + struct.pack(f">{len(run)}h", *run)


def encode(values) -> bytes:
    """
    Encode signed 16-bit deltas as greedy runs.

    Args:
        values: Sequence of integers in the signed 16-bit range

    Returns:
        Packed deltas

    Raises:
        EncoderPreconditionError: If a value does not fit 16 bits
    """
    values = list(values)
    result = bytearray()
    pos = 0
    while pos < len(values):
        kind = _kind(values[pos])
        end = pos + 1
        while (
            end < len(values)
            and end - pos < MAX_DELTA_RUN
            and _kind(values[end]) == kind
        ):
            end += 1
        result += _encode_run(kind, values[pos:end])
        pos = end
    return bytes(result)


def decode(data: bytes, expected_count: int, offset: int = 0) -> tuple[list[int], int]:
    """
    Decode packed deltas.

    Args:
        data: Buffer holding the packed deltas
        expected_count: Number of values the caller expects
        offset: Position of the first run

    Returns:
        Tuple of (values, bytes consumed)

    Raises:
        TruncatedInputError: If the buffer ends before expected_count values
        SizeMismatchError: If a run overshoots expected_count
    """
    start = offset
    values: list[int] = []
    while len(values) < expected_count:
        control, offset = read_u8(data, offset)
        run_length = (control & DELTA_RUN_COUNT_MASK) + 1
        if len(values) + run_length > expected_count:
            raise SizeMismatchError(
                f"Delta run of {run_length} overruns expected count {expected_count}"
            )
        if control & DELTAS_ARE_ZERO:
            values.extend([0] * run_length)
        elif control & DELTAS_ARE_WORDS:
            run, offset = read(f"{run_length}h", data, offset)
            values.extend(run)
        else:
            run, offset = read(f"{run_length}b", data, offset)
            values.extend(run)
    return values, offset - start
