"""
Tuple variation headers.

Each header describes one variation tuple: the size of its serialized
point/delta data, where its peak lives (embedded or by shared index), an
optional intermediate region and whether it carries private points.
"""

import struct
from dataclasses import dataclass
from enum import IntFlag

from fonticulous.otvar.binary import pack_f2dot14_tuple, read_f2dot14_tuple, read_u16
from fonticulous.otvar.errors import EncoderPreconditionError

TUPLE_INDEX_MASK = 0x0FFF


class TupleIndexFlags(IntFlag):
    """High bits of the tupleIndex field."""

    EMBEDDED_PEAK_TUPLE = 0x8000
    INTERMEDIATE_REGION = 0x4000
    PRIVATE_POINT_NUMBERS = 0x2000


@dataclass(frozen=True)
class TupleVariationHeader:
    """
    One tuple variation header.

    peak_tuple is present iff EMBEDDED_PEAK_TUPLE is set; otherwise
    shared_tuple_index refers to the enclosing table's shared tuples.
    intermediate_start and intermediate_end are present iff
    INTERMEDIATE_REGION is set.
    """

    variation_data_size: int
    flags: TupleIndexFlags
    shared_tuple_index: int = 0
    peak_tuple: tuple[float, ...] | None = None
    intermediate_start: tuple[float, ...] | None = None
    intermediate_end: tuple[float, ...] | None = None

    def __post_init__(self):
        embedded = bool(self.flags & TupleIndexFlags.EMBEDDED_PEAK_TUPLE)
        if embedded != (self.peak_tuple is not None):
            raise EncoderPreconditionError(
                "peak_tuple must be present exactly when EMBEDDED_PEAK_TUPLE is set"
            )
        intermediate = bool(self.flags & TupleIndexFlags.INTERMEDIATE_REGION)
        if (self.intermediate_start is None) != (self.intermediate_end is None):
            raise EncoderPreconditionError(
                "intermediate_start and intermediate_end must be given together"
            )
        if intermediate != (self.intermediate_start is not None):
            raise EncoderPreconditionError(
                "intermediate region must be present exactly when INTERMEDIATE_REGION is set"
            )
        if not 0 <= self.shared_tuple_index <= TUPLE_INDEX_MASK:
            raise EncoderPreconditionError(
                f"Shared tuple index {self.shared_tuple_index} does not fit 12 bits"
            )
        if not 0 <= self.variation_data_size <= 0xFFFF:
            raise EncoderPreconditionError(
                f"Variation data size {self.variation_data_size} does not fit 16 bits"
            )

    @property
    def has_private_points(self) -> bool:
        return bool(self.flags & TupleIndexFlags.PRIVATE_POINT_NUMBERS)

    @property
    def tuple_index(self) -> int:
        """The raw tupleIndex field."""
        return int(self.flags) | self.shared_tuple_index

    def size(self, axis_count: int) -> int:
        """Serialized size of this header in bytes."""
        tuples = 0
        if self.peak_tuple is not None:
            tuples += 1
        if self.intermediate_start is not None:
            tuples += 2
        return 4 + 2 * axis_count * tuples

    def encode(self, axis_count: int) -> bytes:
        """
        Serialize the header.

        Args:
            axis_count: Number of axes in the font

        Returns:
            Header bytes
        """
        data = struct.pack(">HH", self.variation_data_size, self.tuple_index)
        for coords in (self.peak_tuple, self.intermediate_start, self.intermediate_end):
            if coords is None:
                continue
            if len(coords) != axis_count:
                raise EncoderPreconditionError(
                    f"Tuple has {len(coords)} coordinates, font has {axis_count} axes"
                )
            data += pack_f2dot14_tuple(coords)
        return data

    @classmethod
    def decode(
        cls, data: bytes, axis_count: int, offset: int = 0
    ) -> "TupleVariationHeader":
        """
        Read a header.

        Args:
            data: Buffer holding the header
            axis_count: Number of axes in the font
            offset: Position of the header

        Returns:
            The decoded header; its size(axis_count) tells how many bytes it used
        """
        size, offset = read_u16(data, offset)
        tuple_index, offset = read_u16(data, offset)
        flags = TupleIndexFlags(tuple_index & ~TUPLE_INDEX_MASK & 0xFFFF)

        peak = start = end = None
        if flags & TupleIndexFlags.EMBEDDED_PEAK_TUPLE:
            peak, offset = read_f2dot14_tuple(data, offset, axis_count)
        if flags & TupleIndexFlags.INTERMEDIATE_REGION:
            start, offset = read_f2dot14_tuple(data, offset, axis_count)
            end, offset = read_f2dot14_tuple(data, offset, axis_count)

        return cls(
            variation_data_size=size,
            flags=flags,
            shared_tuple_index=tuple_index & TUPLE_INDEX_MASK,
            peak_tuple=peak,
            intermediate_start=start,
            intermediate_end=end,
        )
