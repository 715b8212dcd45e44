"""
Tuple variation stores.

The per-glyph (gvar) or per-table (cvar) collection of tuple variations:
a count, a data offset, the headers, then the point and delta payloads in
header order, optionally preceded by one point set shared by several
tuples.
"""

import struct
from collections import Counter
from dataclasses import dataclass, field

from fonticulous.config.limits import MAX_TUPLE_COUNT
from fonticulous.otvar import packed_deltas, packed_points
from fonticulous.otvar.binary import f2dot14_key, read_u16
from fonticulous.otvar.delta import Delta, deltas_dimensions, join_components, split_components
from fonticulous.otvar.errors import (
    EncoderPreconditionError,
    SizeMismatchError,
    VariationDataError,
)
from fonticulous.otvar.tuple_variation_header import (
    TupleIndexFlags,
    TupleVariationHeader,
)
from fonticulous.utils.logging import logger

TUPLES_SHARE_POINT_NUMBERS = 0x8000
TUPLE_COUNT_MASK = 0x0FFF


@dataclass
class TupleVariation:
    """
    One region of the design space and the deltas it applies.

    An empty points tuple means the deltas cover every point, in order.
    Otherwise deltas[i] applies to points[i].
    """

    peak: tuple[float, ...]
    deltas: list[Delta]
    points: tuple[int, ...] = ()
    intermediate: tuple[tuple[float, ...], tuple[float, ...]] | None = None
    # Wire header this variation was last decoded from
    header: TupleVariationHeader | None = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        self.peak = tuple(self.peak)
        self.points = tuple(self.points)
        self.deltas = list(self.deltas)

    @property
    def applies_to_all_points(self) -> bool:
        return not self.points

    @property
    def dimensions(self) -> int | None:
        return deltas_dimensions(self.deltas)

    def axis_regions(self) -> list[tuple[float, float, float]]:
        """(start, peak, end) per axis, inferring start/end when not intermediate."""
        if self.intermediate is not None:
            start, end = self.intermediate
            return list(zip(start, self.peak, end))
        return [(min(peak, 0.0), peak, max(peak, 0.0)) for peak in self.peak]

    def _payload(self, dimensions: int, private_points: bool) -> bytes:
        if self.points and len(self.points) != len(self.deltas):
            raise SizeMismatchError(
                f"{len(self.deltas)} deltas for {len(self.points)} points"
            )
        data = packed_points.encode(self.points) if private_points else b""
        values = split_components(self.deltas, dimensions)
        if dimensions == 1:
            return data + packed_deltas.encode(values)
        half = len(self.deltas)
        return data + packed_deltas.encode(values[:half]) + packed_deltas.encode(values[half:])

    def _header(
        self, size: int, private_points: bool, shared_index: int | None
    ) -> TupleVariationHeader:
        flags = TupleIndexFlags(0)
        if private_points:
            flags |= TupleIndexFlags.PRIVATE_POINT_NUMBERS
        peak = None
        if shared_index is None:
            flags |= TupleIndexFlags.EMBEDDED_PEAK_TUPLE
            peak = tuple(self.peak)
        start = end = None
        if self.intermediate is not None:
            flags |= TupleIndexFlags.INTERMEDIATE_REGION
            start, end = (tuple(t) for t in self.intermediate)
        return TupleVariationHeader(
            variation_data_size=size,
            flags=flags,
            shared_tuple_index=shared_index or 0,
            peak_tuple=peak,
            intermediate_start=start,
            intermediate_end=end,
        )


@dataclass
class TupleVariationStore:
    """
    Ordered tuple variations of one glyph or one CVT.

    shared_points records the shared point set found when decoding; the
    encoder chooses its own.
    """

    variations: list[TupleVariation] = field(default_factory=list)
    shared_points: tuple[int, ...] | None = field(default=None, compare=False)

    def dimensions(self) -> int | None:
        """Dimensionality shared by every variation in the store."""
        return deltas_dimensions(
            [delta for variation in self.variations for delta in variation.deltas]
        )

    def choose_shared_points(self) -> tuple[int, ...] | None:
        """
        Pick the point set worth sharing.

        Returns:
            The most common point set when more than one variation uses it,
            else None
        """
        if not self.variations:
            return None
        points, uses = Counter(v.points for v in self.variations).most_common(1)[0]
        return points if uses > 1 else None

    def encode(self, shared_tuples=(), offset: int = 0) -> bytes:
        """
        Serialize the store.

        Args:
            shared_tuples: Peak tuples of the enclosing table that may be
                referenced by index instead of embedded
            offset: Bytes preceding the store in the buffer dataOffset is
                measured from

        Returns:
            Store bytes; empty when there are no variations
        """
        if not self.variations:
            return b""
        if len(self.variations) > MAX_TUPLE_COUNT:
            raise EncoderPreconditionError(
                f"{len(self.variations)} tuple variations exceed {MAX_TUPLE_COUNT}"
            )
        dimensions = self.dimensions() or 1

        shared_index: dict[tuple[int, ...], int] = {}
        for i, coords in enumerate(shared_tuples):
            shared_index.setdefault(f2dot14_key(coords), i)

        shared_points = self.choose_shared_points()
        if shared_points is not None:
            logger.debug(f"Sharing point set of {len(shared_points)} points")

        headers = bytearray()
        payloads = bytearray()
        axis_count = None
        for variation in self.variations:
            if axis_count is None:
                axis_count = len(variation.peak)
            elif len(variation.peak) != axis_count:
                raise EncoderPreconditionError(
                    "All tuple variations must have the same number of axes"
                )
            private_points = shared_points is None or variation.points != shared_points
            payload = variation._payload(dimensions, private_points)
            header = variation._header(
                len(payload), private_points, shared_index.get(f2dot14_key(variation.peak))
            )
            headers += header.encode(axis_count)
            payloads += payload

        count = len(self.variations)
        if shared_points is not None:
            count |= TUPLES_SHARE_POINT_NUMBERS
            payloads[0:0] = packed_points.encode(shared_points)

        data_offset = offset + 4 + len(headers)
        if data_offset > 0xFFFF:
            raise EncoderPreconditionError(f"Data offset {data_offset} does not fit 16 bits")
        return struct.pack(">HH", count, data_offset) + bytes(headers) + bytes(payloads)

    @classmethod
    def decode(
        cls,
        data: bytes,
        axis_count: int,
        point_count: int,
        dimensions: int = 2,
        shared_tuples=(),
        offset: int = 0,
    ) -> "TupleVariationStore":
        """
        Read a store.

        Args:
            data: Buffer holding the store; dataOffset is relative to its start
            axis_count: Number of axes in the font
            point_count: Points the "all points" set stands for
            dimensions: 2 for glyph outlines, 1 for CVT values
            shared_tuples: Peak tuples referenced by shared tuple index
            offset: Position of the tupleVariationCount field

        Returns:
            The decoded store

        Raises:
            TruncatedInputError: If the buffer ends early
            SizeMismatchError: If a tuple's data does not match its declared size
            VariationDataError: If a shared tuple index is out of range
        """
        if offset >= len(data):
            return cls()

        count_field, pos = read_u16(data, offset)
        data_pos, pos = read_u16(data, pos)

        headers = []
        for _ in range(count_field & TUPLE_COUNT_MASK):
            header = TupleVariationHeader.decode(data, axis_count, pos)
            pos += header.size(axis_count)
            headers.append(header)

        shared_points = None
        if count_field & TUPLES_SHARE_POINT_NUMBERS:
            shared_points, consumed = packed_points.decode(data, data_pos)
            data_pos += consumed

        variations = []
        for i, header in enumerate(headers):
            start = data_pos
            if header.has_private_points:
                points, consumed = packed_points.decode(data, data_pos)
                data_pos += consumed
            else:
                points = shared_points or ()

            if points and points[-1] >= point_count:
                logger.warning(
                    f"Tuple {i} references point {points[-1]} of {point_count}"
                )

            value_count = (len(points) if points else point_count) * dimensions
            values, consumed = packed_deltas.decode(data, value_count, data_pos)
            data_pos += consumed

            if data_pos - start != header.variation_data_size:
                raise SizeMismatchError(
                    f"Tuple {i} declares {header.variation_data_size} bytes "
                    f"but its points and deltas use {data_pos - start}"
                )

            if header.peak_tuple is not None:
                peak = header.peak_tuple
            elif header.shared_tuple_index < len(shared_tuples):
                peak = tuple(shared_tuples[header.shared_tuple_index])
            else:
                raise VariationDataError(
                    f"Tuple {i} references shared tuple {header.shared_tuple_index} "
                    f"of {len(shared_tuples)}"
                )

            intermediate = None
            if header.intermediate_start is not None:
                intermediate = (header.intermediate_start, header.intermediate_end)

            variations.append(
                TupleVariation(
                    peak=peak,
                    deltas=join_components(values, dimensions),
                    points=points,
                    intermediate=intermediate,
                    header=header,
                )
            )

        return cls(variations=variations, shared_points=shared_points)
