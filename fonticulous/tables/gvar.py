"""
Glyph variations (gvar) table.

Header, per-glyph data offsets, the shared peak tuples and one tuple
variation store per glyph.
"""

import struct
from collections import Counter
from dataclasses import dataclass, field

from fonticulous.config.limits import MAX_SHARED_TUPLES
from fonticulous.config.tables import GVAR_VERSION
from fonticulous.otvar.binary import (
    f2dot14_key,
    from_f2dot14,
    pack_f2dot14_tuple,
    read,
    read_f2dot14_tuple,
)
from fonticulous.otvar.errors import (
    EncoderPreconditionError,
    SizeMismatchError,
    TruncatedInputError,
    VariationDataError,
)
from fonticulous.otvar.tuple_variation_store import TupleVariationStore
from fonticulous.utils.logging import logger

GVAR_HEADER_FORMAT = "HHHHLHHL"
GVAR_HEADER_SIZE = 20
LONG_OFFSETS = 0x0001


@dataclass
class GlyphVariationsTable:
    """
    Variation data of every glyph, indexed by glyph id.

    shared_tuples is None until decided: encode() then picks the peaks
    used more than once.
    """

    axis_count: int
    glyph_variations: list[TupleVariationStore] = field(default_factory=list)
    shared_tuples: list[tuple[float, ...]] | None = None

    def choose_shared_tuples(self) -> list[tuple[float, ...]]:
        """Peaks used by more than one variation, most used first."""
        counts: Counter = Counter()
        for store in self.glyph_variations:
            for variation in store.variations:
                counts[f2dot14_key(variation.peak)] += 1
        shared = sorted(
            (key for key, uses in counts.items() if uses > 1),
            key=lambda key: (-counts[key], key),
        )
        return [tuple(from_f2dot14(v) for v in key) for key in shared[:MAX_SHARED_TUPLES]]

    def encode(self) -> bytes:
        """Serialize the table."""
        glyph_count = len(self.glyph_variations)
        if glyph_count > 0xFFFF:
            raise EncoderPreconditionError(f"{glyph_count} glyphs exceed 65535")

        shared_tuples = self.shared_tuples
        if shared_tuples is None:
            shared_tuples = self.choose_shared_tuples()
        if len(shared_tuples) > MAX_SHARED_TUPLES:
            raise EncoderPreconditionError(f"{len(shared_tuples)} shared tuples exceed 4096")
        for coords in shared_tuples:
            if len(coords) != self.axis_count:
                raise SizeMismatchError(
                    f"Shared tuple has {len(coords)} coordinates, font has {self.axis_count} axes"
                )

        glyph_data = []
        for glyph_id, store in enumerate(self.glyph_variations):
            if store.dimensions() == 1:
                logger.warning(f"Glyph {glyph_id} carries scalar deltas")
            glyph_data.append(store.encode(shared_tuples))

        padded_size = sum(len(d) + len(d) % 2 for d in glyph_data)
        long_offsets = padded_size // 2 > 0xFFFF
        if not long_offsets:
            glyph_data = [d + b"\0" * (len(d) % 2) for d in glyph_data]

        offsets = [0]
        for data in glyph_data:
            offsets.append(offsets[-1] + len(data))
        if long_offsets:
            offset_array = struct.pack(f">{len(offsets)}L", *offsets)
        else:
            offset_array = struct.pack(f">{len(offsets)}H", *(o // 2 for o in offsets))

        shared_tuples_offset = GVAR_HEADER_SIZE + len(offset_array)
        shared_data = b"".join(pack_f2dot14_tuple(coords) for coords in shared_tuples)
        data_array_offset = shared_tuples_offset + len(shared_data)

        header = struct.pack(
            ">" + GVAR_HEADER_FORMAT,
            *GVAR_VERSION,
            self.axis_count,
            len(shared_tuples),
            shared_tuples_offset,
            glyph_count,
            LONG_OFFSETS if long_offsets else 0,
            data_array_offset,
        )
        return header + offset_array + shared_data + b"".join(glyph_data)

    @classmethod
    def decode(cls, data: bytes, point_counts) -> "GlyphVariationsTable":
        """
        Read the table.

        Args:
            data: Raw gvar table
            point_counts: Points per glyph id, phantom points included

        Returns:
            The decoded table
        """
        (
            major,
            _minor,
            axis_count,
            shared_count,
            shared_offset,
            glyph_count,
            flags,
            data_array_offset,
        ), pos = read(GVAR_HEADER_FORMAT, data, 0)
        if major != GVAR_VERSION[0]:
            raise VariationDataError(f"Unsupported gvar version {major}")
        if len(point_counts) != glyph_count:
            raise SizeMismatchError(
                f"gvar has {glyph_count} glyphs, {len(point_counts)} point counts given"
            )

        if flags & LONG_OFFSETS:
            offsets, _ = read(f"{glyph_count + 1}L", data, pos)
        else:
            offsets, _ = read(f"{glyph_count + 1}H", data, pos)
            offsets = [o * 2 for o in offsets]

        shared_tuples = []
        pos = shared_offset
        for _ in range(shared_count):
            coords, pos = read_f2dot14_tuple(data, pos, axis_count)
            shared_tuples.append(coords)

        glyph_variations = []
        for glyph_id in range(glyph_count):
            start = data_array_offset + offsets[glyph_id]
            end = data_array_offset + offsets[glyph_id + 1]
            if end < start:
                raise VariationDataError(f"Glyph {glyph_id} has a negative data length")
            if end > len(data):
                raise TruncatedInputError(f"Glyph {glyph_id} data runs past the table end")
            try:
                store = TupleVariationStore.decode(
                    data[start:end],
                    axis_count,
                    point_counts[glyph_id],
                    dimensions=2,
                    shared_tuples=shared_tuples,
                )
            except VariationDataError as e:
                raise type(e)(f"glyph {glyph_id}: {e}") from e
            glyph_variations.append(store)

        return cls(
            axis_count=axis_count,
            glyph_variations=glyph_variations,
            shared_tuples=shared_tuples,
        )
