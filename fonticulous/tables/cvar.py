"""
CVT variations (cvar) table.

A version header followed by one tuple variation store of scalar deltas,
one per CVT entry. The store's dataOffset counts from the table start.
"""

import struct
from dataclasses import dataclass, field

from fonticulous.config.tables import CVAR_VERSION
from fonticulous.otvar.binary import read
from fonticulous.otvar.errors import InvalidDimensionalityError, VariationDataError
from fonticulous.otvar.tuple_variation_store import TupleVariationStore

CVAR_HEADER_SIZE = 4


@dataclass
class CvtVariationsTable:
    axis_count: int
    store: TupleVariationStore = field(default_factory=TupleVariationStore)

    def encode(self) -> bytes:
        if self.store.dimensions() == 2:
            raise InvalidDimensionalityError("cvar holds scalar deltas only")
        header = struct.pack(">HH", *CVAR_VERSION)
        if not self.store.variations:
            return header + struct.pack(">HH", 0, CVAR_HEADER_SIZE + 4)
        return header + self.store.encode(offset=CVAR_HEADER_SIZE)

    @classmethod
    def decode(cls, data: bytes, axis_count: int, cvt_count: int) -> "CvtVariationsTable":
        """
        Read the table.

        Args:
            data: Raw cvar table
            axis_count: Number of axes in the font (from fvar)
            cvt_count: Number of CVT values
        """
        (major, _minor), _ = read("HH", data, 0)
        if major != CVAR_VERSION[0]:
            raise VariationDataError(f"Unsupported cvar version {major}")
        store = TupleVariationStore.decode(
            data, axis_count, cvt_count, dimensions=1, offset=CVAR_HEADER_SIZE
        )
        return cls(axis_count=axis_count, store=store)
