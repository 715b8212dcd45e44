"""
Item variation stores.

The shared-region store used by variable GDEF/GPOS values: one list of
variation regions, and data blocks whose rows hold one delta per region
the block references by index.
"""

import struct
from dataclasses import dataclass, field
from typing import NamedTuple

from fonticulous.config.limits import MAX_ITEMS_PER_DATA
from fonticulous.config.tables import ITEM_VARIATION_STORE_FORMAT
from fonticulous.otvar.binary import from_f2dot14, read, read_u16, to_f2dot14
from fonticulous.otvar.errors import (
    EncoderPreconditionError,
    SizeMismatchError,
    VariationDataError,
)
from fonticulous.utils.logging import logger

LONG_WORDS = 0x8000
WORD_DELTA_COUNT_MASK = 0x7FFF


@dataclass(frozen=True)
class RegionAxisCoordinates:
    """Start, peak and end of a region along one axis."""

    start: float
    peak: float
    end: float

    @property
    def is_well_formed(self) -> bool:
        """Whether start <= peak <= end."""
        return self.start <= self.peak <= self.end

    def encode(self) -> bytes:
        return struct.pack(
            ">3h", to_f2dot14(self.start), to_f2dot14(self.peak), to_f2dot14(self.end)
        )

    @classmethod
    def decode(cls, data: bytes, offset: int) -> tuple["RegionAxisCoordinates", int]:
        values, offset = read("3h", data, offset)
        return cls(*(from_f2dot14(v) for v in values)), offset


class RowPacking(NamedTuple):
    """Struct codes used for the wide and narrow columns of a data block."""

    word: str
    byte: str
    word_range: tuple[int, int]
    byte_range: tuple[int, int]
    long_words: bool


SHORT_PACKING = RowPacking("h", "b", (-0x8000, 0x7FFF), (-0x80, 0x7F), False)
LONG_PACKING = RowPacking(
    "l", "h", (-0x80000000, 0x7FFFFFFF), (-0x8000, 0x7FFF), True
)


def _fits(value: int, value_range: tuple[int, int]) -> bool:
    return value_range[0] <= value <= value_range[1]


def choose_packing(rows, column_count: int) -> tuple[RowPacking, int]:
    """
    Pick the packing of a data block.

    Args:
        rows: Delta rows of the block
        column_count: Number of deltas per row

    Returns:
        Tuple of (packing, number of leading wide columns)
    """
    packing = SHORT_PACKING
    if any(not _fits(v, SHORT_PACKING.word_range) for row in rows for v in row):
        packing = LONG_PACKING
    for row in rows:
        for value in row:
            if not _fits(value, packing.word_range):
                raise EncoderPreconditionError(f"Delta {value} does not fit 32 bits")

    word_count = 0
    for column in range(column_count):
        if any(not _fits(row[column], packing.byte_range) for row in rows):
            word_count = column + 1
    return packing, word_count


def _row_format(packing: RowPacking, word_count: int, column_count: int) -> str:
    return packing.word * word_count + packing.byte * (column_count - word_count)


@dataclass
class ItemVariationData:
    """Rows of deltas for the regions listed in region_indexes."""

    region_indexes: list[int] = field(default_factory=list)
    delta_values: list[list[int]] = field(default_factory=list)

    def encode(self) -> bytes:
        """
        Serialize the block with the narrowest packing that loses nothing.

        Raises:
            SizeMismatchError: If a row length differs from the region count
        """
        column_count = len(self.region_indexes)
        for i, row in enumerate(self.delta_values):
            if len(row) != column_count:
                raise SizeMismatchError(
                    f"Row {i} has {len(row)} deltas for {column_count} regions"
                )
        if len(self.delta_values) > MAX_ITEMS_PER_DATA:
            raise EncoderPreconditionError(
                f"{len(self.delta_values)} items exceed {MAX_ITEMS_PER_DATA}"
            )

        packing, word_count = choose_packing(self.delta_values, column_count)
        logger.debug(
            f"Packing {len(self.delta_values)} rows with {word_count}/{column_count} "
            f"wide columns{' (long words)' if packing.long_words else ''}"
        )
        word_delta_count = word_count | (LONG_WORDS if packing.long_words else 0)

        data = struct.pack(
            f">3H{column_count}H",
            len(self.delta_values),
            word_delta_count,
            column_count,
            *self.region_indexes,
        )
        row_format = ">" + _row_format(packing, word_count, column_count)
        for row in self.delta_values:
            data += struct.pack(row_format, *row)
        return data

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> "ItemVariationData":
        """
        Read a block.

        Raises:
            TruncatedInputError: If the buffer ends early
            SizeMismatchError: If wordDeltaCount exceeds the region count
        """
        (item_count, word_delta_count, column_count), offset = read("3H", data, offset)
        region_indexes, offset = read(f"{column_count}H", data, offset)

        packing = LONG_PACKING if word_delta_count & LONG_WORDS else SHORT_PACKING
        word_count = word_delta_count & WORD_DELTA_COUNT_MASK
        if word_count > column_count:
            raise SizeMismatchError(
                f"wordDeltaCount {word_count} exceeds regionIndexCount {column_count}"
            )

        row_format = _row_format(packing, word_count, column_count)
        rows = []
        for _ in range(item_count):
            row, offset = read(row_format, data, offset)
            rows.append(list(row))
        return cls(region_indexes=list(region_indexes), delta_values=rows)


@dataclass
class ItemVariationStore:
    """
    Shared variation regions and the data blocks that reference them.

    Each region is a tuple of RegionAxisCoordinates, one per axis. Data
    blocks refer to regions by position in variation_regions.
    """

    format: int = ITEM_VARIATION_STORE_FORMAT
    axis_count: int = 0
    variation_regions: list[tuple[RegionAxisCoordinates, ...]] = field(
        default_factory=list
    )
    variation_data: list[ItemVariationData] = field(default_factory=list)

    def resolve(self, outer: int, inner: int) -> list[tuple[tuple, int]]:
        """
        Look up one item's deltas.

        Args:
            outer: Index of the data block
            inner: Row within the block

        Returns:
            (region, delta) pairs for the row
        """
        block = self.variation_data[outer]
        row = block.delta_values[inner]
        return [
            (self.variation_regions[index], delta)
            for index, delta in zip(block.region_indexes, row)
        ]

    def _encode_region_list(self) -> bytes:
        data = struct.pack(">2H", self.axis_count, len(self.variation_regions))
        for i, region in enumerate(self.variation_regions):
            if len(region) != self.axis_count:
                raise SizeMismatchError(
                    f"Region {i} has {len(region)} axes, store has {self.axis_count}"
                )
            for axis in region:
                data += axis.encode()
        return data

    def encode(self) -> bytes:
        """Serialize the store, laying out children before fixing offsets."""
        region_count = len(self.variation_regions)
        for i, block in enumerate(self.variation_data):
            for index in block.region_indexes:
                if index >= region_count:
                    raise EncoderPreconditionError(
                        f"Data block {i} references region {index} of {region_count}"
                    )

        # Pass 1: serialize children
        children = [self._encode_region_list()]
        children += [block.encode() for block in self.variation_data]

        # Pass 2: offsets from lengths
        header_size = 2 + 4 + 2 + 4 * len(self.variation_data)
        offsets = []
        position = header_size
        for child in children:
            offsets.append(position)
            position += len(child)

        header = struct.pack(
            f">HLH{len(self.variation_data)}L",
            self.format,
            offsets[0],
            len(self.variation_data),
            *offsets[1:],
        )
        return header + b"".join(children)

    @classmethod
    def decode(cls, data: bytes, offset: int = 0) -> "ItemVariationStore":
        """
        Read a store; offsets are relative to its first byte.

        Raises:
            TruncatedInputError: If the buffer ends early
            VariationDataError: If a data block references a missing region
        """
        base = offset
        (store_format, region_list_offset, data_count), offset = read("HLH", data, offset)
        data_offsets, offset = read(f"{data_count}L", data, offset)

        pos = base + region_list_offset
        axis_count, pos = read_u16(data, pos)
        region_count, pos = read_u16(data, pos)
        regions = []
        for _ in range(region_count):
            region = []
            for _ in range(axis_count):
                axis, pos = RegionAxisCoordinates.decode(data, pos)
                region.append(axis)
            if not all(axis.is_well_formed for axis in region):
                logger.warning(f"Region {len(regions)} has start > peak or peak > end")
            regions.append(tuple(region))

        blocks = []
        for i, data_offset in enumerate(data_offsets):
            block = ItemVariationData.decode(data, base + data_offset)
            missing = [index for index in block.region_indexes if index >= region_count]
            if missing:
                raise VariationDataError(
                    f"Data block {i} references regions {missing} of {region_count}"
                )
            blocks.append(block)

        return cls(
            format=store_format,
            axis_count=axis_count,
            variation_regions=regions,
            variation_data=blocks,
        )
