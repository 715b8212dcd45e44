"""
Builders that turn per-master deltas into variation stores.

The glyph-conversion and layout stages hand over deltas per region; these
helpers wrap them in Delta values, drop what carries no variation and
assemble the stores the table codecs serialize.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

from fonticulous.config.limits import MAX_ITEMS_PER_DATA, MAX_REGIONS
from fonticulous.otvar import packed_deltas, packed_points
from fonticulous.otvar.binary import to_f2dot14
from fonticulous.otvar.delta import Delta, ScalarDelta, VectorDelta
from fonticulous.otvar.errors import (
    EncoderPreconditionError,
    InvalidDimensionalityError,
    SizeMismatchError,
)
from fonticulous.otvar.item_variation_store import (
    ItemVariationData,
    ItemVariationStore,
    RegionAxisCoordinates,
)
from fonticulous.otvar.tuple_variation_store import TupleVariation, TupleVariationStore
from fonticulous.utils.logging import logger


@dataclass
class RegionDeltas:
    """Deltas of one master region, as produced by the glyph-conversion stage."""

    peak: tuple[float, ...]
    deltas: list
    intermediate: tuple[tuple[float, ...], tuple[float, ...]] | None = None


def _as_vector(value) -> Delta:
    if isinstance(value, Delta):
        if not isinstance(value, VectorDelta):
            raise InvalidDimensionalityError("Glyph variations need coordinate deltas")
        return value
    x, y = value
    return VectorDelta(int(x), int(y))


def _as_scalar(value) -> Delta:
    if isinstance(value, Delta):
        if not isinstance(value, ScalarDelta):
            raise InvalidDimensionalityError("CVT variations need scalar deltas")
        return value
    return ScalarDelta(int(value))


def build_glyph_variations(
    point_count: int, masters: Iterable[RegionDeltas]
) -> TupleVariationStore:
    """
    Build a glyph's tuple variation store.

    Every variation covers all points: points missing from a glyph
    variation are inferred by the rasterizer, not treated as zero.

    Args:
        point_count: Points of the glyph, phantom points included
        masters: One RegionDeltas per non-default master region

    Returns:
        Store with all-zero variations dropped
    """
    variations = []
    for master in masters:
        deltas = [_as_vector(d) for d in master.deltas]
        if len(deltas) != point_count:
            raise SizeMismatchError(
                f"{len(deltas)} deltas for a glyph of {point_count} points"
            )
        if all(d.is_zero for d in deltas):
            continue
        variations.append(
            TupleVariation(
                peak=tuple(master.peak),
                deltas=deltas,
                intermediate=master.intermediate,
            )
        )
    return TupleVariationStore(variations=variations)


def build_cvt_variations(
    cvt_count: int, masters: Iterable[RegionDeltas]
) -> TupleVariationStore:
    """
    Build the tuple variation store of a cvar table.

    Omitted CVT entries do not vary, so each variation keeps only its
    non-zero entries when that packs smaller.

    Args:
        cvt_count: Number of CVT values
        masters: One RegionDeltas per non-default master region

    Returns:
        Store with all-zero variations dropped
    """
    variations = []
    for master in masters:
        deltas = [_as_scalar(d) for d in master.deltas]
        if len(deltas) != cvt_count:
            raise SizeMismatchError(f"{len(deltas)} deltas for {cvt_count} CVT values")
        points = tuple(i for i, d in enumerate(deltas) if not d.is_zero)
        if not points:
            continue

        dense_size = 1 + len(packed_deltas.encode(d.get_scalar() for d in deltas))
        sparse_size = len(packed_points.encode(points)) + len(
            packed_deltas.encode(deltas[i].get_scalar() for i in points)
        )
        if sparse_size < dense_size:
            deltas = [deltas[i] for i in points]
        else:
            points = ()
        variations.append(
            TupleVariation(
                peak=tuple(master.peak),
                deltas=deltas,
                points=points,
                intermediate=master.intermediate,
            )
        )
    return TupleVariationStore(variations=variations)


def _region_key(region) -> tuple[int, ...]:
    return tuple(
        to_f2dot14(value)
        for axis in region
        for value in (axis.start, axis.peak, axis.end)
    )


class ItemVariationStoreBuilder:
    """
    Incrementally collects regions and delta rows into an item variation store.

    Rows that vary over the same set of regions share one data block.
    """

    def __init__(self, axis_count: int):
        self.axis_count = axis_count
        self._regions: list[tuple[RegionAxisCoordinates, ...]] = []
        self._region_indexes: dict[tuple[int, ...], int] = {}
        self._blocks: list[ItemVariationData] = []
        self._open_blocks: dict[tuple[int, ...], int] = {}

    @property
    def region_count(self) -> int:
        return len(self._regions)

    def add_region(self, region) -> int:
        """
        Add a region, reusing an equal one already present.

        Args:
            region: One RegionAxisCoordinates or (start, peak, end) per axis

        Returns:
            Index of the region in the store's region list
        """
        region = tuple(
            axis if isinstance(axis, RegionAxisCoordinates) else RegionAxisCoordinates(*axis)
            for axis in region
        )
        if len(region) != self.axis_count:
            raise SizeMismatchError(
                f"Region has {len(region)} axes, store has {self.axis_count}"
            )
        key = _region_key(region)
        if key not in self._region_indexes:
            if len(self._regions) >= MAX_REGIONS:
                raise EncoderPreconditionError("Too many variation regions")
            self._region_indexes[key] = len(self._regions)
            self._regions.append(region)
        return self._region_indexes[key]

    def add_deltas(self, deltas: Mapping | Iterable) -> int:
        """
        Add one varying value.

        Args:
            deltas: Mapping or pairs of region -> delta

        Returns:
            Variation index (outer << 16 | inner)
        """
        items = deltas.items() if isinstance(deltas, Mapping) else deltas
        row: dict[int, int] = {}
        for region, delta in items:
            index = self.add_region(region)
            row[index] = row.get(index, 0) + int(delta)
        row = {index: delta for index, delta in row.items() if delta}
        key = tuple(sorted(row))

        outer = self._open_blocks.get(key)
        if outer is None or len(self._blocks[outer].delta_values) >= MAX_ITEMS_PER_DATA:
            outer = len(self._blocks)
            self._blocks.append(ItemVariationData(region_indexes=list(key)))
            self._open_blocks[key] = outer
            logger.debug(f"New variation data block {outer} for regions {list(key)}")

        block = self._blocks[outer]
        inner = len(block.delta_values)
        block.delta_values.append([row[index] for index in key])
        return (outer << 16) | inner

    def build(self) -> ItemVariationStore:
        return ItemVariationStore(
            axis_count=self.axis_count,
            variation_regions=list(self._regions),
            variation_data=[
                ItemVariationData(list(b.region_indexes), [list(r) for r in b.delta_values])
                for b in self._blocks
            ],
        )
