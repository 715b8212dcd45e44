"""
Interoperability tests against fontTools' variation codecs.

Bytes written by either side must decode to the same data on the other.
"""

import pytest
from fontTools.ttLib import TTFont
from fontTools.ttLib.tables import otTables
from fontTools.ttLib.tables.otBase import OTTableReader, OTTableWriter
from fontTools.ttLib.tables.TupleVariation import (
    TupleVariation as FontToolsVariation,
)
from fontTools.ttLib.tables.TupleVariation import decompileTupleVariationStore
from fontTools.varLib import builder as varlib_builder

from fonticulous.otvar import packed_deltas, packed_points
from fonticulous.otvar.builder import ItemVariationStoreBuilder
from fonticulous.otvar.delta import VectorDelta
from fonticulous.otvar.item_variation_store import ItemVariationStore
from fonticulous.otvar.tuple_variation_store import TupleVariation, TupleVariationStore


class TestPackedPoints:
    """Packed point numbers against fontTools."""

    @pytest.mark.parametrize(
        "points",
        [
            [0, 1, 2],
            [3, 300, 301, 1000],
            list(range(0, 600, 2)),
            list(range(200)),
        ],
    )
    def test_fonttools_reads_ours(self, points):
        data = packed_points.encode(points)
        decoded, pos = FontToolsVariation.decompilePoints_(max(points) + 1, data, 0, "gvar")
        assert list(decoded) == points
        assert pos == len(data)

    @pytest.mark.parametrize("points", [[0, 5, 9], list(range(0, 1200, 3))])
    def test_we_read_fonttools(self, points):
        data = bytes(FontToolsVariation.compilePoints(points))
        decoded, consumed = packed_points.decode(data)
        assert list(decoded) == points
        assert consumed == len(data)


class TestPackedDeltas:
    """Packed deltas against fontTools."""

    @pytest.mark.parametrize(
        "values",
        [
            [0, 0, 0, 5, -5, 127, -128],
            [1000, -1000, 0, 1, 0, 0, 0, 200],
            [0] * 100 + [1] * 70 + [300] * 65,
        ],
    )
    def test_fonttools_reads_ours(self, values):
        data = packed_deltas.encode(values)
        decoded, pos = FontToolsVariation.decompileDeltas_(len(values), data, 0)
        assert list(decoded) == values
        assert pos == len(data)

    @pytest.mark.parametrize(
        "values",
        [[0, 1, 0, 2, 0, 0, 3], [-300, 5, 5, 0, 0, 0, 0, 0, 7] * 20],
    )
    def test_we_read_fonttools(self, values):
        data = bytes(FontToolsVariation.compileDeltaValues_(values))
        decoded, consumed = packed_deltas.decode(data, len(values))
        assert decoded == values
        assert consumed == len(data)


class TestTupleVariationStore:
    """Glyph tuple variation stores against fontTools."""

    def test_fonttools_reads_ours(self):
        store = TupleVariationStore(
            [
                TupleVariation((1.0,), [VectorDelta(10, 0), VectorDelta(0, -3)]),
                TupleVariation(
                    (0.5,),
                    [VectorDelta(4, 4)],
                    points=(1,),
                    intermediate=((0.0,), (1.0,)),
                ),
            ]
        )
        data = store.encode()
        count = int.from_bytes(data[0:2], "big")
        data_offset = int.from_bytes(data[2:4], "big")

        variations = decompileTupleVariationStore(
            "gvar", ["wght"], count, 2, [], data, 4, data_offset
        )
        assert len(variations) == 2
        assert variations[0].axes == {"wght": (0.0, 1.0, 1.0)}
        assert variations[0].coordinates == [(10, 0), (0, -3)]
        assert variations[1].axes == {"wght": (0.0, 0.5, 1.0)}
        assert variations[1].coordinates == [None, (4, 4)]


class TestItemVariationStore:
    """Item variation stores against fontTools' varLib builder."""

    REGIONS = [{"wght": (0.0, 1.0, 1.0)}, {"wght": (-1.0, -1.0, 0.0)}]

    def test_we_read_fonttools(self):
        regions = varlib_builder.buildVarRegionList(self.REGIONS, ["wght"])
        var_data = varlib_builder.buildVarData([0, 1], [[10, -300], [5, 7]], optimize=False)
        var_store = varlib_builder.buildVarStore(regions, [var_data])

        writer = OTTableWriter()
        var_store.compile(writer, TTFont())
        store = ItemVariationStore.decode(writer.getAllData())

        assert store.axis_count == 1
        assert len(store.variation_regions) == 2
        first = {region[0].peak: delta for region, delta in store.resolve(0, 0)}
        second = {region[0].peak: delta for region, delta in store.resolve(0, 1)}
        assert first == {1.0: 10, -1.0: -300}
        assert second == {1.0: 5, -1.0: 7}
        assert ItemVariationStore.decode(store.encode()) == store

    def test_fonttools_reads_ours(self):
        builder = ItemVariationStoreBuilder(axis_count=1)
        for region in self.REGIONS:
            builder.add_region([region["wght"]])
        builder.add_deltas({(self.REGIONS[0]["wght"],): 70000, (self.REGIONS[1]["wght"],): 2})
        data = builder.build().encode()

        var_store = otTables.VarStore()
        var_store.decompile(OTTableReader(data), TTFont())
        assert var_store.Format == 1
        assert var_store.VarRegionList.RegionAxisCount == 1
        assert var_store.VarData[0].VarRegionIndex == [0, 1]
        assert [list(item) for item in var_store.VarData[0].Item] == [[70000, 2]]
