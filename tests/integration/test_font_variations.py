"""
End-to-end tests on a compiled variable font.

The font is built with fontTools' FontBuilder, so its gvar and cvar
tables are fontTools' output.
"""

import pytest
from click.testing import CliRunner
from fontTools.ttLib import TTFont, newTable
from fontTools.ttLib.tables.DefaultTable import DefaultTable

from fonticulous.cli.main import cli
from fonticulous.core.font_io import glyph_point_counts, open_font, read_table_data
from fonticulous.operations.inspect import describe_font
from fonticulous.operations.verify import verify_font
from fonticulous.otvar.delta import ScalarDelta, VectorDelta
from fonticulous.tables.cvar import CvtVariationsTable
from fonticulous.tables.gvar import GlyphVariationsTable

A_DELTAS = [(10, 0), (20, 0), (15, 5), (0, 0), (30, 0), (0, 0), (0, 0)]
CVT_DELTAS = [4, None, -2]


class TestDecodeCompiledFont:
    """Decode tables written by fontTools."""

    def test_point_counts_include_phantoms(self, variable_font):
        with open_font(variable_font) as font:
            assert glyph_point_counts(font) == [4, 7]

    def test_gvar(self, variable_font):
        with open_font(variable_font) as font:
            table = GlyphVariationsTable.decode(
                read_table_data(font, "gvar"), glyph_point_counts(font)
            )

        assert table.axis_count == 1
        notdef, glyph_a = table.glyph_variations
        assert notdef.variations == []
        assert len(glyph_a.variations) == 1
        variation = glyph_a.variations[0]
        assert variation.axis_regions() == [(0.0, 1.0, 1.0)]

        deltas = dict.fromkeys(range(7), VectorDelta(0, 0))
        if variation.applies_to_all_points:
            deltas.update(enumerate(variation.deltas))
        else:
            deltas.update(zip(variation.points, variation.deltas))
        assert [deltas[i] for i in range(7)] == [VectorDelta(x, y) for x, y in A_DELTAS]

    def test_cvar(self, variable_font):
        with open_font(variable_font) as font:
            table = CvtVariationsTable.decode(read_table_data(font, "cvar"), 1, 3)

        variation = table.store.variations[0]
        assert variation.axis_regions() == [(-1.0, -1.0, 0.0)]
        assert variation.points == (0, 2)
        assert variation.deltas == [ScalarDelta(d) for d in CVT_DELTAS if d is not None]

    def test_fonttools_reads_reencoded_gvar(self, variable_font):
        with open_font(variable_font) as font:
            table = GlyphVariationsTable.decode(
                read_table_data(font, "gvar"), glyph_point_counts(font)
            )
            gvar = newTable("gvar")
            gvar.decompile(table.encode(), font)
            variations = gvar.variations["A"]

        assert len(variations) == 1
        assert variations[0].axes == {"wght": (0.0, 1.0, 1.0)}
        coordinates = [c if c is not None else (0, 0) for c in variations[0].coordinates]
        assert coordinates == A_DELTAS


class TestOperations:
    """inspect and verify on a compiled font."""

    def test_verify_font(self, variable_font):
        assert verify_font(variable_font)

    def test_verify_subset(self, variable_font):
        assert verify_font(variable_font, {"A"})

    def test_describe_font(self, variable_font):
        lines = describe_font(variable_font)
        assert lines[0] == f"{variable_font.name}:"
        assert any(line.startswith("gvar: 2 glyphs") for line in lines)
        assert any("A: 1 tuples" in line for line in lines)
        assert any("wght=0:1:1" in line for line in lines)
        assert "cvar: 1 tuples" in " ".join(lines)

    def test_describe_font_single_table(self, variable_font):
        lines = describe_font(variable_font, tables=["cvar"])
        assert not any(line.startswith("gvar") for line in lines)
        assert any("2 CVT values vary" in line for line in lines)

    def test_verify_static_font(self, variable_font, tmp_path):
        font = TTFont(variable_font)
        for tag in ("gvar", "cvar", "fvar"):
            del font[tag]
        path = tmp_path / "static.ttf"
        font.save(path)
        assert verify_font(path)


class TestCli:
    """Command line interface."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    def test_verify(self, runner, variable_font):
        result = runner.invoke(cli, ["-v", "verify", str(variable_font)])
        assert result.exit_code == 0

    def test_verify_directory(self, runner, variable_font):
        result = runner.invoke(cli, ["verify", str(variable_font.parent)])
        assert result.exit_code == 0

    def test_inspect(self, runner, variable_font):
        result = runner.invoke(cli, ["inspect", str(variable_font), "--subset", "A"])
        assert result.exit_code == 0
        assert "A: 1 tuples" in result.output

    def test_inspect_table_filter(self, runner, variable_font):
        result = runner.invoke(cli, ["inspect", str(variable_font), "--table", "gvar"])
        assert result.exit_code == 0
        assert "cvar" not in result.output

    def test_inspect_corrupt_font(self, runner, variable_font, tmp_path):
        font = TTFont(variable_font)
        data = bytearray(font.getTableData("gvar"))
        data[0:2] = b"\x00\x07"
        raw_gvar = DefaultTable("gvar")
        raw_gvar.data = bytes(data)
        font["gvar"] = raw_gvar
        font.save(tmp_path / "corrupt.ttf")

        result = runner.invoke(cli, ["inspect", str(tmp_path / "corrupt.ttf")])
        assert result.exit_code == 1

    def test_verify_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["verify", str(tmp_path / "missing.ttf")])
        assert result.exit_code == 2

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
