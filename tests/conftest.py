"""Shared pytest fixtures."""

import array

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import newTable
from fontTools.ttLib.tables.TupleVariation import TupleVariation

# Triangle outline plus the four phantom points
A_DELTAS = [(10, 0), (20, 0), (15, 5), (0, 0), (30, 0), (0, 0), (0, 0)]
CVT_VALUES = [10, 20, 30]
CVT_DELTAS = [4, None, -2]


def _triangle():
    pen = TTGlyphPen(None)
    pen.moveTo((100, 0))
    pen.lineTo((500, 0))
    pen.lineTo((300, 700))
    pen.closePath()
    return pen.glyph()


@pytest.fixture
def variable_font(tmp_path):
    """Build a one-axis variable TrueType font with gvar and cvar tables."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "A"])
    fb.setupCharacterMap({ord("A"): "A"})
    fb.setupGlyf({".notdef": TTGlyphPen(None).glyph(), "A": _triangle()})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "A": (600, 100)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Fonticulous Test", "styleName": "Regular"})
    fb.setupOS2()
    fb.setupPost()
    fb.setupFvar([("wght", 100, 400, 900, "Weight")], [])
    fb.setupGvar(
        {
            ".notdef": [],
            "A": [TupleVariation({"wght": (0.0, 1.0, 1.0)}, list(A_DELTAS))],
        }
    )

    cvt = newTable("cvt ")
    cvt.values = array.array("h", CVT_VALUES)
    fb.font["cvt "] = cvt
    cvar = newTable("cvar")
    cvar.variations = [TupleVariation({"wght": (-1.0, -1.0, 0.0)}, list(CVT_DELTAS))]
    fb.font["cvar"] = cvar

    path = tmp_path / "FonticulousTest-VF.ttf"
    fb.save(path)
    return path
