"""
Font I/O utilities for loading fonts and reaching their raw tables.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fontTools.ttLib import TTFont

from fonticulous.config.tables import PHANTOM_POINT_COUNT


def iter_fonts(directory: Path, pattern: str = "*.ttf") -> Iterator[Path]:
    """
    Iterate over font files matching pattern, sorted by name.

    Args:
        directory: Directory to search
        pattern: Glob pattern to match

    Yields:
        Paths to matching font files
    """
    return iter(sorted(directory.glob(pattern)))


@contextmanager
def open_font(path: Path) -> Iterator[TTFont]:
    """
    Context manager for read-only font access.

    Args:
        path: Path to font file

    Yields:
        TTFont instance
    """
    font = TTFont(path)
    try:
        yield font
    finally:
        font.close()


def read_table_data(font: TTFont, tag: str) -> bytes | None:
    """Raw bytes of a table, or None if the font has no such table."""
    if tag not in font:
        return None
    return font.getTableData(tag)


def axis_count(font: TTFont) -> int:
    """Number of variation axes, 0 for static fonts."""
    if "fvar" not in font:
        return 0
    return len(font["fvar"].axes)


def glyph_point_counts(font: TTFont) -> list[int]:
    """
    Points per glyph id as gvar counts them.

    Simple glyphs count their outline points, composites one point per
    component; every glyph gets the four phantom points.

    Args:
        font: TrueType-flavoured TTFont

    Returns:
        Point counts indexed by glyph id
    """
    glyf = font["glyf"]
    counts = []
    for glyph_name in font.getGlyphOrder():
        glyph = glyf[glyph_name]
        if glyph.isComposite():
            points = len(glyph.components)
        elif glyph.numberOfContours > 0:
            points = len(glyph.coordinates)
        else:
            points = 0
        counts.append(points + PHANTOM_POINT_COUNT)
    return counts


def cvt_count(font: TTFont) -> int:
    """Number of CVT values, 0 without a cvt table."""
    if "cvt " not in font:
        return 0
    return len(font["cvt "].values)
