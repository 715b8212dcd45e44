"""
Variation table inspection.

Decodes gvar, cvar and the GDEF item variation store of a compiled font
and summarizes what they contain.
"""

from collections.abc import Iterator
from pathlib import Path

from fontTools.ttLib import TTFont

from fonticulous.config.tables import VARIATION_TABLES
from fonticulous.core.font_io import (
    axis_count,
    cvt_count,
    glyph_point_counts,
    open_font,
    read_table_data,
)
from fonticulous.otvar.tuple_variation_store import TupleVariation
from fonticulous.tables.cvar import CvtVariationsTable
from fonticulous.tables.gdef import read_variation_store
from fonticulous.tables.gvar import GlyphVariationsTable


def format_region(variation: TupleVariation, axis_tags: list[str]) -> str:
    """Render a variation's region as tag=start:peak:end pairs."""
    parts = []
    for tag, (start, peak, end) in zip(axis_tags, variation.axis_regions()):
        if (start, peak, end) == (0.0, 0.0, 0.0):
            continue
        parts.append(f"{tag}={start:g}:{peak:g}:{end:g}")
    return " ".join(parts) or "(default)"


def describe_gvar(font: TTFont, subset: set[str] | None = None) -> Iterator[str]:
    data = read_table_data(font, "gvar")
    if data is None:
        return
    axis_tags = [axis.axisTag for axis in font["fvar"].axes]
    table = GlyphVariationsTable.decode(data, glyph_point_counts(font))
    yield (
        f"gvar: {len(table.glyph_variations)} glyphs, "
        f"{len(table.shared_tuples)} shared tuples, {len(data)} bytes"
    )
    for glyph_name, store in zip(font.getGlyphOrder(), table.glyph_variations):
        if subset is not None and glyph_name not in subset:
            continue
        if not store.variations:
            continue
        shared = "" if store.shared_points is None else " (shared points)"
        yield f"  {glyph_name}: {len(store.variations)} tuples{shared}"
        for variation in store.variations:
            points = "all points" if variation.applies_to_all_points else f"{len(variation.points)} points"
            yield f"    {format_region(variation, axis_tags)}: {points}"


def describe_cvar(font: TTFont) -> Iterator[str]:
    data = read_table_data(font, "cvar")
    if data is None:
        return
    axis_tags = [axis.axisTag for axis in font["fvar"].axes]
    table = CvtVariationsTable.decode(data, axis_count(font), cvt_count(font))
    yield f"cvar: {len(table.store.variations)} tuples, {len(data)} bytes"
    for variation in table.store.variations:
        changed = sum(1 for d in variation.deltas if not d.is_zero)
        yield f"  {format_region(variation, axis_tags)}: {changed} CVT values vary"


def describe_gdef(font: TTFont) -> Iterator[str]:
    data = read_table_data(font, "GDEF")
    if data is None:
        return
    store = read_variation_store(data)
    if store is None:
        yield "GDEF: no item variation store"
        return
    yield (
        f"GDEF: item variation store with {len(store.variation_regions)} regions, "
        f"{len(store.variation_data)} data blocks"
    )
    for i, block in enumerate(store.variation_data):
        yield (
            f"  block {i}: {len(block.delta_values)} items over "
            f"regions {block.region_indexes}"
        )


def describe_font(
    path: Path,
    subset: set[str] | None = None,
    tables: list[str] | None = None,
) -> list[str]:
    """
    Summarize the variation tables of a font.

    Args:
        path: Font file
        subset: Glyph names to list (all glyphs if None)
        tables: Table tags to describe (all variation tables if None)

    Returns:
        Summary lines
    """
    tables = tables or VARIATION_TABLES
    lines = [f"{path.name}:"]
    with open_font(path) as font:
        if "gvar" in tables:
            lines.extend(describe_gvar(font, subset))
        if "cvar" in tables:
            lines.extend(describe_cvar(font))
        if "GDEF" in tables:
            lines.extend(describe_gdef(font))
    return lines
