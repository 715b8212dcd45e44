"""
Variation table round-trip verification.

Decodes each variation table of a font, encodes it again and checks that
decoding the new bytes gives the same structures. Glyph deltas are also
compared with fontTools' own gvar parser.
"""

from pathlib import Path

from fontTools.ttLib import TTFont

from fonticulous.core.font_io import (
    axis_count,
    cvt_count,
    glyph_point_counts,
    open_font,
    read_table_data,
)
from fonticulous.otvar.errors import VariationDataError
from fonticulous.otvar.item_variation_store import ItemVariationStore
from fonticulous.tables.cvar import CvtVariationsTable
from fonticulous.tables.gdef import read_variation_store
from fonticulous.tables.gvar import GlyphVariationsTable
from fonticulous.utils.logging import logger


def _report_bytes(tag: str, original: bytes, encoded: bytes) -> None:
    if original == encoded:
        logger.info(f"  {tag}: re-encoded byte-identical ({len(encoded)} bytes)")
    else:
        logger.info(
            f"  {tag}: re-encoded to {len(encoded)} bytes (original {len(original)})"
        )


def expand_variation(variation, point_count: int) -> list:
    """Per-point (x, y) deltas with None for points the variation skips."""
    if variation.applies_to_all_points:
        return [d.get_2d() for d in variation.deltas]
    coordinates = [None] * point_count
    for point, delta in zip(variation.points, variation.deltas):
        if point < point_count:
            coordinates[point] = delta.get_2d()
    return coordinates


def compare_with_fonttools(
    font: TTFont,
    table: GlyphVariationsTable,
    point_counts: list[int],
    subset: set[str] | None = None,
) -> list[str]:
    """
    Compare decoded glyph variations with fontTools' gvar parse.

    Returns:
        One message per differing glyph
    """
    axis_tags = [axis.axisTag for axis in font["fvar"].axes]
    reference = font["gvar"].variations
    differences = []

    for glyph_name, store, point_count in zip(
        font.getGlyphOrder(), table.glyph_variations, point_counts
    ):
        if subset is not None and glyph_name not in subset:
            continue
        expected = reference[glyph_name] if glyph_name in reference else []
        if len(expected) != len(store.variations):
            differences.append(
                f"{glyph_name}: {len(store.variations)} tuples, fontTools has {len(expected)}"
            )
            continue
        for i, (ours, theirs) in enumerate(zip(store.variations, expected)):
            axes = {
                tag: region
                for tag, region in zip(axis_tags, ours.axis_regions())
                if region != (0.0, 0.0, 0.0)
            }
            if axes != theirs.axes:
                differences.append(f"{glyph_name}: tuple {i} region differs")
            elif expand_variation(ours, point_count) != [
                None if c is None else tuple(c) for c in theirs.coordinates
            ]:
                differences.append(f"{glyph_name}: tuple {i} deltas differ")
    return differences


def verify_gvar(font: TTFont, subset: set[str] | None = None) -> bool:
    data = read_table_data(font, "gvar")
    if data is None:
        return True

    point_counts = glyph_point_counts(font)
    table = GlyphVariationsTable.decode(data, point_counts)
    encoded = table.encode()
    _report_bytes("gvar", data, encoded)

    if GlyphVariationsTable.decode(encoded, point_counts) != table:
        logger.error("gvar: re-encoded table decodes differently")
        return False

    differences = compare_with_fonttools(font, table, point_counts, subset)
    for message in differences:
        logger.error(f"gvar: {message}")
    return not differences


def verify_cvar(font: TTFont) -> bool:
    data = read_table_data(font, "cvar")
    if data is None:
        return True

    axes, cvt_values = axis_count(font), cvt_count(font)
    table = CvtVariationsTable.decode(data, axes, cvt_values)
    encoded = table.encode()
    _report_bytes("cvar", data, encoded)

    if CvtVariationsTable.decode(encoded, axes, cvt_values) != table:
        logger.error("cvar: re-encoded table decodes differently")
        return False
    return True


def verify_gdef(font: TTFont) -> bool:
    data = read_table_data(font, "GDEF")
    if data is None:
        return True

    store = read_variation_store(data)
    if store is None:
        return True
    encoded = store.encode()
    logger.info(f"  GDEF: item variation store re-encoded to {len(encoded)} bytes")

    if ItemVariationStore.decode(encoded) != store:
        logger.error("GDEF: re-encoded item variation store decodes differently")
        return False
    return True


def verify_font(font_path: Path, subset: set[str] | None = None) -> bool:
    """
    Round-trip every variation table of a font.

    Args:
        font_path: Font file
        subset: Glyph names to compare with fontTools (all if None)

    Returns:
        True if every table survived the round trip
    """
    logger.info(f"Verifying {font_path.name}")

    success = True
    with open_font(font_path) as font:
        checks = [
            ("gvar", lambda: verify_gvar(font, subset)),
            ("cvar", lambda: verify_cvar(font)),
            ("GDEF", lambda: verify_gdef(font)),
        ]
        for tag, check in checks:
            try:
                if not check():
                    success = False
            except VariationDataError as e:
                logger.error(f"{tag}: {e}")
                success = False

    if success:
        logger.info(f"{font_path.name}: all variation tables verified")
    return success
