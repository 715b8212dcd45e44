"""
Item variation store embedded in a GDEF table.
"""

from fonticulous.config.tables import GDEF_VARSTORE_MINOR_VERSION
from fonticulous.otvar.binary import read
from fonticulous.otvar.item_variation_store import ItemVariationStore

# majorVersion, minorVersion, five Offset16 fields, then itemVarStoreOffset
GDEF_VARSTORE_OFFSET_POSITION = 14


def variation_store_offset(gdef_data: bytes) -> int:
    """Offset of the item variation store from the GDEF start, 0 if absent."""
    (major, minor), _ = read("HH", gdef_data, 0)
    if major != 1 or minor < GDEF_VARSTORE_MINOR_VERSION:
        return 0
    (offset,), _ = read("L", gdef_data, GDEF_VARSTORE_OFFSET_POSITION)
    return offset


def read_variation_store(gdef_data: bytes) -> ItemVariationStore | None:
    """
    Decode the item variation store of a GDEF table.

    Args:
        gdef_data: Raw GDEF table

    Returns:
        The store, or None for GDEF versions or tables without one
    """
    offset = variation_store_offset(gdef_data)
    if not offset:
        return None
    return ItemVariationStore.decode(gdef_data, offset)
