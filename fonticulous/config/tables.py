"""
Variation table configurations.

Defines which tables the tools decode and the wire versions they write.
"""

# Tables whose variation data this package reads and writes
VARIATION_TABLES = [
    "gvar",  # Glyph variations (vector deltas per outline point)
    "cvar",  # CVT variations (scalar deltas per CVT entry)
    "GDEF",  # Item variation store shared by GDEF/GPOS value records
]

GVAR_VERSION = (1, 0)
CVAR_VERSION = (1, 0)
ITEM_VARIATION_STORE_FORMAT = 1

# GDEF minor version that introduced itemVarStoreOffset
GDEF_VARSTORE_MINOR_VERSION = 3

# Phantom points appended to every glyph in gvar (left, right, top, bottom)
PHANTOM_POINT_COUNT = 4
