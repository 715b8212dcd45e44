"""
Field limits and run caps of the OpenType variation data formats.

Centralizes the numeric limits so the codec modules share one definition.
"""

# Packed point numbers
MAX_POINT_RUN = 127  # points per run (7-bit control, capped at 127)
MAX_POINT_COUNT = 0x7FFF  # 15-bit extended count field
MAX_POINT_INDEX = 0xFFFF

# Packed deltas
MAX_DELTA_RUN = 64  # values per run (6-bit control)

# Tuple variation store
MAX_TUPLE_COUNT = 0x0FFF  # 12-bit tupleVariationCount
MAX_SHARED_TUPLES = 0x1000  # 12-bit shared tuple index

# Item variation store
MAX_ITEMS_PER_DATA = 0xFFFF
MAX_REGIONS = 0xFFFF

# F2Dot14 range
F2DOT14_MIN = -2.0
F2DOT14_MAX = 0x7FFF / (1 << 14)
