"""OpenType Font Variations common structures."""

from fonticulous.otvar.delta import Delta, ScalarDelta, VectorDelta
from fonticulous.otvar.errors import (
    EncoderPreconditionError,
    InvalidDimensionalityError,
    SizeMismatchError,
    TruncatedInputError,
    VariationDataError,
)
from fonticulous.otvar.item_variation_store import (
    ItemVariationData,
    ItemVariationStore,
    RegionAxisCoordinates,
)
from fonticulous.otvar.tuple_variation_header import (
    TupleIndexFlags,
    TupleVariationHeader,
)
from fonticulous.otvar.tuple_variation_store import (
    TupleVariation,
    TupleVariationStore,
)

__all__ = [
    "Delta",
    "EncoderPreconditionError",
    "InvalidDimensionalityError",
    "ItemVariationData",
    "ItemVariationStore",
    "RegionAxisCoordinates",
    "ScalarDelta",
    "SizeMismatchError",
    "TruncatedInputError",
    "TupleIndexFlags",
    "TupleVariation",
    "TupleVariationHeader",
    "TupleVariationStore",
    "VariationDataError",
    "VectorDelta",
]
