"""
Exceptions raised by the variation data codec.

Every decode or encode failure derives from VariationDataError so that a
build driver can catch one type per table and decide whether to skip the
offending glyph or abort.
"""


class VariationDataError(Exception):
    """Base class for variation data codec errors."""


class TruncatedInputError(VariationDataError):
    """A decode needed more bytes than the buffer holds."""


class SizeMismatchError(VariationDataError):
    """A declared size disagrees with the bytes or values actually present."""


class InvalidDimensionalityError(VariationDataError, TypeError):
    """A scalar delta was used as a vector delta, or the reverse."""


class EncoderPreconditionError(VariationDataError, ValueError):
    """Input handed to an encoder violates its contract."""
