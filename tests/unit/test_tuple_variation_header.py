"""Tests for tuple variation headers."""

import pytest

from fonticulous.otvar.errors import EncoderPreconditionError, TruncatedInputError
from fonticulous.otvar.tuple_variation_header import (
    TupleIndexFlags,
    TupleVariationHeader,
)

EMBEDDED = TupleIndexFlags.EMBEDDED_PEAK_TUPLE
INTERMEDIATE = TupleIndexFlags.INTERMEDIATE_REGION
PRIVATE = TupleIndexFlags.PRIVATE_POINT_NUMBERS


def test_encode_embedded_peak():
    """Test an embedded peak follows the size and tuple index."""
    header = TupleVariationHeader(10, EMBEDDED | PRIVATE, peak_tuple=(1.0, -0.5))
    assert header.encode(2) == b"\x00\x0a\xa0\x00\x40\x00\xe0\x00"
    assert header.size(2) == 8


def test_encode_shared_tuple_index():
    """Test a shared peak is stored as a 12-bit index."""
    header = TupleVariationHeader(4, TupleIndexFlags(0), shared_tuple_index=3)
    assert header.encode(1) == b"\x00\x04\x00\x03"
    assert header.size(1) == 4
    assert not header.has_private_points


def test_encode_intermediate_region():
    """Test intermediate start and end follow the peak."""
    header = TupleVariationHeader(
        6,
        EMBEDDED | INTERMEDIATE,
        peak_tuple=(0.5,),
        intermediate_start=(0.0,),
        intermediate_end=(1.0,),
    )
    assert header.encode(1) == b"\x00\x06\xc0\x00\x20\x00\x00\x00\x40\x00"
    assert header.size(1) == 10


def test_decode_round_trip():
    """Test decoding returns an equal header."""
    header = TupleVariationHeader(
        300,
        INTERMEDIATE | PRIVATE,
        shared_tuple_index=17,
        intermediate_start=(-1.0, 0.0),
        intermediate_end=(0.0, 0.25),
    )
    data = b"\x99" + header.encode(2)
    decoded = TupleVariationHeader.decode(data, 2, offset=1)
    assert decoded == header
    assert decoded.has_private_points
    assert decoded.size(2) == len(data) - 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"flags": EMBEDDED},
        {"flags": TupleIndexFlags(0), "peak_tuple": (1.0,)},
        {"flags": EMBEDDED | INTERMEDIATE, "peak_tuple": (1.0,), "intermediate_start": (0.0,)},
        {
            "flags": EMBEDDED,
            "peak_tuple": (1.0,),
            "intermediate_start": (0.0,),
            "intermediate_end": (1.0,),
        },
        {"flags": TupleIndexFlags(0), "shared_tuple_index": 4096},
    ],
)
def test_flag_invariants(kwargs):
    """Test optional fields must agree with the flags."""
    with pytest.raises(EncoderPreconditionError):
        TupleVariationHeader(variation_data_size=0, **kwargs)


def test_encode_rejects_out_of_range_coordinate():
    """Test F2Dot14 coordinates must lie in [-2, 2)."""
    header = TupleVariationHeader(0, EMBEDDED, peak_tuple=(2.5,))
    with pytest.raises(EncoderPreconditionError):
        header.encode(1)


def test_encode_rejects_wrong_axis_count():
    """Test tuples must have one coordinate per axis."""
    header = TupleVariationHeader(0, EMBEDDED, peak_tuple=(1.0,))
    with pytest.raises(EncoderPreconditionError):
        header.encode(2)


def test_decode_truncated():
    """Test a header cut short raises TruncatedInputError."""
    with pytest.raises(TruncatedInputError):
        TupleVariationHeader.decode(b"\x00\x04\x80\x00\x40", 1)
