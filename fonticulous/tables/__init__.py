"""Table-level codecs built on the variation store structures."""
