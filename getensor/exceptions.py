"""
Exceptions raised by getensor.

All exceptions subclass both ``GetensorError`` and the matching built-in
exception, callers can catch either.
"""


class GetensorError(Exception):
    """Base exception for all getensor errors."""


class InvalidOutputShapeError(GetensorError, ValueError):
    """The output array cannot hold a tensor field for the given image.

    Raised before any computation when the output does not expose exactly
    3 channels on its last axis, or when its spatial shape differs from the
    image's. Nothing is written to the output in that case.
    """
