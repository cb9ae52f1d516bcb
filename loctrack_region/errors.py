"""
Region Errors
=============

Error taxonomy for region computation.

- EmptyInputError: a geometry primitive received zero points (programming error)
- InsufficientDataError: a group has no locatable points (handled by removal)
- InvalidCoordinateError: latitude/longitude outside the valid range

Degenerate geometry (identical or collinear points) is NOT an error.
"""


class RegionError(Exception):
    """Base class for all region computation errors."""
    pass


class EmptyInputError(RegionError):
    """Raised when a geometry primitive is invoked on zero points."""
    pass


class InsufficientDataError(RegionError):
    """Raised when a group has no points to derive a region from."""
    pass


class InvalidCoordinateError(RegionError, ValueError):
    """Raised when a coordinate falls outside the valid lat/lng range."""
    pass
