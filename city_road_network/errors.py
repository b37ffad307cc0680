"""
Error types raised by the road-network engine.
"""

from typing import Optional


class CityMapError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(CityMapError, ValueError):
    """A road segment has fewer than two points or a diagonal step."""

    def __init__(self, message: str, segment_id: Optional[int] = None):
        self.segment_id = segment_id
        if segment_id is not None:
            message = f"segment {segment_id}: {message}"
        super().__init__(message)


class ParseError(CityMapError, ValueError):
    """Map text could not be tokenized or does not have the map layout."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)


class MapIOError(CityMapError, OSError):
    """A map file could not be opened, read or written."""


class ResourceError(CityMapError, MemoryError):
    """Storage for road segments could not be grown."""
