"""
Geometry store: axis-aligned road segments owned by a CityMap.
"""

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .errors import ResourceError, ValidationError

MIN_CAPACITY = 16

EMPTY_BOUNDS = (0.0, 0.0, 1.0, 1.0)


class Point(NamedTuple):
    """World-space position in meters."""

    x: float
    y: float


@dataclass(frozen=True)
class RoadSegment:
    """A horizontal run, a vertical run, or a polyline of such runs."""

    id: int
    points: Tuple[Point, ...]

    @property
    def point_count(self) -> int:
        return len(self.points)

    def as_array(self) -> np.ndarray:
        """Points as an (n, 2) float array."""
        return np.array(self.points, dtype=float)


def is_axis_aligned_step(a: Sequence[float], b: Sequence[float]) -> bool:
    """True if a -> b moves along exactly one axis."""
    delta_x = b[0] - a[0]
    delta_y = b[1] - a[1]
    is_horizontal = delta_y == 0.0 and delta_x != 0.0
    is_vertical = delta_x == 0.0 and delta_y != 0.0
    return is_horizontal or is_vertical


def validate_segment_points(
    points: Sequence[Sequence[float]],
    segment_id: Optional[int] = None
) -> None:
    """
    Check the point-count and axis-alignment invariants of a segment.

    Args:
        points: Sequence of (x, y) pairs
        segment_id: Id used in the error message

    Raises:
        ValidationError: Fewer than 2 points, or a consecutive pair that is
            diagonal or repeated
    """
    if len(points) < 2:
        raise ValidationError(
            f"needs at least 2 points, got {len(points)}", segment_id
        )
    for index in range(1, len(points)):
        if not is_axis_aligned_step(points[index - 1], points[index]):
            raise ValidationError(
                f"points {index - 1} and {index} are not axis-aligned "
                f"({tuple(points[index - 1])} -> {tuple(points[index])})",
                segment_id,
            )


class CityMap:
    """
    Insertion-ordered, growable collection of road segments.

    A map is either empty or fully built: the generator and the loader clear
    it before every rebuild. Consumers read it through iteration and
    indexing and never mutate segments, which are immutable.
    """

    def __init__(self):
        self._segments: List[RoadSegment] = []
        self.capacity = 0

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[RoadSegment]:
        return iter(self._segments)

    def __getitem__(self, index: int) -> RoadSegment:
        return self._segments[index]

    def __repr__(self) -> str:
        return f"CityMap(segments={len(self._segments)}, capacity={self.capacity})"

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    @property
    def segments(self) -> Tuple[RoadSegment, ...]:
        """Snapshot of the segments in insertion order."""
        return tuple(self._segments)

    def is_empty(self) -> bool:
        return not self._segments

    def segment_ids(self) -> List[int]:
        return [segment.id for segment in self._segments]

    def reserve(self, required_capacity: int) -> None:
        """
        Ensure room for at least ``required_capacity`` segments.

        Capacity doubles (minimum 16), or jumps straight to the requested
        size when doubling is not enough.
        """
        if self.capacity >= required_capacity:
            return
        new_capacity = self.capacity * 2 if self.capacity > 0 else MIN_CAPACITY
        if new_capacity < required_capacity:
            new_capacity = required_capacity
        self.capacity = new_capacity

    def add_segment(self, segment_id: int, points: Sequence[Sequence[float]]) -> bool:
        """
        Validate and append a segment, copying its points.

        Args:
            segment_id: Segment id (not required to be unique)
            points: Sequence of (x, y) pairs

        Returns:
            False if the points break the segment invariants (nothing is
            stored), True once the segment is appended

        Raises:
            ResourceError: Storage could not be grown
        """
        try:
            validate_segment_points(points, segment_id)
        except ValidationError:
            return False
        self.append_segment(segment_id, points)
        return True

    def append_segment(self, segment_id: int, points: Sequence[Sequence[float]]) -> RoadSegment:
        """
        Like ``add_segment`` but raises ValidationError instead of returning False.
        """
        validate_segment_points(points, segment_id)
        try:
            segment = RoadSegment(
                int(segment_id),
                tuple(Point(float(p[0]), float(p[1])) for p in points),
            )
            self.reserve(len(self._segments) + 1)
            self._segments.append(segment)
        except MemoryError as e:
            raise ResourceError(
                f"cannot store road segment {segment_id} "
                f"({len(self._segments)} segments held)"
            ) from e
        return segment

    def clear(self) -> None:
        """Release all segments and reset to empty."""
        self._segments = []
        self.capacity = 0

    def all_points(self) -> np.ndarray:
        """Every point of every segment as an (n, 2) float array."""
        if not self._segments:
            return np.empty((0, 2), dtype=float)
        return np.array(
            [point for segment in self._segments for point in segment.points],
            dtype=float,
        )

    def compute_bounds(self) -> Tuple[float, float, float, float]:
        """
        Bounding box over every point.

        Returns:
            (min_x, min_y, max_x, max_y); the unit box (0, 0, 1, 1) when empty
        """
        if not self._segments:
            return EMPTY_BOUNDS
        coords = self.all_points()
        min_x, min_y = coords.min(axis=0)
        max_x, max_y = coords.max(axis=0)
        return float(min_x), float(min_y), float(max_x), float(max_y)
