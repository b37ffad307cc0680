"""
Fit-to-window camera math for the debug viewer.
"""

from dataclasses import dataclass
from typing import Tuple

from .city_map import CityMap

Bounds = Tuple[float, float, float, float]

PADDING_FACTOR = 1.10
MIN_ZOOM = 1e-4
MAX_ZOOM = 1e6
ZOOM_STEP = 1.15


def compute_bounds(city_map: CityMap) -> Bounds:
    """(min_x, min_y, max_x, max_y) of every point; (0, 0, 1, 1) when empty."""
    return city_map.compute_bounds()


@dataclass
class Camera2D:
    """Uniform-scale affine transform: screen = world * zoom + offset."""

    offset_x: float = 0.0
    offset_y: float = 0.0
    zoom: float = 1.0
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM

    def world_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return x * self.zoom + self.offset_x, y * self.zoom + self.offset_y

    def screen_to_world(self, x: float, y: float) -> Tuple[float, float]:
        return (x - self.offset_x) / self.zoom, (y - self.offset_y) / self.zoom

    def pan(self, dx: float, dy: float):
        """Shift the view by a screen-space delta."""
        self.offset_x += dx
        self.offset_y += dy

    def zoom_at(self, screen_x: float, screen_y: float, wheel: float, step: float = ZOOM_STEP):
        """
        Zoom by ``step ** wheel`` keeping the world point under the cursor fixed.

        Args:
            screen_x: Cursor x in pixels
            screen_y: Cursor y in pixels
            wheel: Wheel movement (positive zooms in)
            step: Zoom factor per wheel notch
        """
        before_x, before_y = self.screen_to_world(screen_x, screen_y)

        new_zoom = self.zoom * step ** wheel
        self.zoom = min(max(new_zoom, self.min_zoom), self.max_zoom)

        self.offset_x = screen_x - before_x * self.zoom
        self.offset_y = screen_y - before_y * self.zoom

    def visible_world_bounds(self, screen_width: int, screen_height: int) -> Bounds:
        """World-space box covered by a screen of the given size."""
        left, bottom = self.screen_to_world(0.0, 0.0)
        right, top = self.screen_to_world(float(screen_width), float(screen_height))
        return left, bottom, right, top


def fit_camera(
    bounds: Bounds,
    screen_width: int,
    screen_height: int,
    padding: float = PADDING_FACTOR
) -> Camera2D:
    """
    Camera that centers ``bounds`` on screen with 10% padding.

    Args:
        bounds: (min_x, min_y, max_x, max_y)
        screen_width: Screen width in pixels
        screen_height: Screen height in pixels
        padding: Multiplier applied to the box size

    Returns:
        Fitted camera
    """
    min_x, min_y, max_x, max_y = bounds

    width = max_x - min_x
    height = max_y - min_y
    if width <= 0.0:
        width = 1.0
    if height <= 0.0:
        height = 1.0
    width *= padding
    height *= padding

    zoom = min(screen_width / width, screen_height / height)
    if zoom <= 0.0:
        zoom = 1.0

    center_x = (min_x + max_x) * 0.5
    center_y = (min_y + max_y) * 0.5

    return Camera2D(
        offset_x=screen_width * 0.5 - center_x * zoom,
        offset_y=screen_height * 0.5 - center_y * zoom,
        zoom=zoom,
    )


def fit_camera_to_map(
    city_map: CityMap,
    screen_width: int,
    screen_height: int,
    padding: float = PADDING_FACTOR
) -> Camera2D:
    return fit_camera(compute_bounds(city_map), screen_width, screen_height, padding)
