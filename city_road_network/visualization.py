"""
Debug rendering of city maps with matplotlib.
"""

from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .camera import Camera2D, fit_camera_to_map
from .city_map import CityMap
from .config import GeneratorConfig
from .errors import MapIOError

BACKGROUND_COLOR = '#121216'
ROAD_COLOR = '#DCDCE6'
POINT_COLOR = '#FF7878'
HELP_TEXT = "mouse wheel: zoom | middle/right drag: pan | close window: quit"


def plot_city_map(
    city_map: CityMap,
    ax: Optional[plt.Axes] = None,
    title: Optional[str] = None,
    show_points: bool = True,
    show_bounds: bool = False,
    point_size: float = 9,
    edge_width: float = 2.0,
    edge_color: str = ROAD_COLOR,
    point_color: str = POINT_COLOR
) -> plt.Axes:
    """
    Plot every road segment in world coordinates.

    Args:
        city_map: Map to draw (read only)
        ax: Matplotlib axis (creates new if None)
        title: Plot title
        show_points: Mark segment vertices
        show_bounds: Draw the map bounding box
        point_size: Vertex marker size
        edge_width: Road line width
        edge_color: Road color
        point_color: Vertex color

    Returns:
        Matplotlib axis
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    ax.set_facecolor(BACKGROUND_COLOR)

    for segment in city_map:
        coords = segment.as_array()
        ax.plot(coords[:, 0], coords[:, 1], color=edge_color, linewidth=edge_width, zorder=1)

    if show_points and len(city_map) > 0:
        points = city_map.all_points()
        ax.scatter(points[:, 0], points[:, 1], s=point_size, c=point_color, zorder=2)

    if show_bounds:
        min_x, min_y, max_x, max_y = city_map.compute_bounds()
        ax.add_patch(Rectangle(
            (min_x, min_y), max_x - min_x, max_y - min_y,
            fill=False, edgecolor='gray', linestyle='--', linewidth=1
        ))

    ax.set_aspect('equal')
    if title:
        ax.set_title(title, fontsize=12, fontweight='bold')

    return ax


class CityMapViewer:
    """
    Interactive pan/zoom window over a city map.

    The axes fill the figure, so display pixels map one-to-one onto the
    camera's screen space and the view limits follow the camera.
    """

    def __init__(
        self,
        city_map: CityMap,
        config: Optional[GeneratorConfig] = None,
        title: str = "City Map Debug Render"
    ):
        self.city_map = city_map
        self.config = config if config is not None else GeneratorConfig()
        self.width = self.config.window_width_px
        self.height = self.config.window_height_px

        self.camera = fit_camera_to_map(
            city_map, self.width, self.height, self.config.camera_padding
        )
        self.camera.min_zoom = self.config.min_zoom
        self.camera.max_zoom = self.config.max_zoom

        dpi = 100
        self.fig = plt.figure(figsize=(self.width / dpi, self.height / dpi), dpi=dpi)
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title(title)
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        self.ax.set_axis_off()
        self.fig.patch.set_facecolor(BACKGROUND_COLOR)

        plot_city_map(city_map, ax=self.ax)
        self.ax.set_aspect('auto')
        self.ax.text(
            0.01, 0.99, HELP_TEXT, transform=self.ax.transAxes,
            color='#C8C8D2', fontsize=10, va='top'
        )

        self._drag_origin = None
        self.fig.canvas.mpl_connect('scroll_event', self._on_scroll)
        self.fig.canvas.mpl_connect('button_press_event', self._on_press)
        self.fig.canvas.mpl_connect('button_release_event', self._on_release)
        self.fig.canvas.mpl_connect('motion_notify_event', self._on_motion)
        self.apply_camera()

    def apply_camera(self):
        """Set the axis limits to what the camera sees."""
        left, bottom, right, top = self.camera.visible_world_bounds(self.width, self.height)
        self.ax.set_xlim(left, right)
        self.ax.set_ylim(bottom, top)
        self.fig.canvas.draw_idle()

    def _on_scroll(self, event):
        self.camera.zoom_at(event.x, event.y, event.step, self.config.zoom_step)
        self.apply_camera()

    def _on_press(self, event):
        if event.button in (2, 3):
            self._drag_origin = (event.x, event.y)

    def _on_release(self, event):
        self._drag_origin = None

    def _on_motion(self, event):
        if self._drag_origin is None:
            return
        last_x, last_y = self._drag_origin
        self.camera.pan(event.x - last_x, event.y - last_y)
        self._drag_origin = (event.x, event.y)
        self.apply_camera()

    def show(self):
        plt.show()


def render_city_map(
    city_map: CityMap,
    output_path: Union[str, Path],
    config: Optional[GeneratorConfig] = None,
    camera: Optional[Camera2D] = None
) -> Path:
    """
    Save a fitted view of the map to an image file without opening a window.

    Args:
        city_map: Map to draw
        output_path: Image path (format from extension)
        config: Window size and zoom settings
        camera: View to render (fit to the map if None)

    Returns:
        Path written
    """
    if config is None:
        config = GeneratorConfig()
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MapIOError(f"cannot create {output_path.parent}: {e}") from e

    if camera is None:
        camera = fit_camera_to_map(
            city_map, config.window_width_px, config.window_height_px, config.camera_padding
        )

    dpi = 100
    fig = plt.figure(figsize=(config.window_width_px / dpi, config.window_height_px / dpi), dpi=dpi)
    fig.patch.set_facecolor(BACKGROUND_COLOR)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_axis_off()
    plot_city_map(city_map, ax=ax)
    ax.set_aspect('auto')

    left, bottom, right, top = camera.visible_world_bounds(
        config.window_width_px, config.window_height_px
    )
    ax.set_xlim(left, right)
    ax.set_ylim(bottom, top)

    try:
        fig.savefig(output_path, dpi=dpi, facecolor=fig.get_facecolor())
    except OSError as e:
        raise MapIOError(f"cannot write image {output_path}: {e}") from e
    finally:
        plt.close(fig)
    return output_path
