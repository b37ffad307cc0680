"""
City Road-Network Engine

Deterministic grid city generation, an axis-aligned road segment store, and
a streaming JSON codec for persisting the resulting maps.
"""

__version__ = "0.1.0"

from .camera import Camera2D, compute_bounds, fit_camera
from .city_map import CityMap, Point, RoadSegment
from .config import GeneratorConfig
from .errors import (
    CityMapError,
    MapIOError,
    ParseError,
    ResourceError,
    ValidationError,
)
from .generator import CityGenerator, generate_city
from .prng import CityRandom
from .road_graph import build_road_graph, compute_route
from .serialization import (
    dumps_city_map,
    load_city_map,
    loads_city_map,
    write_city_map,
)

__all__ = [
    "Camera2D",
    "CityGenerator",
    "CityMap",
    "CityMapError",
    "CityRandom",
    "GeneratorConfig",
    "MapIOError",
    "ParseError",
    "Point",
    "ResourceError",
    "RoadSegment",
    "ValidationError",
    "build_road_graph",
    "compute_bounds",
    "compute_route",
    "dumps_city_map",
    "fit_camera",
    "generate_city",
    "load_city_map",
    "loads_city_map",
    "write_city_map",
]
