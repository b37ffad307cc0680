"""
Deterministic grid city generator.
"""

from typing import List, Optional, Tuple

from .city_map import CityMap
from .config import GeneratorConfig
from .errors import CityMapError
from .prng import CityRandom

Coord = Tuple[float, float]


class CityGenerator:
    """
    Build a grid-like city layout from a numeric seed.

    The sequence of PRNG draws is fixed by the order of the build steps, so
    the same seed always yields the same segments, in the same order, with
    the same ids.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        seed: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize generator.

        Args:
            config: Generator configuration (defaults if None)
            seed: Random seed (uses config.seed if None)
            verbose: Print progress while building
        """
        self.config = config if config is not None else GeneratorConfig()
        self.seed = self.config.seed if seed is None else seed
        self.verbose = verbose

        self.spacing_x = self.config.block_size_m
        self.spacing_y = self.config.block_size_m

        # Filled in by generate()
        self.random: Optional[CityRandom] = None
        self.city_map: Optional[CityMap] = None
        self.next_segment_id = 1
        self.major_columns = 0
        self.major_rows = 0
        self.arterial_step = 0
        self.origin_x = 0.0
        self.origin_y = 0.0
        self.total_width = 0.0
        self.total_height = 0.0
        self.stats = {}

    def generate(self, city_map: Optional[CityMap] = None) -> CityMap:
        """
        Generate a city.

        Args:
            city_map: Map to rebuild in place (a new map if None); any prior
                contents are discarded

        Returns:
            The populated map

        Raises:
            ResourceError: Storage could not be grown; the map is left empty
        """
        if city_map is None:
            city_map = CityMap()
        city_map.clear()

        self.city_map = city_map
        self.random = CityRandom(self.seed)
        self.next_segment_id = 1
        self.stats = {
            "arterials": 0,
            "side_streets": 0,
            "loops": 0,
            "avenues": 0,
            "spurs": 0,
            "spurs_discarded": 0,
            "rejected": 0,
        }

        self._layout_grid()
        self._log(
            f"Laying out {self.major_columns}x{self.major_rows} grid "
            f"(arterial every {self.arterial_step} lines, seed {self.seed})..."
        )
        try:
            self._create_rows()
            self._create_columns()
            self._create_ring_roads()
            self._create_center_loop()
            self._create_neighborhoods()
            self._create_avenues()
            self._create_spurs()
        except CityMapError:
            city_map.clear()
            raise

        self._log(
            f"Generated {len(city_map)} segments "
            f"({self.stats['spurs_discarded']} spurs discarded)"
        )
        return city_map

    def _log(self, message: str):
        if self.verbose:
            print(message)

    def _layout_grid(self):
        """Draw grid dimensions and arterial stride."""
        self.major_columns = 10 + self.random.next_u32() % 6
        self.major_rows = 10 + self.random.next_u32() % 6

        self.total_width = (self.major_columns - 1) * self.spacing_x
        self.total_height = (self.major_rows - 1) * self.spacing_y
        self.origin_x = -0.5 * self.total_width
        self.origin_y = -0.5 * self.total_height

        self.arterial_step = 4 + self.random.next_u32() % 2

    def _grid_x(self, column: int) -> float:
        return self.origin_x + column * self.spacing_x

    def _grid_y(self, row: int) -> float:
        return self.origin_y + row * self.spacing_y

    def _is_arterial(self, line_index: int, line_count: int) -> bool:
        return line_index % self.arterial_step == 0 or line_index == line_count // 2

    def _emit(self, points: List[Coord], kind: str) -> bool:
        """Add a segment under the next id; an invalid one still uses up its id."""
        segment_id = self.next_segment_id
        self.next_segment_id += 1
        if not self.city_map.add_segment(segment_id, points):
            self.stats["rejected"] += 1
            return False
        self.stats[kind] += 1
        return True

    def _create_rows(self):
        """Horizontal arterials, or 1-3 short side streets per row."""
        for row in range(self.major_rows):
            y = self._grid_y(row)
            if self._is_arterial(row, self.major_rows):
                self._emit(
                    [(self.origin_x + 0.0, y), (self.origin_x + self.total_width, y)],
                    "arterials",
                )
                continue

            street_count = 1 + self.random.next_u32() % 3
            for _ in range(street_count):
                left = self.random.range_int(0, self.major_columns - 2)
                right = self.random.range_int(left + 1, self.major_columns - 1)
                self._emit([(self._grid_x(left), y), (self._grid_x(right), y)], "side_streets")

    def _create_columns(self):
        """Vertical arterials, or 1-3 short side streets per column."""
        for column in range(self.major_columns):
            x = self._grid_x(column)
            if self._is_arterial(column, self.major_columns):
                self._emit(
                    [(x, self.origin_y + 0.0), (x, self.origin_y + self.total_height)],
                    "arterials",
                )
                continue

            street_count = 1 + self.random.next_u32() % 3
            for _ in range(street_count):
                bottom = self.random.range_int(0, self.major_rows - 2)
                top = self.random.range_int(bottom + 1, self.major_rows - 1)
                self._emit([(x, self._grid_y(bottom)), (x, self._grid_y(top))], "side_streets")

    def _add_rect_loop(self, left: float, bottom: float, right: float, top: float):
        """Closed 5-point rectangle, counter-clockwise from bottom-left."""
        self._emit(
            [
                (left, bottom),
                (right, bottom),
                (right, top),
                (left, top),
                (left, bottom),
            ],
            "loops",
        )

    def _create_ring_roads(self):
        """Outer boundary loop and a loop inset by one block."""
        self._add_rect_loop(
            self.origin_x,
            self.origin_y,
            self.origin_x + self.total_width,
            self.origin_y + self.total_height,
        )

        ring_padding = self.spacing_x
        self._add_rect_loop(
            self.origin_x + ring_padding,
            self.origin_y + ring_padding,
            self.origin_x + self.total_width - ring_padding,
            self.origin_y + self.total_height - ring_padding,
        )

    def _create_center_loop(self):
        """Loop one block around the middle grid intersection."""
        center_x = self._grid_x(self.major_columns // 2)
        center_y = self._grid_y(self.major_rows // 2)
        self._add_rect_loop(
            center_x - self.spacing_x,
            center_y - self.spacing_y,
            center_x + self.spacing_x,
            center_y + self.spacing_y,
        )

    def _create_neighborhoods(self):
        """6-11 interior loops of 2-4 blocks per side."""
        neighborhood_count = 6 + self.random.next_u32() % 6
        for _ in range(neighborhood_count):
            left_column = self.random.range_int(1, self.major_columns - 4)
            bottom_row = self.random.range_int(1, self.major_rows - 4)
            width_cells = self.random.range_int(2, 4)
            height_cells = self.random.range_int(2, 4)

            self._add_rect_loop(
                self._grid_x(left_column),
                self._grid_y(bottom_row),
                self._grid_x(left_column + width_cells),
                self._grid_y(bottom_row + height_cells),
            )

    def _create_avenues(self):
        """Long straight runs spanning the middle third of the grid."""
        avenue_count = (self.major_columns + self.major_rows) // 3
        for _ in range(avenue_count):
            if self.random.coin():
                row = self.random.range_int(1, self.major_rows - 2)
                left = self.random.range_int(0, self.major_columns // 3)
                right = self.random.range_int(
                    (2 * self.major_columns) // 3, self.major_columns - 1
                )
                y = self._grid_y(row)
                self._emit([(self._grid_x(left), y), (self._grid_x(right), y)], "avenues")
            else:
                column = self.random.range_int(1, self.major_columns - 2)
                bottom = self.random.range_int(0, self.major_rows // 3)
                top = self.random.range_int(
                    (2 * self.major_rows) // 3, self.major_rows - 1
                )
                x = self._grid_x(column)
                self._emit([(x, self._grid_y(bottom)), (x, self._grid_y(top))], "avenues")

    def _spur_in_bounds(self, point: Coord) -> bool:
        """Inside the grid box grown by one block on every side."""
        allowed_min_x = self.origin_x - self.spacing_x
        allowed_min_y = self.origin_y - self.spacing_y
        allowed_max_x = self.origin_x + self.total_width + self.spacing_x
        allowed_max_y = self.origin_y + self.total_height + self.spacing_y
        return (
            allowed_min_x <= point[0] <= allowed_max_x
            and allowed_min_y <= point[1] <= allowed_max_y
        )

    def _create_spurs(self):
        """Short stubs from grid points, optionally with one perpendicular turn."""
        step = self.config.spur_step_fraction
        spur_budget = (self.major_columns * self.major_rows) // 6

        for _ in range(spur_budget):
            base_column = self.random.range_int(0, self.major_columns - 1)
            base_row = self.random.range_int(0, self.major_rows - 1)
            direction = self.random.range_int(0, 3)
            length_cells = self.random.range_int(2, 5)

            base_x = self._grid_x(base_column)
            base_y = self._grid_y(base_row)
            end_x, end_y = base_x, base_y
            # 0: +x, 1: -x, 2: +y, 3: -y
            if direction == 0:
                end_x = base_x + length_cells * self.spacing_x * step
            elif direction == 1:
                end_x = base_x - length_cells * self.spacing_x * step
            elif direction == 2:
                end_y = base_y + length_cells * self.spacing_y * step
            else:
                end_y = base_y - length_cells * self.spacing_y * step
            points = [(base_x, base_y), (end_x, end_y)]

            make_turn = (self.random.next_u32() & 1) == 0
            if make_turn:
                turn_x, turn_y = end_x, end_y
                if direction < 2:
                    if self.random.range_int(2, 3) == 2:
                        turn_y += self.spacing_y * step
                    else:
                        turn_y -= self.spacing_y * step
                else:
                    if self.random.range_int(0, 1) == 0:
                        turn_x += self.spacing_x * step
                    else:
                        turn_x -= self.spacing_x * step
                points.append((turn_x, turn_y))

            if not all(self._spur_in_bounds(p) for p in points[1:]):
                self.stats["spurs_discarded"] += 1
                continue

            self._emit(points, "spurs")


def generate_city(
    seed: int,
    city_map: Optional[CityMap] = None,
    config: Optional[GeneratorConfig] = None
) -> CityMap:
    """Build the city for ``seed`` into ``city_map`` (or a new map)."""
    return CityGenerator(config, seed=seed).generate(city_map)
