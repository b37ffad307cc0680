"""Generator determinism, layout rules and the seed-42 golden layout."""

import pytest

from city_road_network import CityGenerator, CityMap, GeneratorConfig, ResourceError, generate_city
from city_road_network.city_map import Point, is_axis_aligned_step


def as_tuples(city_map):
    return [(s.id, s.points) for s in city_map]


def test_same_seed_same_layout():
    first = generate_city(1234)
    second = generate_city(1234)
    assert len(first) == len(second)
    assert as_tuples(first) == as_tuples(second)


def test_different_seeds_differ():
    assert as_tuples(generate_city(1)) != as_tuples(generate_city(2))


def test_seed_zero_matches_seed_one():
    assert as_tuples(generate_city(0)) == as_tuples(generate_city(1))


@pytest.mark.parametrize("seed", [0, 1, 42, 7, 2 ** 63, 987654321])
def test_every_segment_is_axis_aligned(seed):
    city_map = generate_city(seed)
    assert len(city_map) > 0
    for segment in city_map:
        assert len(segment.points) >= 2
        for a, b in zip(segment.points, segment.points[1:]):
            assert is_axis_aligned_step(a, b)


def test_regenerating_discards_prior_contents():
    city_map = CityMap()
    city_map.add_segment(999, [(5000, 5000), (6000, 5000)])
    generate_city(42, city_map)
    assert 999 not in city_map.segment_ids()
    assert as_tuples(city_map) == as_tuples(generate_city(42))


def test_storage_failure_leaves_map_empty(monkeypatch):
    calls = []
    real_reserve = CityMap.reserve

    def failing_reserve(self, required_capacity):
        calls.append(required_capacity)
        if len(calls) > 20:
            raise MemoryError
        real_reserve(self, required_capacity)

    monkeypatch.setattr(CityMap, "reserve", failing_reserve)
    city_map = CityMap()
    with pytest.raises(ResourceError):
        CityGenerator(seed=42).generate(city_map)
    assert len(calls) == 21
    assert city_map.is_empty()


@pytest.mark.parametrize("seed", [3, 42, 77, 1001])
def test_grid_rules(seed):
    generator = CityGenerator(seed=seed)
    city_map = generator.generate()

    assert 10 <= generator.major_columns <= 15
    assert 10 <= generator.major_rows <= 15
    assert generator.arterial_step in (4, 5)

    half_w = generator.total_width / 2
    half_h = generator.total_height / 2
    assert generator.origin_x == -half_w
    assert generator.origin_y == -half_h

    # Everything stays within one block of the grid.
    min_x, min_y, max_x, max_y = city_map.compute_bounds()
    block = generator.spacing_x
    assert min_x >= -half_w - block and max_x <= half_w + block
    assert min_y >= -half_h - block and max_y <= half_h + block

    stats = generator.stats
    assert stats["rejected"] == 0
    assert stats["loops"] >= 3 + 6
    assert stats["avenues"] == (generator.major_columns + generator.major_rows) // 3
    spur_budget = (generator.major_columns * generator.major_rows) // 6
    assert stats["spurs"] + stats["spurs_discarded"] == spur_budget
    assert city_map.segment_ids() == list(range(1, len(city_map) + 1))


def test_first_segment_is_full_width_arterial():
    generator = CityGenerator(seed=5)
    city_map = generator.generate()
    first = city_map[0]
    assert first.id == 1
    assert first.points == (
        Point(generator.origin_x, generator.origin_y),
        Point(generator.origin_x + generator.total_width, generator.origin_y),
    )


def test_ring_roads_are_closed_loops():
    generator = CityGenerator(seed=42)
    city_map = generator.generate()
    loops = [s for s in city_map if len(s.points) == 5]
    assert len(loops) >= 3
    for loop in loops:
        assert loop.points[0] == loop.points[-1]
    outer = loops[0]
    assert outer.points[0] == Point(generator.origin_x, generator.origin_y)
    assert outer.points[2] == Point(-generator.origin_x, -generator.origin_y)


def test_block_size_scales_layout():
    small = generate_city(42, config=GeneratorConfig(block_size_m=50.0))
    large = generate_city(42)
    assert len(small) == len(large)
    for a, b in zip(small, large):
        assert [(p.x * 2, p.y * 2) for p in a.points] == [tuple(p) for p in b.points]


def test_verbose_prints_progress(capsys):
    CityGenerator(seed=42, verbose=True).generate()
    out = capsys.readouterr().out
    assert "12x13 grid" in out
    assert "Generated 91 segments" in out


class TestSeed42Golden:
    def test_dimensions(self):
        generator = CityGenerator(seed=42)
        generator.generate()
        assert generator.major_columns == 12
        assert generator.major_rows == 13
        assert generator.arterial_step == 4
        assert generator.stats["spurs_discarded"] == 1

    def test_segment_count_and_ids(self, city_42):
        assert len(city_42) == 91
        assert city_42.segment_ids() == list(range(1, 92))

    def test_leading_segments(self, city_42):
        expected = [
            (1, ((-550.0, -600.0), (550.0, -600.0))),
            (2, ((450.0, -500.0), (550.0, -500.0))),
            (3, ((150.0, -500.0), (550.0, -500.0))),
            (4, ((-250.0, -400.0), (50.0, -400.0))),
            (5, ((-350.0, -400.0), (-50.0, -400.0))),
            (6, ((350.0, -300.0), (550.0, -300.0))),
        ]
        assert [(s.id, tuple(map(tuple, s.points))) for s in city_42[:6]] == expected

    def test_trailing_segments(self, city_42):
        expected = [
            (89, ((350.0, -400.0), (350.0, -250.0), (300.0, -250.0))),
            (90, ((50.0, 600.0), (-200.0, 600.0))),
            (91, ((-150.0, -200.0), (50.0, -200.0))),
        ]
        assert [(s.id, tuple(map(tuple, s.points))) for s in city_42[-3:]] == expected
