"""Shared fixtures; rendering tests run on the non-interactive backend."""

from pathlib import Path

import matplotlib

matplotlib.use('Agg')

import pytest

from city_road_network import CityMap, generate_city

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def golden_seed_42_path() -> Path:
    return FIXTURES / "city_seed_42.json"


@pytest.fixture
def city_42() -> CityMap:
    return generate_city(42)


@pytest.fixture
def small_map() -> CityMap:
    city_map = CityMap()
    city_map.append_segment(7, [(0.0, 0.0), (10.0, 0.0)])
    city_map.append_segment(8, [(10.0, 0.0), (10.0, 5.0), (4.5, 5.0)])
    return city_map
