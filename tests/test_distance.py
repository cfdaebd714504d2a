import math

import pytest

from src.distance import (
    distance_ly_from_pc,
    distance_pc_from_ly,
    distance_pc_from_parallax_arcsec,
    distance_pc_from_parallax_mas,
    parallax_arcsec_from_distance_pc,
    parallax_arcsec_from_mas,
    parallax_mas_from_distance_pc,
)
from src.stars import NEARBY_STARS, find_star, preset_label


def test_parsec_definition():
    assert distance_pc_from_parallax_arcsec(1) == pytest.approx(1)
    assert distance_pc_from_parallax_arcsec(0.1) == pytest.approx(10)
    assert distance_pc_from_parallax_mas(100) == pytest.approx(10)
    assert distance_pc_from_parallax_mas(10) == pytest.approx(100)
    assert parallax_arcsec_from_mas(250) == pytest.approx(0.25)


def test_non_positive_inputs_map_to_infinity():
    assert distance_pc_from_parallax_arcsec(0) == math.inf
    assert distance_pc_from_parallax_mas(-50) == math.inf
    assert parallax_arcsec_from_distance_pc(0) == math.inf
    assert parallax_mas_from_distance_pc(-1) == math.inf


def test_round_trips():
    assert parallax_mas_from_distance_pc(distance_pc_from_parallax_mas(42.5)) == pytest.approx(42.5)
    assert distance_pc_from_ly(distance_ly_from_pc(8.7)) == pytest.approx(8.7)
    assert distance_ly_from_pc(1) == pytest.approx(3.26156)


def test_proxima_centauri_preset():
    star = find_star("proxima centauri")

    assert star is not None
    assert star.distance_pc == pytest.approx(1.301, abs=1e-3)
    assert preset_label(star) == "Proxima Centauri (1.30 pc)"
    assert find_star("Betelgeuse") is None


def test_presets_are_sorted_nearest_first():
    parallaxes = [star.parallax_mas for star in NEARBY_STARS]
    assert parallaxes == sorted(parallaxes, reverse=True)
    assert len({star.name for star in NEARBY_STARS}) == len(NEARBY_STARS)
