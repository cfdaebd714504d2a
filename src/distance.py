"""Parallax <-> distance conversions.

The parsec is defined by ``d(pc) = 1 / p(arcsec)``. A parallax that is zero
or negative corresponds to a star at infinite distance, so these helpers
return ``math.inf`` instead of raising.
"""
from __future__ import annotations

import math

MAS_PER_ARCSEC = 1000.0
LY_PER_PC = 3.26156


def parallax_arcsec_from_mas(parallax_mas: float) -> float:
    return parallax_mas / MAS_PER_ARCSEC


def distance_pc_from_parallax_arcsec(parallax_arcsec: float) -> float:
    if not (parallax_arcsec > 0):
        return math.inf
    return 1.0 / parallax_arcsec


def distance_pc_from_parallax_mas(parallax_mas: float) -> float:
    return distance_pc_from_parallax_arcsec(parallax_arcsec_from_mas(parallax_mas))


def parallax_arcsec_from_distance_pc(distance_pc: float) -> float:
    if not (distance_pc > 0):
        return math.inf
    return 1.0 / distance_pc


def parallax_mas_from_distance_pc(distance_pc: float) -> float:
    return parallax_arcsec_from_distance_pc(distance_pc) * MAS_PER_ARCSEC


def distance_ly_from_pc(distance_pc: float) -> float:
    return distance_pc * LY_PER_PC


def distance_pc_from_ly(distance_ly: float) -> float:
    return distance_ly / LY_PER_PC
