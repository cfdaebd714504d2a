"""Nearby stars used as distance presets.

Parallax values are representative teaching values, not a single catalog
release.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from src.distance import distance_pc_from_parallax_mas


@dataclass(frozen=True)
class NearbyStar:
    name: str
    parallax_mas: float

    @property
    def distance_pc(self) -> float:
        return distance_pc_from_parallax_mas(self.parallax_mas)


NEARBY_STARS: List[NearbyStar] = [
    NearbyStar("Proxima Centauri", 768.5),
    NearbyStar("Alpha Centauri A/B", 747.0),
    NearbyStar("Barnard's Star", 548.3),
    NearbyStar("Wolf 359", 419.1),
    NearbyStar("Sirius", 379.2),
    NearbyStar("Luyten 726-8 (UV Ceti)", 373.7),
    NearbyStar("Ross 154", 336.9),
    NearbyStar("Epsilon Eridani", 310.7),
    NearbyStar("Procyon", 284.6),
    NearbyStar("Vega", 130.2),
]


def find_star(name: str) -> Optional[NearbyStar]:
    """Case-insensitive lookup of a preset by name."""
    wanted = name.strip().lower()
    for star in NEARBY_STARS:
        if star.name.lower() == wanted:
            return star
    return None


def preset_label(star: NearbyStar) -> str:
    return f"{star.name} ({star.distance_pc:.2f} pc)"
