"""Instrument configuration with simple JSON overrides."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class InstrumentConfig:
    # Control ranges
    distance_pc_min: float = 1.0
    distance_pc_max: float = 5000.0
    sigma_mas_min: float = 0.1
    sigma_mas_max: float = 20.0
    exaggeration_min: float = 1.0
    exaggeration_max: float = 40.0

    # Defaults shown on first load
    default_distance_pc: float = 10.0
    default_sigma_mas: float = 1.0
    default_exaggeration: float = 12.0
    default_star_dir_x: float = 0.0
    default_star_dir_y: float = 1.0

    # Inference
    min_effective_baseline_au: float = 0.2
    noise_salt: str = "parallax-distance"

    # Detector drawing
    detector_px_per_mas: float = 0.012
    error_radius_min_px: float = 3.0
    error_radius_max_px: float = 44.0

    @staticmethod
    def default_path() -> Path:
        return Path.home() / ".parallax_distance.json"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "InstrumentConfig":
        cfg = cls()
        cfg_path = path or cls.default_path()
        if not cfg_path.exists():
            return cfg

        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read config file: %s", cfg_path)
            return cfg
        if not isinstance(data, dict):
            logger.warning("Ignoring config file without a JSON object: %s", cfg_path)
            return cfg

        for f in fields(cfg):
            if f.name not in data:
                continue
            raw = data[f.name]
            try:
                if f.type in (float, "float"):
                    val = float(raw)
                    if not math.isfinite(val):
                        raise ValueError(f"non-finite value {raw!r}")
                else:
                    val = str(raw)
                setattr(cfg, f.name, val)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid config value for %s: %r", f.name, raw)

        unknown = sorted(set(data) - {f.name for f in fields(cfg)})
        if unknown:
            logger.warning("Unknown config keys ignored: %s", ", ".join(unknown))

        cfg.normalize()
        return cfg

    def save(self, path: Optional[Path] = None) -> None:
        cfg_path = path or self.default_path()
        cfg_path.write_text(json.dumps(asdict(self), indent=2, sort_keys=True), encoding="utf-8")

    def normalize(self) -> None:
        if self.distance_pc_min > self.distance_pc_max:
            self.distance_pc_min, self.distance_pc_max = self.distance_pc_max, self.distance_pc_min
        if self.sigma_mas_min > self.sigma_mas_max:
            self.sigma_mas_min, self.sigma_mas_max = self.sigma_mas_max, self.sigma_mas_min
        if self.exaggeration_min > self.exaggeration_max:
            self.exaggeration_min, self.exaggeration_max = self.exaggeration_max, self.exaggeration_min
        if self.error_radius_min_px > self.error_radius_max_px:
            self.error_radius_min_px, self.error_radius_max_px = (
                self.error_radius_max_px,
                self.error_radius_min_px,
            )
        self.default_distance_pc = min(self.distance_pc_max, max(self.distance_pc_min, self.default_distance_pc))
        self.default_sigma_mas = min(self.sigma_mas_max, max(self.sigma_mas_min, self.default_sigma_mas))
        self.default_exaggeration = min(
            self.exaggeration_max, max(self.exaggeration_min, self.default_exaggeration)
        )
