"""Command line helper to simulate a two-epoch parallax measurement."""
from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import NamedTuple, Optional

import matplotlib

# Use a non-interactive backend so the script works in headless environments.
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from src.config import InstrumentConfig
from src.parallax import (
    Basis2D,
    CaptureInference,
    EpochCapture,
    build_parallax_basis,
    clamp,
    format_number,
    infer_from_captures,
    make_capture,
)
from src.report import build_export_payload, payload_to_csv_bytes
from src.stars import NEARBY_STARS, find_star
from src.vector2 import Vector2

logger = logging.getLogger(__name__)


class MeasurementRun(NamedTuple):
    basis: Basis2D
    capture_a: EpochCapture
    capture_b: EpochCapture
    inference: CaptureInference


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Two-epoch parallax distance simulator")
    parser.add_argument("--distance", type=float, default=None, help="True distance in pc")
    parser.add_argument(
        "--preset",
        default=None,
        help="Nearby star preset name (overrides --distance), e.g. 'Sirius'",
    )
    parser.add_argument("--phase-a", type=float, default=0.0, help="Orbit phase of capture A in degrees")
    parser.add_argument("--phase-b", type=float, default=180.0, help="Orbit phase of capture B in degrees")
    parser.add_argument("--sigma", type=float, default=None, help="Per-epoch uncertainty in mas")
    parser.add_argument(
        "--star-dir",
        type=float,
        nargs=2,
        default=None,
        metavar=("X", "Y"),
        help="Direction hint toward the star in the orbit plane",
    )
    parser.add_argument(
        "--min-baseline",
        type=float,
        default=None,
        help="Minimum effective baseline in AU accepted for inference",
    )
    parser.add_argument("--config", type=Path, default=None, help="Optional JSON config overrides")
    parser.add_argument("--output", type=Path, default=Path("parallax_report.csv"), help="CSV file for output")
    parser.add_argument(
        "--figure",
        type=Path,
        default=None,
        help="Optional path for the detector plot (PNG). Defaults to output stem with .png",
    )
    parser.add_argument("--list-presets", action="store_true", help="Print the star presets and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.preset is not None and find_star(args.preset) is None:
        names = ", ".join(star.name for star in NEARBY_STARS)
        parser.error(f"unknown preset {args.preset!r}; choose one of: {names}")
    return args


def run_measurement(
    *,
    distance_pc: float,
    phase_a_deg: float,
    phase_b_deg: float,
    sigma_mas: float,
    star_dir_hint: Vector2 = Vector2(0.0, 1.0),
    min_effective_baseline_au: float = 0.2,
    salt: str = "parallax-distance",
) -> MeasurementRun:
    """Capture epochs A and B and infer parallax and distance from them."""

    basis = build_parallax_basis(star_dir_hint)
    capture_a = make_capture("A", phase_a_deg, distance_pc, sigma_mas, basis.axis_hat, salt=salt)
    capture_b = make_capture("B", phase_b_deg, distance_pc, sigma_mas, basis.axis_hat, salt=salt)
    inference = infer_from_captures(
        capture_a,
        capture_b,
        basis.axis_hat,
        sigma_mas,
        min_effective_baseline_au=min_effective_baseline_au,
    )
    logger.debug("Inference for d=%.3f pc: %s", distance_pc, inference.reason)
    return MeasurementRun(basis, capture_a, capture_b, inference)


def plot_measurement(path: Path, run: MeasurementRun, sigma_mas: float) -> None:
    """Save orbit geometry and detector readings side by side."""

    fig, (ax_orbit, ax_det) = plt.subplots(1, 2, figsize=(11, 5))

    theta = [2 * math.pi * i / 360 for i in range(361)]
    ax_orbit.plot([math.cos(t) for t in theta], [math.sin(t) for t in theta], color="0.6", linewidth=1)
    ax_orbit.scatter([0], [0], color="gold", s=120, zorder=3, label="Sun")
    for capture, color in ((run.capture_a, "tab:blue"), (run.capture_b, "tab:orange")):
        ax_orbit.scatter(
            [capture.earth_pos_au.x],
            [capture.earth_pos_au.y],
            color=color,
            zorder=4,
            label=f"Earth {capture.epoch_label} ({capture.phase_deg:.1f} deg)",
        )
    axis = run.basis.axis_hat
    ax_orbit.plot([-1.3 * axis.x, 1.3 * axis.x], [-1.3 * axis.y, 1.3 * axis.y], "k--", linewidth=1, label="Measurement axis")
    star = run.basis.star_dir_hat
    ax_orbit.annotate("", xy=(1.4 * star.x, 1.4 * star.y), xytext=(0, 0), arrowprops=dict(arrowstyle="->"))
    ax_orbit.set_aspect("equal")
    ax_orbit.set_xlim(-1.6, 1.6)
    ax_orbit.set_ylim(-1.6, 1.6)
    ax_orbit.set_xlabel("x (AU)")
    ax_orbit.set_ylabel("y (AU)")
    ax_orbit.set_title("Orbit geometry")
    ax_orbit.legend(loc="lower left", fontsize=8)
    ax_orbit.grid(True, alpha=0.3)

    for capture, color in ((run.capture_a, "tab:blue"), (run.capture_b, "tab:orange")):
        true_s = capture.true_offset_mas.x * axis.x + capture.true_offset_mas.y * axis.y
        meas_s = capture.measured_offset_mas.x * axis.x + capture.measured_offset_mas.y * axis.y
        ax_det.scatter([true_s], [0], marker="o", facecolors="none", edgecolors=color, s=80)
        ax_det.errorbar([meas_s], [0], xerr=[sigma_mas], fmt="x", color=color, capsize=4, label=f"Measured {capture.epoch_label}")
    ax_det.axhline(0, color="0.6", linewidth=1)
    ax_det.set_yticks([])
    ax_det.set_xlabel("Offset along axis (mas)")
    ax_det.set_title("Detector readings (open circles: true)")
    ax_det.legend(fontsize=8)
    ax_det.grid(True, axis="x", alpha=0.3)

    fig.tight_layout()
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path)
    plt.close(fig)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for star in NEARBY_STARS:
            print(f"{star.name}: p = {star.parallax_mas:.1f} mas, d = {star.distance_pc:.3f} pc")
        return

    cfg = InstrumentConfig.load(args.config) if args.config else InstrumentConfig()

    preset = find_star(args.preset) if args.preset else None
    if preset is not None:
        distance = preset.distance_pc
    else:
        distance = args.distance if args.distance is not None else cfg.default_distance_pc
    distance = clamp(distance, cfg.distance_pc_min, cfg.distance_pc_max)
    sigma = args.sigma if args.sigma is not None else cfg.default_sigma_mas
    sigma = clamp(sigma, 0.0, cfg.sigma_mas_max)
    star_dir = Vector2(*args.star_dir) if args.star_dir else Vector2(cfg.default_star_dir_x, cfg.default_star_dir_y)
    min_baseline = args.min_baseline if args.min_baseline is not None else cfg.min_effective_baseline_au

    run = run_measurement(
        distance_pc=distance,
        phase_a_deg=args.phase_a,
        phase_b_deg=args.phase_b,
        sigma_mas=sigma,
        star_dir_hint=star_dir,
        min_effective_baseline_au=min_baseline,
        salt=cfg.noise_salt,
    )
    inference = run.inference

    payload = build_export_payload(
        distance_pc=distance,
        sigma_mas=sigma,
        exaggeration=1.0,
        now_phase_deg=run.capture_b.phase_deg,
        capture_a=run.capture_a,
        capture_b=run.capture_b,
        inference=inference,
        preset=preset.name if preset else "Custom distance",
    )
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(payload_to_csv_bytes(payload))
    logger.info("Saved report to %s", args.output.resolve())

    print(f"True distance: {distance:.3f} pc (p = {1000.0 / distance:.3f} mas)")
    print(
        f"B_eff = {format_number(inference.baseline_eff_au, 3)} AU, "
        f"deltaTheta = {format_number(inference.delta_theta_mas, 3)} mas"
    )
    if inference.computable:
        print(
            f"p_hat = {format_number(inference.p_hat_mas, 3)} ± {format_number(inference.sigma_p_hat_mas, 3)} mas, "
            f"d_hat = {format_number(inference.d_hat_pc, 3)} ± {format_number(inference.sigma_d_hat_pc, 3)} pc"
        )
        print(f"SNR = {format_number(inference.snr_p_hat, 2)} ({inference.quality})")
    else:
        print(f"Not computable: {inference.reason}")

    fig_path = args.figure if args.figure is not None else args.output.with_suffix(".png")
    plot_measurement(fig_path, run, sigma)
    logger.info("Saved plot to %s", fig_path.resolve())


if __name__ == "__main__":
    main()
