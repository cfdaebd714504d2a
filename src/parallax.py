"""Simulated two-epoch parallax measurement and distance inference.

Everything here is a pure function of its arguments: the caller owns the
captured epochs and passes the measurement basis explicitly.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Optional, Tuple

from src.distance import parallax_mas_from_distance_pc
from src.noise import DEFAULT_SALT, deterministic_axis_noise_mas
from src.vector2 import Vector2, add, dot, length, normalize, perp, scale, sub

MISSING_CAPTURE = "missing_capture"
BASELINE_TOO_SMALL = "baseline_too_small"
ZERO_SHIFT = "zero_shift"
OK = "ok"

MIN_EFFECTIVE_BASELINE_AU = 0.2
MAS_PER_PC = 1000.0  # d(pc) = 1000 / p(mas)

EXCELLENT = "Excellent"
GOOD = "Good"
POOR = "Poor"
NOT_MEASURABLE = "Not measurable"

MISSING = "—"


# =====================================================
# Helpers
# =====================================================

def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def format_number(value: Optional[float], digits: int = 2) -> str:
    """Format ``value`` with fixed decimals, or an em dash when it is missing or non-finite."""
    if value is None or not math.isfinite(value):
        return MISSING
    return f"{value:.{digits}f}"


def normalize_phase_deg(phase_deg: float) -> float:
    phase = phase_deg % 360.0
    # a tiny negative phase rounds up to exactly 360.0
    return 0.0 if phase >= 360.0 else phase


def opposite_phase_deg(phase_deg: float) -> float:
    return normalize_phase_deg(phase_deg + 180.0)


def phase_separation_deg(phase_a_deg: float, phase_b_deg: float) -> float:
    """Smallest angle between two orbit phases, in ``[0, 180]``."""
    diff = abs(normalize_phase_deg(phase_a_deg) - normalize_phase_deg(phase_b_deg))
    return min(diff, 360.0 - diff)


def earth_position_au(phase_deg: float) -> Vector2:
    """Earth position on a circular 1 AU orbit."""
    phase_rad = math.radians(normalize_phase_deg(phase_deg))
    return Vector2(math.cos(phase_rad), math.sin(phase_rad))


# =====================================================
# Measurement basis
# =====================================================

@dataclass(frozen=True)
class Basis2D:
    star_dir_hat: Vector2
    axis_hat: Vector2  # direction of every detector shift and noise draw


def build_parallax_basis(star_dir_hint: Vector2 = Vector2(0.0, 1.0)) -> Basis2D:
    """Return the orthonormal (star direction, measurement axis) pair for ``star_dir_hint``."""
    star_dir_hat = normalize(star_dir_hint)
    axis_hat = normalize(perp(star_dir_hat))
    return Basis2D(star_dir_hat=star_dir_hat, axis_hat=axis_hat)


# =====================================================
# Measurement simulator
# =====================================================

def detector_true_offset_mas_from_position(
    parallax_mas: float, earth_pos_au: Vector2, axis_hat: Vector2
) -> Vector2:
    """Small-angle parallax: Earth's position projected on the axis, scaled by ``p``."""
    p_mas = max(0.0, parallax_mas)
    return scale(axis_hat, p_mas * dot(earth_pos_au, axis_hat))


def detector_true_offset_mas_from_phase(
    parallax_mas: float, phase_deg: float, axis_hat: Vector2
) -> Vector2:
    return detector_true_offset_mas_from_position(parallax_mas, earth_position_au(phase_deg), axis_hat)


def apply_axis_noise_to_offset(true_offset_mas: Vector2, axis_hat: Vector2, noise_mas: float) -> Vector2:
    return add(true_offset_mas, scale(axis_hat, noise_mas))


def offset_px(offset_mas: float, exaggeration: float, px_per_mas: float) -> float:
    """Convert an angular offset to screen pixels. Exaggeration is visual only."""
    return offset_mas * max(exaggeration, 0.0) * max(px_per_mas, 0.0)


def error_radius_px(
    sigma_mas: float,
    exaggeration: float,
    px_per_mas: float,
    min_radius_px: float = 3.0,
    max_radius_px: float = 44.0,
) -> float:
    """Radius of the drawn uncertainty circle, clamped so it stays legible."""
    raw = abs(offset_px(sigma_mas, exaggeration, px_per_mas))
    return clamp(raw, min_radius_px, max_radius_px)


@dataclass(frozen=True)
class EpochCapture:
    earth_pos_au: Vector2
    measured_offset_mas: Vector2
    phase_deg: float
    true_offset_mas: Vector2
    epoch_label: str = "A"


def make_capture(
    epoch_label: str,
    phase_deg: float,
    distance_pc: float,
    sigma_mas: float,
    axis_hat: Vector2,
    salt: str = DEFAULT_SALT,
) -> EpochCapture:
    """Freeze the instrument state at ``phase_deg`` into a simulated detector reading."""

    phase = normalize_phase_deg(phase_deg)
    earth_pos = earth_position_au(phase)
    true_offset = detector_true_offset_mas_from_position(
        parallax_mas_from_distance_pc(distance_pc), earth_pos, axis_hat
    )
    noise_mas = deterministic_axis_noise_mas(epoch_label, phase, distance_pc, sigma_mas, salt=salt)
    return EpochCapture(
        earth_pos_au=earth_pos,
        measured_offset_mas=apply_axis_noise_to_offset(true_offset, axis_hat, noise_mas),
        phase_deg=phase,
        true_offset_mas=true_offset,
        epoch_label=epoch_label,
    )


def swap_captures(
    capture_a: Optional[EpochCapture], capture_b: Optional[EpochCapture]
) -> Tuple[Optional[EpochCapture], Optional[EpochCapture]]:
    """Exchange the two captures. Readings travel with their capture, only labels change."""
    if capture_a is None or capture_b is None:
        return capture_a, capture_b
    return replace(capture_b, epoch_label="A"), replace(capture_a, epoch_label="B")


# =====================================================
# Quality classification
# =====================================================

def signal_to_noise(parallax_mas: float, sigma_mas: float) -> float:
    if not (sigma_mas > 0):
        return math.inf
    return parallax_mas / sigma_mas


def describe_measurability(snr: float) -> str:
    if snr == math.inf:
        return EXCELLENT
    if not math.isfinite(snr) or snr <= 0:
        return NOT_MEASURABLE
    if snr >= 10:
        return EXCELLENT
    if snr >= 5:
        return GOOD
    return POOR


# =====================================================
# Capture inference
# =====================================================

@dataclass(frozen=True)
class CaptureInference:
    """Outcome of inverting two epoch captures into parallax and distance.

    The baseline and shift fields are always populated so a partial readout
    can be shown. The estimate fields are ``None`` unless ``reason == "ok"``.
    """

    computable: bool
    reason: str
    baseline_vec_au: Vector2
    baseline_chord_au: float
    baseline_eff_au: float
    phase_sep_deg: float
    delta_theta_signed_mas: float
    delta_theta_mas: float
    p_hat_mas: Optional[float] = None
    d_hat_pc: Optional[float] = None
    equivalent_six_month_shift_mas: Optional[float] = None
    sigma_shift_mas: Optional[float] = None
    sigma_p_hat_mas: Optional[float] = None
    sigma_d_hat_pc: Optional[float] = None
    snr_p_hat: Optional[float] = None
    quality: Optional[str] = None


def compute_capture_inference(
    earth_pos_au_a: Optional[Vector2],
    earth_pos_au_b: Optional[Vector2],
    measured_offset_mas_a: Optional[Vector2],
    measured_offset_mas_b: Optional[Vector2],
    phase_deg_a: Optional[float],
    phase_deg_b: Optional[float],
    axis_hat: Vector2,
    sigma_epoch_mas: float,
    min_effective_baseline_au: float = MIN_EFFECTIVE_BASELINE_AU,
) -> CaptureInference:
    """Estimate parallax, distance and their uncertainties from two epochs.

    Parameters
    ----------
    earth_pos_au_a, earth_pos_au_b : Vector2 or None
        Observer positions at each epoch in AU.
    measured_offset_mas_a, measured_offset_mas_b : Vector2 or None
        Simulated (noisy) detector readings in mas.
    phase_deg_a, phase_deg_b : float or None
        Orbit phases of the epochs in degrees.
    axis_hat : Vector2
        Unit measurement axis.
    sigma_epoch_mas : float
        Per-epoch noise standard deviation in mas.
    min_effective_baseline_au : float
        Projected baselines shorter than this are rejected as ill-conditioned.

    Returns
    -------
    CaptureInference
        ``reason`` is one of ``missing_capture``, ``baseline_too_small``,
        ``zero_shift`` or ``ok``.

    Notes
    -----
    Only the baseline component along ``axis_hat`` contributes to the
    measured shift, so ``p_hat = |delta_theta| / B_eff``. Uncertainties use
    independent equal-sigma epochs (``sigma_shift = sqrt(2) * sigma``) and the
    first-order propagation ``sigma_d = 1000 * sigma_p / p^2``.
    """

    if (
        earth_pos_au_a is None
        or earth_pos_au_b is None
        or measured_offset_mas_a is None
        or measured_offset_mas_b is None
        or phase_deg_a is None
        or phase_deg_b is None
        or not math.isfinite(phase_deg_a)
        or not math.isfinite(phase_deg_b)
    ):
        return CaptureInference(
            computable=False,
            reason=MISSING_CAPTURE,
            baseline_vec_au=Vector2(0.0, 0.0),
            baseline_chord_au=0.0,
            baseline_eff_au=0.0,
            phase_sep_deg=0.0,
            delta_theta_signed_mas=0.0,
            delta_theta_mas=0.0,
        )

    baseline_vec = sub(earth_pos_au_b, earth_pos_au_a)
    baseline_chord = length(baseline_vec)
    baseline_eff = abs(dot(baseline_vec, axis_hat))
    phase_sep = phase_separation_deg(phase_deg_a, phase_deg_b)

    delta_signed = dot(sub(measured_offset_mas_b, measured_offset_mas_a), axis_hat)
    delta = abs(delta_signed)

    diagnostics = dict(
        baseline_vec_au=baseline_vec,
        baseline_chord_au=baseline_chord,
        baseline_eff_au=baseline_eff,
        phase_sep_deg=phase_sep,
        delta_theta_signed_mas=delta_signed,
        delta_theta_mas=delta,
    )

    if not (baseline_eff > 0) or not math.isfinite(baseline_eff) or baseline_eff < min_effective_baseline_au:
        return CaptureInference(computable=False, reason=BASELINE_TOO_SMALL, **diagnostics)

    p_hat = delta / baseline_eff
    # p^2 underflowing to zero would make the propagated distance error undefined
    if not (p_hat * p_hat > 0) or not math.isfinite(p_hat):
        return CaptureInference(computable=False, reason=ZERO_SHIFT, **diagnostics)

    # only a non-positive sigma means a noiseless instrument; NaN and inf flow into the guard below
    sigma_epoch = 0.0 if sigma_epoch_mas <= 0 else sigma_epoch_mas
    sigma_shift = math.sqrt(2.0) * sigma_epoch
    sigma_p_hat = sigma_shift / baseline_eff
    d_hat = MAS_PER_PC / p_hat
    sigma_d_hat = MAS_PER_PC * sigma_p_hat / (p_hat * p_hat)
    if not math.isfinite(d_hat) or not math.isfinite(sigma_d_hat):
        return CaptureInference(computable=False, reason=ZERO_SHIFT, **diagnostics)

    snr = signal_to_noise(p_hat, sigma_p_hat)

    return CaptureInference(
        computable=True,
        reason=OK,
        p_hat_mas=p_hat,
        d_hat_pc=d_hat,
        equivalent_six_month_shift_mas=2.0 * p_hat,
        sigma_shift_mas=sigma_shift,
        sigma_p_hat_mas=sigma_p_hat,
        sigma_d_hat_pc=sigma_d_hat,
        snr_p_hat=snr,
        quality=describe_measurability(snr),
        **diagnostics,
    )


def infer_from_captures(
    capture_a: Optional[EpochCapture],
    capture_b: Optional[EpochCapture],
    axis_hat: Vector2,
    sigma_epoch_mas: float,
    min_effective_baseline_au: float = MIN_EFFECTIVE_BASELINE_AU,
) -> CaptureInference:
    return compute_capture_inference(
        earth_pos_au_a=capture_a.earth_pos_au if capture_a else None,
        earth_pos_au_b=capture_b.earth_pos_au if capture_b else None,
        measured_offset_mas_a=capture_a.measured_offset_mas if capture_a else None,
        measured_offset_mas_b=capture_b.measured_offset_mas if capture_b else None,
        phase_deg_a=capture_a.phase_deg if capture_a else None,
        phase_deg_b=capture_b.phase_deg if capture_b else None,
        axis_hat=axis_hat,
        sigma_epoch_mas=sigma_epoch_mas,
        min_effective_baseline_au=min_effective_baseline_au,
    )
