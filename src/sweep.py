"""Precision of the two-epoch measurement across a range of distances."""
from __future__ import annotations

from typing import Dict

import numpy as np

from src.noise import DEFAULT_SALT
from src.parallax import MIN_EFFECTIVE_BASELINE_AU, Basis2D, infer_from_captures, make_capture


def precision_sweep(
    distances_pc: np.ndarray,
    sigma_mas: float,
    basis: Basis2D,
    phase_a_deg: float = 0.0,
    phase_b_deg: float = 180.0,
    min_effective_baseline_au: float = MIN_EFFECTIVE_BASELINE_AU,
    salt: str = DEFAULT_SALT,
) -> Dict[str, np.ndarray]:
    """Capture epochs A and B at every distance and collect the inferred values.

    Parameters
    ----------
    distances_pc : np.ndarray
        True distances in parsecs.
    sigma_mas : float
        Per-epoch uncertainty in mas.
    basis : Basis2D
        Measurement basis shared by all captures.
    phase_a_deg, phase_b_deg : float
        Orbit phases of the two captures.

    Returns
    -------
    Dict[str, np.ndarray]
        Arrays ``distance_pc``, ``p_hat_mas``, ``d_hat_pc``, ``sigma_d_hat_pc``
        and ``snr`` of the same length as ``distances_pc``. Entries for
        non-computable captures are ``nan``.
    """

    distances = np.asarray(distances_pc, dtype=float)
    p_hat = np.full(distances.shape, np.nan)
    d_hat = np.full(distances.shape, np.nan)
    sigma_d = np.full(distances.shape, np.nan)
    snr = np.full(distances.shape, np.nan)

    for i, distance in enumerate(distances):
        capture_a = make_capture("A", phase_a_deg, float(distance), sigma_mas, basis.axis_hat, salt=salt)
        capture_b = make_capture("B", phase_b_deg, float(distance), sigma_mas, basis.axis_hat, salt=salt)
        result = infer_from_captures(
            capture_a,
            capture_b,
            basis.axis_hat,
            sigma_mas,
            min_effective_baseline_au=min_effective_baseline_au,
        )
        if not result.computable:
            continue
        p_hat[i] = result.p_hat_mas
        d_hat[i] = result.d_hat_pc
        sigma_d[i] = result.sigma_d_hat_pc
        snr[i] = result.snr_p_hat

    return {
        "distance_pc": distances,
        "p_hat_mas": p_hat,
        "d_hat_pc": d_hat,
        "sigma_d_hat_pc": sigma_d,
        "snr": snr,
    }
