"""Deterministic measurement noise for simulated detector readings.

The noise drawn for a capture is a pure function of a canonical key built from
the capture configuration. Moving a slider away and back therefore shows the
same simulated reading again instead of a fresh random draw.
"""
from __future__ import annotations

import math
from typing import Iterator

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
MULBERRY_INCREMENT = 0x6D2B79F5
UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 4294967296.0

DEFAULT_SALT = "parallax-distance"
MIN_UNIFORM = 1e-12


def fnv1a_32(text: str) -> int:
    """Return the 32-bit FNV-1a hash of the UTF-8 encoding of ``text``."""

    h = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & UINT32_MASK
    return h


def mulberry32(seed: int) -> Iterator[float]:
    """Yield uniform floats in ``[0, 1)`` from a Mulberry32 generator."""

    state = seed & UINT32_MASK
    while True:
        state = (state + MULBERRY_INCREMENT) & UINT32_MASK
        t = state
        t = ((t ^ (t >> 15)) * (t | 1)) & UINT32_MASK
        t ^= (t + ((t ^ (t >> 7)) * (t | 61))) & UINT32_MASK
        yield ((t ^ (t >> 14)) & UINT32_MASK) / UINT32_RANGE


def noise_key(
    epoch_label: str,
    phase_deg: float,
    distance_pc: float,
    sigma_mas: float,
    salt: str = DEFAULT_SALT,
) -> str:
    """Build the canonical key hashed by :func:`deterministic_axis_noise_mas`.

    Phase is rounded to 0.1 deg so floating-point jitter in the orbit phase
    maps onto the same draw.
    """

    phase = round(phase_deg, 1) + 0.0  # folds -0.0 into 0.0
    return f"{salt}|{epoch_label}|{phase:.1f}|{distance_pc:.6f}|{sigma_mas:.6f}"


def deterministic_axis_noise_mas(
    epoch_label: str,
    phase_deg: float,
    distance_pc: float,
    sigma_mas: float,
    salt: str = DEFAULT_SALT,
) -> float:
    """Return a reproducible Gaussian noise sample with standard deviation ``sigma_mas``.

    Parameters
    ----------
    epoch_label : str
        Capture label, usually ``"A"`` or ``"B"``.
    phase_deg : float
        Orbit phase of the capture in degrees.
    distance_pc : float
        True distance of the target star in parsecs.
    sigma_mas : float
        Per-epoch measurement uncertainty in milliarcseconds.
    salt : str
        Namespace prefix for the key.

    Returns
    -------
    float
        Noise along the measurement axis in mas. Exactly ``0.0`` when
        ``sigma_mas`` is not positive.

    Notes
    -----
    The key is hashed with FNV-1a, the hash seeds Mulberry32, and two uniforms
    go through the cosine branch of the Box-Muller transform.
    """

    if not (sigma_mas > 0):
        return 0.0

    key = noise_key(epoch_label, phase_deg, distance_pc, sigma_mas, salt)
    uniforms = mulberry32(fnv1a_32(key))
    u1 = max(next(uniforms), MIN_UNIFORM)
    u2 = next(uniforms)

    z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return z * sigma_mas
