import numpy as np
import pytest

from src.parallax import build_parallax_basis
from src.sweep import precision_sweep


def test_sweep_recovers_distances_without_noise():
    basis = build_parallax_basis()
    distances = np.array([1.0, 10.0, 100.0, 1000.0])

    sweep = precision_sweep(distances, 0.0, basis)

    np.testing.assert_allclose(sweep["d_hat_pc"], distances, rtol=1e-9)
    np.testing.assert_allclose(sweep["p_hat_mas"] * sweep["d_hat_pc"], 1000.0, rtol=1e-9)
    assert np.all(np.isinf(sweep["snr"]))


def test_snr_falls_with_distance():
    basis = build_parallax_basis()
    distances = np.geomspace(1.0, 500.0, 12)

    sweep = precision_sweep(distances, 1.0, basis)

    # sigma_p_hat is the same for every distance, so SNR tracks p_hat
    assert sweep["snr"][0] > sweep["snr"][-1]
    assert sweep["snr"][0] == pytest.approx(sweep["p_hat_mas"][0] / (np.sqrt(2) / 2))


def test_short_baseline_entries_are_nan():
    basis = build_parallax_basis()
    sweep = precision_sweep(np.array([10.0, 20.0]), 1.0, basis, phase_a_deg=0.0, phase_b_deg=5.0)

    assert np.all(np.isnan(sweep["d_hat_pc"]))
