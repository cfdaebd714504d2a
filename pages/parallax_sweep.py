"""Streamlit page comparing inferred distance precision across true distances."""
from __future__ import annotations

import csv
import io
from typing import Dict

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st

from src.config import InstrumentConfig
from src.parallax import build_parallax_basis, describe_measurability, format_number
from src.sweep import precision_sweep
from src.vector2 import Vector2

HEADERS = ["참 거리 d (pc)", "추정 시차 p̂ (mas)", "추정 거리 d̂ (pc)", "σ_d̂ (pc)", "SNR", "품질"]


def _rows(sweep: Dict[str, np.ndarray]):
    for d, p, d_hat, sigma_d, snr in zip(
        sweep["distance_pc"], sweep["p_hat_mas"], sweep["d_hat_pc"], sweep["sigma_d_hat_pc"], sweep["snr"]
    ):
        quality = describe_measurability(float(snr)) if not np.isnan(snr) else "—"
        yield (
            format_number(float(d), 3),
            format_number(float(p), 4),
            format_number(float(d_hat), 3),
            format_number(float(sigma_d), 3),
            format_number(float(snr), 2),
            quality,
        )


def to_csv_bytes(sweep: Dict[str, np.ndarray]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(HEADERS)
    writer.writerows(_rows(sweep))
    return buffer.getvalue().encode("utf-8")


def to_preview_rows(sweep: Dict[str, np.ndarray], limit: int = 10):
    return [dict(zip(HEADERS, row)) for row in list(_rows(sweep))[:limit]]


st.set_page_config(page_title="시차 측정 정밀도", layout="wide")
st.title("거리에 따른 시차 측정 정밀도")

cfg = InstrumentConfig.load()

with st.sidebar:
    st.header("스윕 설정")
    sigma_mas = st.slider(
        "측정 불확도 σ (mas)",
        min_value=cfg.sigma_mas_min,
        max_value=cfg.sigma_mas_max,
        value=cfg.default_sigma_mas,
        step=0.1,
    )
    phase_sep = st.slider("두 기록 사이의 위상 차이 (deg)", 10.0, 180.0, 180.0, 1.0)
    d_max = st.slider("최대 거리 (pc)", 10.0, cfg.distance_pc_max, 1000.0, 10.0)
    samples = st.slider("샘플 개수", 10, 200, 60, 10)

basis = build_parallax_basis(Vector2(cfg.default_star_dir_x, cfg.default_star_dir_y))
distances = np.geomspace(cfg.distance_pc_min, d_max, samples)
sweep = precision_sweep(
    distances,
    sigma_mas,
    basis,
    phase_a_deg=0.0,
    phase_b_deg=phase_sep,
    min_effective_baseline_au=cfg.min_effective_baseline_au,
    salt=cfg.noise_salt,
)

with st.sidebar:
    st.download_button(
        label="CSV로 저장",
        data=to_csv_bytes(sweep),
        file_name="parallax_sweep.csv",
        mime="text/csv",
    )

col_plot, col_table = st.columns([2, 1])

with col_plot:
    fig, (ax_snr, ax_err) = plt.subplots(2, 1, figsize=(8, 7), sharex=True)
    ax_snr.loglog(sweep["distance_pc"], sweep["snr"], color="tab:blue", label="SNR p̂/σ_p̂")
    ax_snr.axhline(10, color="tab:green", linestyle="--", linewidth=1, label="Excellent (10)")
    ax_snr.axhline(5, color="tab:orange", linestyle="--", linewidth=1, label="Good (5)")
    ax_snr.set_ylabel("SNR")
    ax_snr.legend()
    ax_snr.grid(True, which="both", linestyle=":", linewidth=0.5)

    rel_err = sweep["sigma_d_hat_pc"] / sweep["distance_pc"]
    ax_err.loglog(sweep["distance_pc"], rel_err, color="tab:red", label="σ_d̂ / d")
    ax_err.set_xlabel("True distance d (pc)")
    ax_err.set_ylabel("Relative distance error")
    ax_err.legend()
    ax_err.grid(True, which="both", linestyle=":", linewidth=0.5)
    fig.tight_layout()
    st.pyplot(fig)

with col_table:
    st.subheader("데이터 미리보기")
    st.table(to_preview_rows(sweep))

st.caption("σ_shift = √2·σ, σ_p̂ = σ_shift / B_eff, σ_d̂ = 1000·σ_p̂ / p̂². 위상 차이가 작으면 B_eff가 줄어 정밀도가 떨어집니다.")
