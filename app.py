"""Streamlit instrument for measuring stellar distance from two parallax captures."""
from __future__ import annotations

import math

import plotly.graph_objects as go
import streamlit as st

from src.config import InstrumentConfig
from src.distance import distance_ly_from_pc, parallax_mas_from_distance_pc
from src.parallax import (
    BASELINE_TOO_SMALL,
    MISSING_CAPTURE,
    ZERO_SHIFT,
    CaptureInference,
    build_parallax_basis,
    detector_true_offset_mas_from_phase,
    earth_position_au,
    error_radius_px,
    format_number,
    infer_from_captures,
    make_capture,
    offset_px,
    swap_captures,
)
from src.report import build_export_payload, payload_rows, payload_to_csv_bytes
from src.stars import NEARBY_STARS, find_star, preset_label
from src.vector2 import Vector2, dot

CUSTOM_PRESET = "직접 입력"

REASON_TEXT = {
    MISSING_CAPTURE: "A와 B 두 시점을 모두 기록해야 시차를 추정할 수 있습니다.",
    BASELINE_TOO_SMALL: "유효 기선 B_eff가 너무 짧습니다. 위상 차이를 더 크게 잡아 보세요.",
    ZERO_SHIFT: "두 시점 사이의 측정 이동량이 0이라 시차를 추정할 수 없습니다.",
}


def init_state(cfg: InstrumentConfig) -> None:
    st.session_state.setdefault("capture_a", None)
    st.session_state.setdefault("capture_b", None)
    st.session_state.setdefault("distance_pc", cfg.default_distance_pc)
    st.session_state.setdefault("captured_distance_pc", None)


def clear_captures() -> None:
    st.session_state.capture_a = None
    st.session_state.capture_b = None
    st.session_state.captured_distance_pc = None


def orbit_figure(phase_deg: float, axis_hat: Vector2, star_dir_hat: Vector2, inference: CaptureInference) -> go.Figure:
    fig = go.Figure()
    theta = [2 * math.pi * i / 360 for i in range(361)]
    fig.add_trace(
        go.Scatter(
            x=[math.cos(t) for t in theta],
            y=[math.sin(t) for t in theta],
            mode="lines",
            line=dict(color="lightgray", width=1),
            name="지구 궤도 (1 AU)",
            hoverinfo="skip",
        )
    )
    fig.add_trace(
        go.Scatter(x=[0], y=[0], mode="markers", marker=dict(color="gold", size=18), name="태양")
    )
    fig.add_trace(
        go.Scatter(
            x=[-1.3 * axis_hat.x, 1.3 * axis_hat.x],
            y=[-1.3 * axis_hat.y, 1.3 * axis_hat.y],
            mode="lines",
            line=dict(color="black", dash="dash", width=1),
            name="측정 축",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=[0, 1.45 * star_dir_hat.x],
            y=[0, 1.45 * star_dir_hat.y],
            mode="lines+markers",
            marker=dict(symbol="star", size=[1, 16], color="slateblue"),
            line=dict(color="slateblue", width=1),
            name="별 방향",
        )
    )

    now = earth_position_au(phase_deg)
    fig.add_trace(
        go.Scatter(
            x=[now.x],
            y=[now.y],
            mode="markers",
            marker=dict(color="royalblue", size=12),
            name="현재 지구",
            hovertemplate="위상 %{text}°<extra></extra>",
            text=[format_number(phase_deg, 1)],
        )
    )
    for key, color in (("capture_a", "indianred"), ("capture_b", "seagreen")):
        capture = st.session_state[key]
        if capture is None:
            continue
        fig.add_trace(
            go.Scatter(
                x=[capture.earth_pos_au.x],
                y=[capture.earth_pos_au.y],
                mode="markers+text",
                marker=dict(color=color, size=12, symbol="diamond"),
                text=[capture.epoch_label],
                textposition="top center",
                name=f"기록 {capture.epoch_label} ({capture.phase_deg:.1f}°)",
            )
        )

    a, b = st.session_state.capture_a, st.session_state.capture_b
    if a is not None and b is not None and inference.reason != MISSING_CAPTURE:
        fig.add_trace(
            go.Scatter(
                x=[a.earth_pos_au.x, b.earth_pos_au.x],
                y=[a.earth_pos_au.y, b.earth_pos_au.y],
                mode="lines",
                line=dict(color="orange", width=2),
                name=f"기선 {format_number(inference.baseline_chord_au, 2)} AU",
            )
        )

    fig.update_layout(
        title="궤도 기하",
        xaxis=dict(range=[-1.7, 1.7], title="x (AU)"),
        yaxis=dict(range=[-1.7, 1.7], title="y (AU)", scaleanchor="x", scaleratio=1),
        margin=dict(l=40, r=20, t=50, b=40),
        height=460,
    )
    return fig


def detector_figure(
    parallax_mas: float,
    phase_deg: float,
    axis_hat: Vector2,
    sigma_mas: float,
    exaggeration: float,
    cfg: InstrumentConfig,
) -> go.Figure:
    """Detector strip: offsets along the measurement axis drawn in exaggerated pixels."""

    px_per_mas = cfg.detector_px_per_mas
    radius_px = error_radius_px(
        sigma_mas, exaggeration, px_per_mas, cfg.error_radius_min_px, cfg.error_radius_max_px
    )
    fig = go.Figure()

    now_true = detector_true_offset_mas_from_phase(parallax_mas, phase_deg, axis_hat)
    now_s = dot(now_true, axis_hat)
    fig.add_trace(
        go.Scatter(
            x=[offset_px(now_s, exaggeration, px_per_mas)],
            y=[0],
            mode="markers",
            marker=dict(color="royalblue", size=12),
            name="현재 (참값)",
            hovertemplate=f"{format_number(now_s, 3)} mas<extra></extra>",
        )
    )
    for key, color in (("capture_a", "indianred"), ("capture_b", "seagreen")):
        capture = st.session_state[key]
        if capture is None:
            continue
        meas_s = dot(capture.measured_offset_mas, axis_hat)
        fig.add_trace(
            go.Scatter(
                x=[offset_px(meas_s, exaggeration, px_per_mas)],
                y=[0],
                mode="markers+text",
                marker=dict(
                    color=color,
                    size=2 * radius_px,
                    opacity=0.35,
                    line=dict(color=color, width=2),
                ),
                text=[capture.epoch_label],
                textposition="top center",
                name=f"측정 {capture.epoch_label}",
                hovertemplate=f"{format_number(meas_s, 3)} mas<extra></extra>",
            )
        )

    limit = max(60.0, abs(offset_px(parallax_mas, exaggeration, px_per_mas)) * 1.3)
    fig.update_layout(
        title="검출기 (축 방향 오프셋, 과장 표시)",
        xaxis=dict(range=[-limit, limit], title="화면 오프셋 (px)"),
        yaxis=dict(visible=False, range=[-1, 1]),
        margin=dict(l=40, r=20, t=50, b=40),
        height=260,
    )
    return fig


def render_readouts(inference: CaptureInference, distance_pc: float, parallax_mas: float) -> None:
    col1, col2, col3 = st.columns(3)
    col1.metric("참 거리 d_true (pc)", format_number(distance_pc, 3))
    col1.metric("참 시차 p_true (mas)", format_number(parallax_mas, 3))
    col1.metric("참 거리 (광년)", format_number(distance_ly_from_pc(distance_pc), 2))

    shift = inference.delta_theta_mas if inference.computable else None
    col2.metric("측정 이동량 Δθ (mas)", format_number(shift, 3))
    col2.metric("유효 기선 B_eff (AU)", format_number(inference.baseline_eff_au, 3))
    col2.metric("위상 차이 (deg)", format_number(inference.phase_sep_deg, 1))

    d_hat = inference.d_hat_pc
    delta_pct = None
    if d_hat is not None:
        delta_pct = f"{(d_hat - distance_pc) / distance_pc * 100:+.1f}%"
    col3.metric("추정 시차 p̂ (mas)", format_number(inference.p_hat_mas, 3))
    col3.metric("추정 거리 d̂ (pc)", format_number(d_hat, 3), delta=delta_pct, delta_color="off")
    col3.metric("SNR p̂/σ_p̂", format_number(inference.snr_p_hat, 2))

    if inference.computable:
        st.info(
            f"σ_p̂ = {format_number(inference.sigma_p_hat_mas, 3)} mas, "
            f"σ_d̂ = {format_number(inference.sigma_d_hat_pc, 3)} pc, "
            f"측정 품질: **{inference.quality}**"
        )
    else:
        st.warning(REASON_TEXT[inference.reason])


def main() -> None:
    st.set_page_config(page_title="Parallax Distance", layout="wide")
    st.title("연주시차로 별까지의 거리 재기")

    st.markdown(
        """
        지구가 공전하는 동안 두 시점(A, B)에서 별의 위치를 기록하면, 측정 축 방향의 이동량 Δθ와
        유효 기선 B_eff로부터 시차 p̂ = Δθ / B_eff 와 거리 d̂ = 1000 / p̂ (pc)를 추정할 수 있습니다.
        측정 불확도 σ는 같은 설정에서 항상 같은 잡음을 만들도록 결정론적으로 생성됩니다.
        """
    )

    cfg = InstrumentConfig.load()
    init_state(cfg)

    with st.sidebar:
        st.header("파라미터")
        preset_names = [CUSTOM_PRESET] + [star.name for star in NEARBY_STARS]
        preset_name = st.selectbox(
            "별 프리셋",
            preset_names,
            format_func=lambda name: name if name == CUSTOM_PRESET else preset_label(find_star(name)),
        )
        preset = find_star(preset_name) if preset_name != CUSTOM_PRESET else None
        if preset is not None:
            distance_pc = preset.distance_pc
            st.caption(f"d = {distance_pc:.3f} pc")
        else:
            distance_pc = st.slider(
                "참 거리 d (pc)",
                min_value=cfg.distance_pc_min,
                max_value=cfg.distance_pc_max,
                value=cfg.default_distance_pc,
                step=0.5,
            )
        phase_deg = st.slider("공전 위상 (deg)", 0.0, 359.9, 0.0, 0.1)
        sigma_mas = st.slider(
            "측정 불확도 σ (mas)",
            min_value=cfg.sigma_mas_min,
            max_value=cfg.sigma_mas_max,
            value=cfg.default_sigma_mas,
            step=0.1,
        )
        exaggeration = st.slider(
            "과장 배율 (표시 전용)",
            min_value=cfg.exaggeration_min,
            max_value=cfg.exaggeration_max,
            value=cfg.default_exaggeration,
            step=0.5,
        )

    basis = build_parallax_basis(Vector2(cfg.default_star_dir_x, cfg.default_star_dir_y))
    parallax_mas = parallax_mas_from_distance_pc(distance_pc)

    if st.session_state.captured_distance_pc not in (None, distance_pc):
        clear_captures()
        st.toast("거리가 바뀌어 기록을 지웠습니다. A와 B를 다시 기록하세요.")

    col_a, col_b, col_swap, col_clear = st.columns(4)
    if col_a.button("A 기록", use_container_width=True):
        st.session_state.capture_a = make_capture(
            "A", phase_deg, distance_pc, sigma_mas, basis.axis_hat, salt=cfg.noise_salt
        )
        st.session_state.captured_distance_pc = distance_pc
    if col_b.button("B 기록", use_container_width=True, disabled=st.session_state.capture_a is None):
        st.session_state.capture_b = make_capture(
            "B", phase_deg, distance_pc, sigma_mas, basis.axis_hat, salt=cfg.noise_salt
        )
        st.session_state.captured_distance_pc = distance_pc
    if col_swap.button("A↔B 교환", use_container_width=True):
        st.session_state.capture_a, st.session_state.capture_b = swap_captures(
            st.session_state.capture_a, st.session_state.capture_b
        )
    if col_clear.button("기록 지우기", use_container_width=True):
        clear_captures()

    inference = infer_from_captures(
        st.session_state.capture_a,
        st.session_state.capture_b,
        basis.axis_hat,
        sigma_mas,
        min_effective_baseline_au=cfg.min_effective_baseline_au,
    )

    col_orbit, col_det = st.columns([1, 1])
    with col_orbit:
        st.plotly_chart(
            orbit_figure(phase_deg, basis.axis_hat, basis.star_dir_hat, inference),
            use_container_width=True,
        )
    with col_det:
        st.plotly_chart(
            detector_figure(parallax_mas, phase_deg, basis.axis_hat, sigma_mas, exaggeration, cfg),
            use_container_width=True,
        )
        render_readouts(inference, distance_pc, parallax_mas)

    payload = build_export_payload(
        distance_pc=distance_pc,
        sigma_mas=sigma_mas,
        exaggeration=exaggeration,
        now_phase_deg=phase_deg,
        capture_a=st.session_state.capture_a,
        capture_b=st.session_state.capture_b,
        inference=inference,
        preset=preset.name if preset else "Custom distance",
    )
    with st.expander("결과 표"):
        st.table(payload_rows(payload))
    st.download_button(
        label="CSV로 저장",
        data=payload_to_csv_bytes(payload),
        file_name="parallax_distance.csv",
        mime="text/csv",
    )
    st.caption("d(pc) = 1 / p(arcsec). 과장 배율은 그림에만 적용되며 p̂, d̂ 계산에는 쓰이지 않습니다.")


if __name__ == "__main__":
    main()
