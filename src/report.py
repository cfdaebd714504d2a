"""Export of instrument parameters and inferred readouts as table rows."""
from __future__ import annotations

import csv
import io
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from src.distance import distance_ly_from_pc, parallax_arcsec_from_mas
from src.parallax import MISSING, CaptureInference, EpochCapture, format_number

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1

NOTES = [
    "Parallax relation: d(pc) = 1 / p(arcsec).",
    "Two-capture inference uses the detector shift projected on the parallax axis.",
    "The effective baseline B_eff is used for inference; the chord |rB - rA| is reported for context.",
    "Exaggeration affects the drawing only, never p_hat or d_hat.",
]


def _row(name: str, value: str) -> Dict[str, str]:
    return {"name": name, "value": value}


def build_export_payload(
    *,
    distance_pc: float,
    sigma_mas: float,
    exaggeration: float,
    now_phase_deg: float,
    capture_a: Optional[EpochCapture],
    capture_b: Optional[EpochCapture],
    inference: CaptureInference,
    preset: str = "Custom distance",
    timestamp: Optional[datetime] = None,
) -> dict:
    """Collect the current instrument state into a versioned export record."""

    stamp = timestamp or datetime.now(tz=timezone.utc)
    d_hat_ly = distance_ly_from_pc(inference.d_hat_pc) if inference.d_hat_pc is not None else None
    p_hat_arcsec = (
        parallax_arcsec_from_mas(inference.p_hat_mas) if inference.p_hat_mas is not None else None
    )
    shift = inference.delta_theta_mas if inference.computable else None
    signed_shift = inference.delta_theta_signed_mas if inference.computable else None

    parameters = [
        _row("Preset", preset),
        _row("True distance d_true (pc)", format_number(distance_pc, 4)),
        _row("Orbit phase now (deg)", format_number(now_phase_deg, 3)),
        _row("Capture A phase (deg)", format_number(capture_a.phase_deg if capture_a else None, 3)),
        _row("Capture B phase (deg)", format_number(capture_b.phase_deg if capture_b else None, 3)),
        _row("Measurement uncertainty sigma_meas (mas)", format_number(sigma_mas, 3)),
        _row("Exaggeration (visual only)", format_number(exaggeration, 2)),
    ]
    readouts = [
        _row("Measured shift deltaTheta (mas)", format_number(shift, 6)),
        _row("Measured signed shift deltaTheta_signed (mas)", format_number(signed_shift, 6)),
        _row("Effective baseline B_eff (AU)", format_number(inference.baseline_eff_au, 6)),
        _row("Baseline chord |rB-rA| (AU)", format_number(inference.baseline_chord_au, 6)),
        _row("Phase separation (deg)", format_number(inference.phase_sep_deg, 3)),
        _row("Inferred parallax p_hat (mas)", format_number(inference.p_hat_mas, 6)),
        _row("Inferred parallax p_hat (arcsec)", format_number(p_hat_arcsec, 9)),
        _row("Inferred distance d_hat (pc)", format_number(inference.d_hat_pc, 6)),
        _row("Inferred distance d_hat (ly)", format_number(d_hat_ly, 6)),
        _row("Equivalent six-month shift 2p_hat (mas)", format_number(inference.equivalent_six_month_shift_mas, 6)),
        _row("Parallax uncertainty sigma_p_hat (mas)", format_number(inference.sigma_p_hat_mas, 6)),
        _row("Distance uncertainty sigma_d_hat (pc)", format_number(inference.sigma_d_hat_pc, 6)),
        _row("Signal-to-noise p_hat/sigma_p_hat", format_number(inference.snr_p_hat, 6)),
        _row("Measurement quality", inference.quality or MISSING),
        _row("Inference status", inference.reason),
    ]

    logger.debug("Export payload built (reason=%s)", inference.reason)
    return {
        "version": EXPORT_VERSION,
        "timestamp": stamp.isoformat(),
        "parameters": parameters,
        "readouts": readouts,
        "notes": list(NOTES),
    }


def payload_rows(payload: dict) -> List[Dict[str, str]]:
    """Flatten a payload into ``section/name/value`` rows for tables."""
    rows = []
    for section in ("parameters", "readouts"):
        for row in payload[section]:
            rows.append({"section": section, "name": row["name"], "value": row["value"]})
    return rows


def payload_to_csv_bytes(payload: dict) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["section", "name", "value"])
    for row in payload_rows(payload):
        writer.writerow([row["section"], row["name"], row["value"]])
    for note in payload["notes"]:
        writer.writerow(["notes", note, ""])
    return buffer.getvalue().encode("utf-8")
