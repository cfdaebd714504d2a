import csv
import io
from datetime import datetime, timezone

from src.parallax import build_parallax_basis, infer_from_captures, make_capture
from src.report import EXPORT_VERSION, build_export_payload, payload_rows, payload_to_csv_bytes

STAMP = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


def _values(rows):
    return {row["name"]: row["value"] for row in rows}


def test_payload_without_captures_shows_dashes():
    axis = build_parallax_basis().axis_hat
    inference = infer_from_captures(None, None, axis, 1.0)

    payload = build_export_payload(
        distance_pc=10.0,
        sigma_mas=1.0,
        exaggeration=12.0,
        now_phase_deg=45.0,
        capture_a=None,
        capture_b=None,
        inference=inference,
        timestamp=STAMP,
    )
    readouts = _values(payload["readouts"])
    parameters = _values(payload["parameters"])

    assert payload["version"] == EXPORT_VERSION
    assert payload["timestamp"] == "2024-03-20T12:00:00+00:00"
    assert parameters["Preset"] == "Custom distance"
    assert parameters["Capture A phase (deg)"] == "—"
    assert readouts["Measured shift deltaTheta (mas)"] == "—"
    assert readouts["Inferred distance d_hat (pc)"] == "—"
    assert readouts["Measurement quality"] == "—"
    assert readouts["Inference status"] == "missing_capture"
    assert readouts["Effective baseline B_eff (AU)"] == "0.000000"


def test_payload_with_captures_reports_estimates():
    axis = build_parallax_basis().axis_hat
    a = make_capture("A", 0.0, 10.0, 0.0, axis)
    b = make_capture("B", 180.0, 10.0, 0.0, axis)
    inference = infer_from_captures(a, b, axis, 0.0)

    payload = build_export_payload(
        distance_pc=10.0,
        sigma_mas=0.0,
        exaggeration=1.0,
        now_phase_deg=180.0,
        capture_a=a,
        capture_b=b,
        inference=inference,
        preset="Sirius",
        timestamp=STAMP,
    )
    readouts = _values(payload["readouts"])

    assert readouts["Inferred parallax p_hat (mas)"] == "100.000000"
    assert readouts["Inferred distance d_hat (pc)"] == "10.000000"
    assert readouts["Inferred distance d_hat (ly)"] == "32.615600"
    assert readouts["Signal-to-noise p_hat/sigma_p_hat"] == "—"
    assert readouts["Measurement quality"] == "Excellent"


def test_csv_export_contains_every_row_and_note():
    axis = build_parallax_basis().axis_hat
    inference = infer_from_captures(None, None, axis, 1.0)
    payload = build_export_payload(
        distance_pc=5.0,
        sigma_mas=1.0,
        exaggeration=1.0,
        now_phase_deg=0.0,
        capture_a=None,
        capture_b=None,
        inference=inference,
        timestamp=STAMP,
    )

    rows = list(csv.reader(io.StringIO(payload_to_csv_bytes(payload).decode("utf-8"))))

    assert rows[0] == ["section", "name", "value"]
    assert len(rows) == 1 + len(payload_rows(payload)) + len(payload["notes"])
    assert rows[-1][0] == "notes"
