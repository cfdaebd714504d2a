import csv

import pytest

from simulate import main, parse_args, run_measurement
from src.vector2 import Vector2


def test_run_measurement_recovers_true_distance_without_noise():
    run = run_measurement(distance_pc=10.0, phase_a_deg=0.0, phase_b_deg=180.0, sigma_mas=0.0)

    assert run.inference.reason == "ok"
    assert run.inference.p_hat_mas == pytest.approx(100)
    assert run.inference.d_hat_pc == pytest.approx(10)
    assert run.capture_a.epoch_label == "A"
    assert run.capture_b.epoch_label == "B"


def test_run_measurement_depends_on_star_direction():
    # Star along +x puts the axis along y, so phases 0/180 have no effective baseline.
    run = run_measurement(
        distance_pc=10.0,
        phase_a_deg=0.0,
        phase_b_deg=180.0,
        sigma_mas=1.0,
        star_dir_hint=Vector2(1.0, 0.0),
    )

    assert run.inference.reason == "baseline_too_small"


def test_unknown_preset_is_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--preset", "Not A Star"])


def test_main_writes_report_and_figure(tmp_path, capsys):
    output = tmp_path / "report.csv"
    figure = tmp_path / "plot.png"

    main(["--preset", "Sirius", "--sigma", "0.5", "--output", str(output), "--figure", str(figure)])

    assert output.exists()
    assert figure.exists()
    rows = {row[1]: row[2] for row in csv.reader(output.open(encoding="utf-8")) if len(row) == 3}
    assert rows["Preset"] == "Sirius"
    assert rows["Inference status"] == "ok"
    assert "p_hat" in capsys.readouterr().out


def test_zero_distance_is_clamped_not_replaced_by_default(tmp_path, capsys):
    output = tmp_path / "report.csv"

    main(["--distance", "0", "--sigma", "0", "--output", str(output), "--figure", str(tmp_path / "plot.png")])

    assert "True distance: 1.000 pc" in capsys.readouterr().out
