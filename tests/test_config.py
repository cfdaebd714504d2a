import json
import logging

from src.config import InstrumentConfig


def test_save_load_roundtrip(tmp_path):
    cfg = InstrumentConfig()
    cfg.default_sigma_mas = 2.5
    cfg.min_effective_baseline_au = 0.5
    cfg.noise_salt = "classroom-3"

    path = tmp_path / "config.json"
    cfg.save(path)
    loaded = InstrumentConfig.load(path)

    assert loaded.default_sigma_mas == 2.5
    assert loaded.min_effective_baseline_au == 0.5
    assert loaded.noise_salt == "classroom-3"


def test_missing_file_gives_defaults(tmp_path):
    assert InstrumentConfig.load(tmp_path / "absent.json") == InstrumentConfig()


def test_broken_file_is_logged_and_ignored(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        cfg = InstrumentConfig.load(path)

    assert cfg == InstrumentConfig()
    assert "Failed to read config file" in caplog.text


def test_invalid_values_are_skipped_and_ranges_normalized(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "sigma_mas_min": 30.0,
                "sigma_mas_max": 0.5,
                "distance_pc_max": "far",
                "default_distance_pc": 1e9,
                "unknown_key": 1,
            }
        ),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING):
        cfg = InstrumentConfig.load(path)

    assert cfg.sigma_mas_min == 0.5
    assert cfg.sigma_mas_max == 30.0
    assert cfg.distance_pc_max == InstrumentConfig().distance_pc_max
    assert cfg.default_distance_pc == cfg.distance_pc_max
    assert "distance_pc_max" in caplog.text
    assert "unknown_key" in caplog.text


def test_non_finite_values_are_rejected(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text('{"default_distance_pc": NaN, "distance_pc_min": "nan", "sigma_mas_max": Infinity}', encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        cfg = InstrumentConfig.load(path)

    assert cfg == InstrumentConfig()
    assert "default_distance_pc" in caplog.text
    assert "sigma_mas_max" in caplog.text
