"""
Тесты загрузки настроек, снимков состояния и кэша размеров плашки.
"""

import json
from unittest.mock import Mock

import pytest

from config.data import DEFAULTS, VolumeWidgetConfig, load_config
from modules.volume.metrics import PillMetrics
from modules.volume.snapshot import AudioSnapshot, clamp_percent


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / "nope.json")) == DEFAULTS

    def test_file_values_override_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"volume_step": 10, "volume_hold_ms": 1000, "unknown": 1}))
        settings = load_config(str(path))
        assert settings["volume_step"] == 10
        assert settings["volume_hold_ms"] == 1000
        assert settings["volume_ramp_ms"] == DEFAULTS["volume_ramp_ms"]
        assert "unknown" not in settings

    def test_broken_json_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_config(str(path)) == DEFAULTS

    def test_non_object_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2, 3]")
        assert load_config(str(path)) == DEFAULTS


class TestVolumeWidgetConfig:
    def test_from_settings(self):
        config = VolumeWidgetConfig.from_settings(
            {"volume_step": 2, "volume_color_muted": "#000", "volume_mixer_command": "pwvucontrol"}
        )
        assert config.step == 2
        assert config.colors.muted == "#000"
        assert config.colors.normal == DEFAULTS["volume_color_normal"]
        assert config.mixer_command == "pwvucontrol"
        assert config.ramp_ms == 250
        assert config.hold_ms == 2500
        assert config.quiet_window_ms == 100

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"step": 0},
            {"step": 101},
            {"ramp_ms": -1},
            {"hold_ms": -5},
            {"quiet_window_ms": -1},
            {"frame_interval_ms": 0},
            {"pill_padding": -1},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            VolumeWidgetConfig(**kwargs)


class TestAudioSnapshot:
    @pytest.mark.parametrize(
        "raw, expected",
        [(-3, 0), (0, 0), (49.6, 50), (100, 100), (140, 100), (float("nan"), 0), (float("inf"), 100), (float("-inf"), 0)],
    )
    def test_clamp(self, raw, expected):
        assert clamp_percent(raw) == expected

    def test_create_clamps_and_coerces(self):
        snapshot = AudioSnapshot.create(123.4, 1, sink_id=7)
        assert snapshot == AudioSnapshot(100, True, 7)

    def test_absent(self):
        snapshot = AudioSnapshot.absent()
        assert snapshot.volume == 0
        assert snapshot.muted
        assert snapshot.sink_id is None

    def test_differs_from(self):
        base = AudioSnapshot.create(40, False, sink_id="a")
        assert base.differs_from(None)
        assert not base.differs_from(AudioSnapshot.create(40, False, sink_id="a"))
        assert base.differs_from(AudioSnapshot.create(40, False, sink_id="b"))
        assert base.differs_from(AudioSnapshot.create(40, False, sink_id="a", kind="bluetooth"))
        assert base.differs_from(AudioSnapshot.create(41, False))
        assert base.differs_from(AudioSnapshot.create(40, True))


class TestPillMetrics:
    def test_width_is_text_plus_padding_and_overlap(self):
        metrics = PillMetrics(Mock(return_value=30.0), padding=10, icon_overlap=6)
        assert metrics.max_width == 56

    def test_measures_widest_label_once(self):
        measure = Mock(return_value=30.0)
        metrics = PillMetrics(measure, padding=10, icon_overlap=6)
        for _ in range(10):
            metrics.max_width
        measure.assert_called_once_with("100%")

    def test_padding_change_invalidates(self):
        measure = Mock(return_value=30.0)
        metrics = PillMetrics(measure, padding=10, icon_overlap=6)
        metrics.max_width
        metrics.set_padding(padding=10)
        metrics.max_width
        assert measure.call_count == 1

        metrics.set_padding(padding=4, icon_overlap=0)
        assert metrics.max_width == 38
        assert measure.call_count == 2

    def test_non_positive_width_rejected(self):
        metrics = PillMetrics(Mock(return_value=0), padding=0, icon_overlap=0)
        with pytest.raises(ValueError):
            metrics.max_width
