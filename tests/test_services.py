"""
Тесты обёрток над Fabric Audio и запуском внешних приложений.
"""

from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

pytest.importorskip("gi")
pytest.importorskip("fabric.audio.service")

from gi.repository import GLib  # noqa: E402

from modules.volume.snapshot import AudioSnapshot  # noqa: E402
from services.audio import SpeakerSink  # noqa: E402
from services.launcher import launch_application  # noqa: E402


def run_idle(callback, *args):
    callback(*args)
    return 1


class TestSpeakerSink:
    @pytest.fixture
    def speaker(self):
        return SimpleNamespace(id=42, volume=37.6, muted=False, icon_name="audio-speakers")

    def test_set_volume_is_clamped(self, speaker):
        sink = SpeakerSink(speaker)
        sink.set_volume(120)
        assert speaker.volume == 100
        sink.set_volume(-5)
        assert speaker.volume == 0

    def test_properties_read_through(self, speaker):
        sink = SpeakerSink(speaker)
        assert sink.volume == 38
        assert not sink.muted
        assert sink.sink_id == 42
        assert sink.kind == "speaker"

    def test_toggle_mute(self, speaker):
        sink = SpeakerSink(speaker)
        sink.toggle_mute()
        assert speaker.muted is True

    def test_snapshot(self, speaker):
        speaker.volume = 131.0
        assert SpeakerSink(speaker).snapshot() == AudioSnapshot(100, False, 42, "speaker")

    def test_bluetooth_kind_from_icon_name(self, speaker):
        speaker.icon_name = "audio-headphones-bluetooth"
        snapshot = SpeakerSink(speaker).snapshot()
        assert snapshot.kind == "bluetooth"

    def test_missing_id_and_icon(self):
        speaker = Mock(spec=["volume", "muted"], volume=10, muted=True)
        sink = SpeakerSink(speaker)
        assert sink.sink_id is None
        assert sink.kind == "speaker"
        assert sink.snapshot() == AudioSnapshot(10, True, None, "speaker")


class TestLaunchApplication:
    @pytest.fixture
    def idle_add(self):
        with patch("services.launcher.GLib.idle_add", side_effect=run_idle) as idle_add:
            yield idle_add

    def test_empty_command_is_reported(self, idle_add):
        on_result = Mock()
        launch_application("   ", on_result)
        on_result.assert_called_once_with(False, "empty command")
        idle_add.assert_called_once()

    def test_unbalanced_quotes_are_reported(self, idle_add):
        on_result = Mock()
        launch_application('pavucontrol "--tab', on_result)
        ok, error = on_result.call_args.args
        assert not ok
        assert error.startswith("invalid command:")

    def test_spawn_error_is_reported(self, idle_add):
        on_result = Mock()
        with patch("services.launcher.Gio") as gio:
            gio.Subprocess.new.side_effect = GLib.Error("no such file")
            launch_application("does-not-exist --flag", on_result)
        gio.Subprocess.new.assert_called_once()
        assert gio.Subprocess.new.call_args.args[0] == ["does-not-exist", "--flag"]
        on_result.assert_called_once_with(False, "no such file")

    def test_success_is_reported_asynchronously(self, idle_add):
        on_result = Mock()
        with patch("services.launcher.Gio") as gio:
            launch_application("pavucontrol -t 3", on_result)
        process = gio.Subprocess.new.return_value
        process.wait_check_async.assert_called_once()
        assert process.wait_check_async.call_args.args[2] == "pavucontrol"
        on_result.assert_called_once_with(True, None)

    def test_without_callback(self, idle_add):
        launch_application("", None)
        idle_add.assert_called_once()
