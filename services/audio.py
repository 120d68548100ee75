# ~/.config/volume-pill/services/audio.py

from typing import Callable, List, Optional

from fabric.audio.service import Audio as FabricAudio
from loguru import logger

from modules.volume.snapshot import AudioSink, AudioSnapshot


def _speaker_kind(speaker) -> str:
    """Тип устройства по имени иконки: bluetooth или обычный динамик."""
    icon_name = getattr(speaker, "icon_name", "") or ""
    return "bluetooth" if "bluetooth" in icon_name else "speaker"


class SpeakerSink(AudioSink):
    """Текущий динамик Fabric Audio как AudioSink."""

    def __init__(self, speaker):
        self.speaker = speaker

    @property
    def sink_id(self):
        return getattr(self.speaker, "id", None)

    @property
    def kind(self) -> str:
        return _speaker_kind(self.speaker)

    @property
    def volume(self) -> int:
        return int(round(self.speaker.volume))

    @property
    def muted(self) -> bool:
        return bool(self.speaker.muted)

    def set_volume(self, percent: int) -> None:
        self.speaker.volume = max(0, min(100, percent))

    def set_muted(self, muted: bool) -> None:
        self.speaker.muted = muted

    def snapshot(self) -> AudioSnapshot:
        return AudioSnapshot.create(
            self.speaker.volume, self.speaker.muted, self.sink_id, self.kind
        )


class Audio(FabricAudio):
    """
    Audio с подпиской на снимки состояния динамика.

    Снимки приходят на каждый "changed" текущего динамика; при смене
    устройства (notify::speaker) подписка переносится, а наблюдатели
    получают флаг device_changed, чтобы решить, анимировать ли переход.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._observers: List[Callable[[Optional[AudioSnapshot], bool], None]] = []
        self._bound_speaker = None
        self.connect("notify::speaker", self._on_new_speaker)
        self._bind_speaker()

    def get_default_sink(self) -> Optional[SpeakerSink]:
        if self.speaker is None:
            return None
        return SpeakerSink(self.speaker)

    def observe_volume(self, callback: Callable[[Optional[AudioSnapshot], bool], None]):
        """Подписаться: callback(snapshot | None, device_changed)."""
        self._observers.append(callback)
        sink = self.get_default_sink()
        callback(sink.snapshot() if sink else None, True)

    def unobserve_volume(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def _bind_speaker(self):
        speaker = self.speaker
        if speaker is self._bound_speaker:
            return
        if self._bound_speaker is not None:
            try:
                self._bound_speaker.disconnect_by_func(self._on_speaker_changed)
            except TypeError:
                pass
        self._bound_speaker = speaker
        if speaker is not None:
            speaker.connect("changed", self._on_speaker_changed)
            logger.info(f"Bound audio sink: {getattr(speaker, 'name', None) or 'unknown'}")
        else:
            logger.warning("No default audio sink available")

    def _on_new_speaker(self, *_):
        self._bind_speaker()
        self._notify(device_changed=True)

    def _on_speaker_changed(self, *_):
        self._notify(device_changed=False)

    def _notify(self, device_changed: bool):
        sink = self.get_default_sink()
        snapshot = sink.snapshot() if sink else None
        for callback in list(self._observers):
            callback(snapshot, device_changed)
