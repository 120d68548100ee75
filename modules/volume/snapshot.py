import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional


def clamp_percent(value: float) -> int:
    """Привести громкость к целому в диапазоне 0–100."""
    if math.isnan(value):
        return 0
    return int(round(max(0.0, min(100.0, float(value)))))


@dataclass(frozen=True)
class AudioSnapshot:
    """
    Одно согласованное наблюдение состояния устройства вывода.

    Неизменяемо; каждое новое наблюдение целиком заменяет предыдущее.
    """

    volume: int
    muted: bool
    sink_id: Optional[Any] = None
    kind: str = "speaker"

    @classmethod
    def create(
        cls,
        volume: float,
        muted: bool,
        sink_id: Optional[Any] = None,
        kind: str = "speaker",
    ) -> "AudioSnapshot":
        return cls(clamp_percent(volume), bool(muted), sink_id, kind)

    @classmethod
    def absent(cls) -> "AudioSnapshot":
        """Состояние при отсутствии устройства: 0% и mute."""
        return cls(0, True, None)

    def differs_from(self, other: Optional["AudioSnapshot"]) -> bool:
        """Громкость, mute или смена устройства (sink_id, kind)."""
        if other is None:
            return True
        return (self.volume, self.muted, self.sink_id, self.kind) != (
            other.volume, other.muted, other.sink_id, other.kind
        )


class AudioSink(ABC):
    """Устройство вывода, которым управляет виджет."""

    @property
    @abstractmethod
    def volume(self) -> int:
        pass

    @property
    @abstractmethod
    def muted(self) -> bool:
        pass

    @abstractmethod
    def set_volume(self, percent: int) -> None:
        """Fire-and-forget: результат придёт новым AudioSnapshot."""
        pass

    @abstractmethod
    def set_muted(self, muted: bool) -> None:
        pass

    def toggle_mute(self) -> None:
        self.set_muted(not self.muted)


SinkProvider = Callable[[], Optional[AudioSink]]
