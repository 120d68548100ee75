from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from loguru import logger

from modules.volume.snapshot import SinkProvider, clamp_percent

DEFAULT_STEP = 5

LaunchCallback = Callable[[bool, Optional[str]], None]
Launcher = Callable[[str, LaunchCallback], None]


class ScrollDirection(Enum):
    INCREASE = 1
    DECREASE = -1


@dataclass(frozen=True)
class StepCommand:
    direction: ScrollDirection
    magnitude: int = DEFAULT_STEP

    def apply(self, volume: float) -> int:
        return clamp_percent(volume + self.direction.value * self.magnitude)


def scroll_direction(event: Any) -> Optional[ScrollDirection]:
    """
    Направление по событию прокрутки GTK: UP/DOWN или smooth-дельта.

    Работает с любым объектом с полями direction/delta_y, сравнивая
    имя направления, чтобы не тянуть Gdk в логику.
    """
    direction = getattr(event, "direction", None)
    name = getattr(direction, "value_nick", None) or str(direction).lower()
    if "smooth" in name:
        delta_y = getattr(event, "delta_y", 0) or 0
        if delta_y < 0:
            return ScrollDirection.INCREASE
        if delta_y > 0:
            return ScrollDirection.DECREASE
        return None
    if "up" in name:
        return ScrollDirection.INCREASE
    if "down" in name:
        return ScrollDirection.DECREASE
    return None


class VolumeInputHandler:
    """Переводит клики и прокрутку в команды устройству. Своего состояния нет."""

    def __init__(
        self,
        sink_provider: SinkProvider,
        launcher: Launcher,
        step: int = DEFAULT_STEP,
        mixer_command: str = "pavucontrol",
    ):
        self._sink_provider = sink_provider
        self._launcher = launcher
        self.step = step
        self.mixer_command = mixer_command

    def on_primary_click(self) -> bool:
        """Переключить mute. Без устройства - ничего не делать."""
        sink = self._sink_provider()
        if sink is None:
            logger.warning("Mute toggle ignored: no audio sink bound")
            return False
        sink.toggle_mute()
        logger.debug("Mute toggle requested")
        return True

    def on_secondary_click(self, on_result: Optional[LaunchCallback] = None):
        """Открыть внешний микшер; ошибку запуска отдать вызывающему."""

        def _done(ok: bool, error: Optional[str]):
            if not ok:
                logger.error(f"Failed to launch '{self.mixer_command}': {error}")
            if on_result is not None:
                on_result(ok, error)

        try:
            self._launcher(self.mixer_command, _done)
        except Exception as e:
            _done(False, str(e))

    def on_scroll(self, direction: ScrollDirection, current_volume: float) -> Optional[int]:
        sink = self._sink_provider()
        if sink is None:
            return None
        target = StepCommand(direction, self.step).apply(current_volume)
        sink.set_volume(target)
        logger.debug(f"Volume {direction.name.lower()} -> {target}%")
        return target
