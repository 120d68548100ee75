from enum import Enum

from loguru import logger

DEFAULT_RAMP_MS = 250
DEFAULT_HOLD_MS = 2500


class Phase(Enum):
    IDLE = "idle"
    EXPANDING = "expanding"
    HOLDING = "holding"
    COLLAPSING = "collapsing"


def ease_out_cubic(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return 1 - (1 - t) ** 3


def ease_in_cubic(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return t ** 3


class PillAnimation:
    """
    Машина состояний плашки с процентами: Idle → Expanding → Holding →
    Collapsing → Idle.

    Уровень раскрытия хранится в долях (0..1): ширина = уровень * max_width,
    прозрачность = уровень. Прерванная анимация продолжается с текущего
    уровня, длительность остатка пропорциональна оставшемуся пути, так что
    в пределах одного рампа ширина монотонна и без скачков.

    Таймеры фаз - счётчики оставшегося времени; любой переход их
    перезаписывает, поэтому устаревший hold не может сработать позже.

    Изменение во время Holding переводит машину в Expanding с полного
    уровня: рамп нулевой длины, и тот же advance сразу даёт новый Holding
    с полным hold_ms.
    """

    def __init__(
        self,
        max_width: float,
        ramp_ms: float = DEFAULT_RAMP_MS,
        hold_ms: float = DEFAULT_HOLD_MS,
    ):
        if max_width <= 0:
            raise ValueError("max pill width must be positive")
        self.max_width = float(max_width)
        self.ramp_ms = float(ramp_ms)
        self.hold_ms = float(hold_ms)

        self.phase = Phase.IDLE
        self._level = 0.0
        self._ramp_from = 0.0
        self._ramp_elapsed = 0.0
        self._ramp_duration = 0.0
        self._hold_left = 0.0

    # --- Проекция ---

    @property
    def level(self) -> float:
        return self._level

    @property
    def width(self) -> float:
        return self._level * self.max_width

    @property
    def opacity(self) -> float:
        return self._level

    @property
    def hold_remaining(self) -> float:
        return self._hold_left if self.phase == Phase.HOLDING else 0.0

    # --- Переходы ---

    def on_changed(self):
        """Событие "changed": раскрыть плашку с текущего уровня."""
        previous = self.phase
        if previous == Phase.EXPANDING:
            # Рамп уже идёт к максимуму; hold стартует после него заново
            return
        self._start_ramp(Phase.EXPANDING)
        logger.debug(f"Volume pill {previous.value} -> expanding from level {self._level:.2f}")

    def _start_ramp(self, phase: Phase):
        target = 1.0 if phase == Phase.EXPANDING else 0.0
        self.phase = phase
        self._ramp_from = self._level
        self._ramp_elapsed = 0.0
        self._ramp_duration = self.ramp_ms * abs(target - self._level)
        self._hold_left = 0.0

    def _finish_ramp(self):
        if self.phase == Phase.EXPANDING:
            self._level = 1.0
            self.phase = Phase.HOLDING
            self._hold_left = self.hold_ms
        else:
            self._level = 0.0
            self.phase = Phase.IDLE
        self._ramp_elapsed = 0.0
        self._ramp_duration = 0.0

    def _update_level(self):
        if self._ramp_duration <= 0:
            return
        t = self._ramp_elapsed / self._ramp_duration
        if self.phase == Phase.EXPANDING:
            self._level = self._ramp_from + (1.0 - self._ramp_from) * ease_out_cubic(t)
        else:
            self._level = self._ramp_from * (1.0 - ease_in_cubic(t))

    def advance(self, elapsed_ms: float):
        """Продвинуть анимацию на elapsed_ms, переходя через границы фаз."""
        if elapsed_ms < 0:
            raise ValueError("elapsed time must not be negative")

        remaining = elapsed_ms
        while self.phase != Phase.IDLE:
            if self.phase == Phase.HOLDING:
                if remaining <= self._hold_left:
                    self._hold_left -= remaining
                    return
                remaining -= self._hold_left
                self._start_ramp(Phase.COLLAPSING)
                logger.debug("Volume pill holding -> collapsing")
                continue

            left = self._ramp_duration - self._ramp_elapsed
            if remaining < left:
                self._ramp_elapsed += remaining
                self._update_level()
                return
            remaining -= left
            finished = self.phase
            self._finish_ramp()
            logger.debug(f"Volume pill {finished.value} -> {self.phase.value}")

    def set_max_width(self, max_width: float):
        if max_width <= 0:
            raise ValueError("max pill width must be positive")
        self.max_width = float(max_width)

    def reset(self):
        self.phase = Phase.IDLE
        self._level = 0.0
        self._ramp_from = 0.0
        self._ramp_elapsed = 0.0
        self._ramp_duration = 0.0
        self._hold_left = 0.0
