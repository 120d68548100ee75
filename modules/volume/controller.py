import math
from dataclasses import dataclass
from typing import Optional, Union

from loguru import logger

import modules.icons as icons
from config.data import VolumeWidgetConfig
from modules.volume.animation import Phase, PillAnimation
from modules.volume.clock import Scheduler
from modules.volume.debounce import ChangeDetector
from modules.volume.metrics import PillMetrics
from modules.volume.snapshot import AudioSnapshot

LOW_VOLUME_THRESHOLD = 30
AVERAGE_GLYPH_WIDTH = 8.0


def approximate_text_width(text: str) -> float:
    """Оценка ширины текста без Pango (тесты, безголовый режим)."""
    return AVERAGE_GLYPH_WIDTH * len(text)


class InvalidTickError(ValueError):
    """Отрицательный или нечисловой шаг времени - ошибка вызывающего кода."""


def current_icon_glyph(volume: int, muted: bool) -> str:
    """Ключ иконки: "muted", "low" или "high"."""
    if muted or volume <= 0:
        return "muted"
    if volume < LOW_VOLUME_THRESHOLD:
        return "low"
    return "high"


@dataclass(frozen=True)
class WidgetState:
    phase: Phase
    displayed_volume: int
    pill_width: float
    pill_opacity: float


@dataclass(frozen=True)
class RenderState:
    pill_width: float
    pill_opacity: float
    icon_glyph: str
    icon_markup: str
    icon_background: str
    label_text: str
    tooltip: str
    muted: bool
    phase: Phase


class VolumeController:
    """
    Контроллер виджета громкости.

    observe() кормит детектор изменений, tick() двигает виртуальное время:
    таймеры детектора срабатывают ровно в свой момент внутри тика, а
    анимация продвигается на отрезки между ними. Результат - RenderState,
    который хост применяет к виджетам.
    """

    def __init__(
        self,
        config: Optional[VolumeWidgetConfig] = None,
        metrics: Union[PillMetrics, float, None] = None,
    ):
        self.config = config or VolumeWidgetConfig()
        if metrics is None:
            metrics = PillMetrics(
                approximate_text_width, self.config.pill_padding, self.config.icon_overlap
            )
        self._metrics = metrics
        self._scheduler = Scheduler()
        self._detector = ChangeDetector(
            self._scheduler, self._on_changed, self.config.quiet_window_ms
        )
        self._animation = PillAnimation(
            self._current_max_width(), self.config.ramp_ms, self.config.hold_ms
        )
        self._displayed = AudioSnapshot.absent()
        self._sink_present = False
        self._unmounted = False

    # --- Размеры ---

    def _current_max_width(self) -> float:
        if isinstance(self._metrics, PillMetrics):
            return self._metrics.max_width
        return float(self._metrics)

    def _sync_max_width(self):
        if isinstance(self._metrics, PillMetrics):
            width = self._metrics.max_width
            if width != self._animation.max_width:
                self._animation.set_max_width(width)

    @property
    def max_pill_width(self) -> float:
        return self._animation.max_width

    # --- Входы ---

    def observe(self, snapshot: Optional[AudioSnapshot]):
        """Принять наблюдение от аудиосервиса (None - устройства нет)."""
        if self._unmounted:
            return
        if snapshot is None:
            if self._sink_present:
                logger.info("Audio sink went away")
            self._sink_present = False
            snapshot = AudioSnapshot.absent()
        else:
            self._sink_present = True
            snapshot = AudioSnapshot.create(
                snapshot.volume, snapshot.muted, snapshot.sink_id, snapshot.kind
            )
        self._detector.push(snapshot)

    def prime(self, snapshot: Optional[AudioSnapshot]):
        """Показать состояние без анимации (монтирование, смена устройства)."""
        if self._unmounted:
            return
        if snapshot is None:
            self._sink_present = False
            snapshot = AudioSnapshot.absent()
        else:
            self._sink_present = True
            snapshot = AudioSnapshot.create(
                snapshot.volume, snapshot.muted, snapshot.sink_id, snapshot.kind
            )
        self._detector.reset(snapshot)
        self._displayed = snapshot

    def _on_changed(self, snapshot: AudioSnapshot):
        # Текст обновляется сразу, анимируется только ширина/прозрачность
        self._displayed = snapshot
        self._animation.on_changed()

    def tick(self, elapsed_ms: float) -> RenderState:
        if (
            isinstance(elapsed_ms, bool)
            or not isinstance(elapsed_ms, (int, float))
            or not math.isfinite(elapsed_ms)
            or elapsed_ms < 0
        ):
            raise InvalidTickError(f"invalid tick duration: {elapsed_ms!r}")
        if self._unmounted:
            return self.projection()

        self._sync_max_width()
        target = self._scheduler.now + elapsed_ms
        while True:
            deadline = self._scheduler.next_deadline()
            if deadline is None or deadline > target:
                break
            self._animation.advance(deadline - self._scheduler.now)
            self._scheduler.advance_to(deadline)
        self._animation.advance(target - self._scheduler.now)
        self._scheduler.advance_to(target)
        return self.projection()

    # --- Выходы ---

    @property
    def state(self) -> WidgetState:
        return WidgetState(
            phase=self._animation.phase,
            displayed_volume=self._displayed.volume,
            pill_width=self._animation.width,
            pill_opacity=self._animation.opacity,
        )

    @property
    def phase(self) -> Phase:
        return self._animation.phase

    @property
    def is_active(self) -> bool:
        return self._detector.pending or self._animation.phase != Phase.IDLE

    def projection(self) -> RenderState:
        snapshot = self._displayed
        glyph = current_icon_glyph(snapshot.volume, snapshot.muted)
        muted = glyph == "muted"

        if not self._sink_present:
            tooltip = "No audio device"
        elif snapshot.muted:
            tooltip = "Muted"
        else:
            tooltip = f"{snapshot.volume}%"

        return RenderState(
            pill_width=self._animation.width,
            pill_opacity=self._animation.opacity,
            icon_glyph=glyph,
            icon_markup=icons.volume_markup(glyph, snapshot.kind),
            icon_background=self.config.colors.muted if muted else self.config.colors.normal,
            label_text=f"{snapshot.volume}%",
            tooltip=tooltip,
            muted=muted,
            phase=self._animation.phase,
        )

    def unmount(self):
        """Отменить все таймеры; дальше контроллер инертен."""
        self._detector.cancel()
        self._scheduler.cancel_all()
        self._animation.reset()
        self._unmounted = True
