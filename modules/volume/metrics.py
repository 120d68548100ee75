from typing import Callable, Optional

from loguru import logger

WIDEST_LABEL = "100%"

TextMeasurer = Callable[[str], float]


class PillMetrics:
    """
    Кэш максимальной ширины плашки.

    max_width = ширина "100%" + горизонтальные отступы + наезд на иконку.
    Пересчитывается только при смене шрифта (измерителя) или отступов.
    """

    def __init__(self, measure: TextMeasurer, padding: float = 12.0, icon_overlap: float = 8.0):
        self._measure = measure
        self._padding = float(padding)
        self._icon_overlap = float(icon_overlap)
        self._cached: Optional[float] = None
        self.measurements = 0

    @property
    def max_width(self) -> float:
        if self._cached is None:
            text_width = float(self._measure(WIDEST_LABEL))
            self.measurements += 1
            width = text_width + 2 * self._padding + self._icon_overlap
            if width <= 0:
                raise ValueError(f"pill width must be positive, measured {width}")
            self._cached = width
            logger.debug(f"Volume pill max width measured: {width:.1f}px")
        return self._cached

    def invalidate(self):
        self._cached = None

    def set_measurer(self, measure: TextMeasurer):
        """Новый шрифт: сбросить кэш."""
        self._measure = measure
        self.invalidate()

    def set_padding(self, padding: Optional[float] = None, icon_overlap: Optional[float] = None):
        changed = False
        if padding is not None and float(padding) != self._padding:
            self._padding = float(padding)
            changed = True
        if icon_overlap is not None and float(icon_overlap) != self._icon_overlap:
            self._icon_overlap = float(icon_overlap)
            changed = True
        if changed:
            self.invalidate()
