from typing import Optional

from fabric.widgets.box import Box
from fabric.widgets.eventbox import EventBox
from fabric.widgets.label import Label
from gi.repository import GLib, Pango
from loguru import logger

import config.data as data
import modules.icons as icons
from config.data import VolumeWidgetConfig
from modules.volume.controller import InvalidTickError, RenderState, VolumeController
from modules.volume.input import VolumeInputHandler, scroll_direction
from modules.volume.metrics import PillMetrics
from modules.volume.snapshot import AudioSnapshot
from services.audio import Audio
from services.launcher import launch_application, notify_failure


class VolumeWidget(Box):
    """Иконка громкости с выезжающей плашкой процентов для бара"""

    def __init__(
        self,
        config: Optional[VolumeWidgetConfig] = None,
        audio: Optional[Audio] = None,
        **kwargs
    ):
        super().__init__(
            name="volume-widget",
            orientation="h" if not data.VERTICAL else "v",
            spacing=0,
            **kwargs,
        )
        self.config = config or VolumeWidgetConfig.from_settings(data.SETTINGS)
        self.audio = audio or Audio()

        self.icon_label = Label(name="volume-icon", markup=icons.vol_high)
        self.pill_label = Label(name="volume-pill-label", label="0%")
        self.pill_label.set_ellipsize(Pango.EllipsizeMode.END)
        self.pill = Box(name="volume-pill", h_align="start", children=[self.pill_label])

        self.metrics = PillMetrics(
            self._measure_text, self.config.pill_padding, self.config.icon_overlap
        )
        self.controller = VolumeController(self.config, self.metrics)
        self.input = VolumeInputHandler(
            self.audio.get_default_sink,
            launch_application,
            step=self.config.step,
            mixer_command=self.config.mixer_command,
        )

        self.event_box = EventBox(
            events=["scroll", "smooth-scroll", "button-press"],
            child=Box(orientation="h", children=[self.icon_label, self.pill]),
        )
        self.event_box.connect("scroll-event", self.on_scroll)
        self.event_box.connect("button-press-event", self.on_button_press)
        self.pill_label.connect("style-updated", self._on_style_updated)
        self.add(self.event_box)

        self._frame_source_id: Optional[int] = None
        self._last_frame_time: Optional[int] = None
        self._applied: dict = {}

        self.audio.observe_volume(self.on_audio_snapshot)
        self.connect("destroy", self._on_destroy)

    # --- Размеры ---

    def _measure_text(self, text: str) -> float:
        layout = self.pill_label.create_pango_layout(text)
        width, _ = layout.get_pixel_size()
        return width

    def _on_style_updated(self, *_):
        """Шрифт мог смениться: перемерить плашку"""
        self.metrics.set_measurer(self._measure_text)
        self._render(self.controller.tick(0))

    # --- Аудио ---

    def on_audio_snapshot(self, snapshot: Optional[AudioSnapshot], device_changed: bool):
        """Новый снимок состояния динамика"""
        if device_changed and not self.config.animate_on_device_change:
            # Смена устройства (и первый снимок) - без анимации
            self.controller.prime(snapshot)
            self._render(self.controller.projection())
            return

        self.controller.observe(snapshot)
        self._ensure_frames()

    # --- Кадры ---

    def _ensure_frames(self):
        if self._frame_source_id is not None or not self.controller.is_active:
            return
        self._last_frame_time = GLib.get_monotonic_time()
        self._frame_source_id = GLib.timeout_add(
            self.config.frame_interval_ms, self._on_frame
        )

    def _on_frame(self) -> bool:
        now = GLib.get_monotonic_time()
        elapsed_ms = (now - self._last_frame_time) / 1000.0
        self._last_frame_time = now

        try:
            state = self.controller.tick(elapsed_ms)
        except InvalidTickError as e:
            logger.error(f"Volume widget tick rejected: {e}")
            self._frame_source_id = None
            return False

        self._render(state)
        if self.controller.is_active:
            return True
        self._frame_source_id = None
        return False

    def _render(self, state: RenderState):
        """Применить проекцию; не трогать то, что не изменилось"""
        width = int(round(state.pill_width))
        values = {
            "markup": state.icon_markup,
            "label": state.label_text,
            "width": width,
            "opacity": round(state.pill_opacity, 3),
            "background": state.icon_background,
            "tooltip": state.tooltip,
            "muted": state.muted,
        }
        changed = {k: v for k, v in values.items() if self._applied.get(k) != v}
        if not changed:
            return
        self._applied.update(changed)

        if "markup" in changed:
            self.icon_label.set_markup(state.icon_markup)
        if "label" in changed:
            self.pill_label.set_label(state.label_text)
        if "width" in changed:
            self.pill.set_visible(width > 0)
            self.pill.set_size_request(width, -1)
        if "opacity" in changed:
            self.pill.set_opacity(state.pill_opacity)
        if "background" in changed:
            self.icon_label.set_style(f"background-color: {state.icon_background};")
        if "tooltip" in changed:
            self.set_tooltip_text(state.tooltip)
        if "muted" in changed:
            if state.muted:
                self.add_style_class("muted")
                self.icon_label.add_style_class("muted")
            else:
                self.remove_style_class("muted")
                self.icon_label.remove_style_class("muted")

    # --- Ввод ---

    def on_scroll(self, widget, event) -> bool:
        """Прокрутка: шаг громкости"""
        sink = self.audio.get_default_sink()
        direction = scroll_direction(event)
        if sink is None or direction is None:
            return False
        self.input.on_scroll(direction, sink.volume)
        return True

    def on_button_press(self, widget, event) -> bool:
        """ЛКМ - mute, ПКМ - внешний микшер"""
        if event.button == 1:
            self.input.on_primary_click()
            return True
        if event.button == 3:
            self.input.on_secondary_click(self._on_launch_result)
            return True
        return False

    def _on_launch_result(self, ok: bool, error: Optional[str]):
        if not ok:
            notify_failure(
                f"Cannot open {self.config.mixer_command}",
                error or "Unknown error",
            )

    # --- Очистка ---

    def cleanup(self):
        """Остановить кадры и таймеры контроллера"""
        if self._frame_source_id is not None:
            GLib.source_remove(self._frame_source_id)
            self._frame_source_id = None
        self.audio.unobserve_volume(self.on_audio_snapshot)
        self.controller.unmount()

    def _on_destroy(self, *_):
        self.cleanup()
