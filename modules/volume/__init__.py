from modules.volume.animation import Phase, PillAnimation, ease_in_cubic, ease_out_cubic
from modules.volume.controller import (
    InvalidTickError,
    RenderState,
    VolumeController,
    WidgetState,
    current_icon_glyph,
)
from modules.volume.debounce import ChangeDetector
from modules.volume.input import ScrollDirection, StepCommand, VolumeInputHandler
from modules.volume.metrics import PillMetrics
from modules.volume.snapshot import AudioSink, AudioSnapshot

__all__ = [
    "AudioSink",
    "AudioSnapshot",
    "ChangeDetector",
    "InvalidTickError",
    "Phase",
    "PillAnimation",
    "PillMetrics",
    "RenderState",
    "ScrollDirection",
    "StepCommand",
    "VolumeController",
    "VolumeInputHandler",
    "WidgetState",
    "current_icon_glyph",
    "ease_in_cubic",
    "ease_out_cubic",
]
