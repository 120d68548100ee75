import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from loguru import logger

APP_NAME = "volume-pill"
APP_NAME_CAP = "Volume Pill"

CONFIG_DIR = os.path.expanduser(f"~/.config/{APP_NAME}/config")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

# Значения по умолчанию (ключи совпадают с config.json)
DEFAULTS: Dict[str, Any] = {
    "bar_position": "Top",
    "vertical": False,
    "volume_step": 5,
    "volume_quiet_window_ms": 100,
    "volume_ramp_ms": 250,
    "volume_hold_ms": 2500,
    "volume_frame_interval_ms": 16,
    "volume_pill_padding": 12.0,
    "volume_icon_overlap": 8.0,
    "volume_mixer_command": "pavucontrol",
    "volume_color_normal": "#89b4fa",
    "volume_color_muted": "#f38ba8",
    "volume_animate_on_device_change": False,
}


def load_config(path: str = CONFIG_FILE) -> Dict[str, Any]:
    """
    Прочитать config.json и наложить значения поверх DEFAULTS.

    Отсутствующий файл - не ошибка. Битый JSON или неизвестные ключи
    логируются и игнорируются, чтобы бар всё равно поднялся.
    """
    settings = dict(DEFAULTS)
    if not os.path.exists(path):
        return settings

    try:
        with open(path, "r") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Failed to read config file {path}: {e}. Using defaults")
        return settings

    if not isinstance(raw, dict):
        logger.warning(f"Config file {path} is not a JSON object. Using defaults")
        return settings

    for key, value in raw.items():
        if key in DEFAULTS:
            settings[key] = value
    return settings


@dataclass(frozen=True)
class VolumeColors:
    normal: str = DEFAULTS["volume_color_normal"]
    muted: str = DEFAULTS["volume_color_muted"]


@dataclass(frozen=True)
class VolumeWidgetConfig:
    """Явная конфигурация виджета громкости (передаётся в контроллер)."""

    step: int = DEFAULTS["volume_step"]
    quiet_window_ms: float = DEFAULTS["volume_quiet_window_ms"]
    ramp_ms: float = DEFAULTS["volume_ramp_ms"]
    hold_ms: float = DEFAULTS["volume_hold_ms"]
    frame_interval_ms: int = DEFAULTS["volume_frame_interval_ms"]
    pill_padding: float = DEFAULTS["volume_pill_padding"]
    icon_overlap: float = DEFAULTS["volume_icon_overlap"]
    mixer_command: str = DEFAULTS["volume_mixer_command"]
    colors: VolumeColors = field(default_factory=VolumeColors)
    animate_on_device_change: bool = DEFAULTS["volume_animate_on_device_change"]

    def __post_init__(self):
        if not 1 <= self.step <= 100:
            raise ValueError(f"volume step must be within 1..100, got {self.step}")
        for name in ("quiet_window_ms", "ramp_ms", "hold_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be positive")
        if self.pill_padding < 0 or self.icon_overlap < 0:
            raise ValueError("pill padding and icon overlap must not be negative")

    @classmethod
    def from_settings(cls, settings: Optional[Dict[str, Any]] = None) -> "VolumeWidgetConfig":
        s = dict(DEFAULTS)
        if settings:
            s.update(settings)
        return cls(
            step=int(s["volume_step"]),
            quiet_window_ms=float(s["volume_quiet_window_ms"]),
            ramp_ms=float(s["volume_ramp_ms"]),
            hold_ms=float(s["volume_hold_ms"]),
            frame_interval_ms=int(s["volume_frame_interval_ms"]),
            pill_padding=float(s["volume_pill_padding"]),
            icon_overlap=float(s["volume_icon_overlap"]),
            mixer_command=str(s["volume_mixer_command"]),
            colors=VolumeColors(
                normal=str(s["volume_color_normal"]),
                muted=str(s["volume_color_muted"]),
            ),
            animate_on_device_change=bool(s["volume_animate_on_device_change"]),
        )


SETTINGS = load_config()

BAR_POSITION = SETTINGS["bar_position"]
VERTICAL = bool(SETTINGS["vertical"])
