from fabric import Application
from fabric.widgets.box import Box
from fabric.widgets.centerbox import CenterBox
from fabric.widgets.datetime import DateTime
from fabric.widgets.wayland import WaylandWindow as Window
from loguru import logger

import config.data as data
from modules.volume.widget import VolumeWidget


class Bar(Window):
    """Минимальная панель: часы по центру, громкость справа"""

    def __init__(self, monitor_id: int = 0, **kwargs):
        anchor_map = {
            "Top": "left top right",
            "Bottom": "left bottom right",
        }
        super().__init__(
            name="bar",
            layer="top",
            anchor=anchor_map.get(data.BAR_POSITION, "left top right"),
            exclusivity="auto",
            visible=True,
            all_visible=True,
            monitor=monitor_id,
            **kwargs,
        )
        self.volume = VolumeWidget()
        self.children = CenterBox(
            name="bar-inner",
            center_children=DateTime(name="date-time", formatters=["%H:%M"]),
            end_children=Box(name="end-container", spacing=4, children=[self.volume]),
        )


if __name__ == "__main__":
    logger.info(f"Starting {data.APP_NAME_CAP}")
    bar = Bar()
    app = Application(data.APP_NAME, bar)
    app.run()
