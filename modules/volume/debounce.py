from typing import Callable, Optional

from loguru import logger

from modules.volume.clock import Scheduler, TimerHandle
from modules.volume.snapshot import AudioSnapshot

DEFAULT_QUIET_WINDOW_MS = 100


class ChangeDetector:
    """
    Схлопывает серию уведомлений о громкости в одно событие "changed".

    Каждый снимок, отличный от последнего отправленного, перезапускает
    окно тишины; побеждает последний. Событие уходит только когда окно
    истекло без новых снимков.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_changed: Callable[[AudioSnapshot], None],
        quiet_window_ms: float = DEFAULT_QUIET_WINDOW_MS,
    ):
        self._scheduler = scheduler
        self._on_changed = on_changed
        self.quiet_window_ms = quiet_window_ms
        self.last_emitted: Optional[AudioSnapshot] = None
        self.pending_snapshot: Optional[AudioSnapshot] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def push(self, snapshot: AudioSnapshot):
        if not snapshot.differs_from(self.last_emitted):
            if self.pending:
                # Серия вернулась к уже показанному значению
                logger.debug("Volume burst settled back on last shown value")
                self.cancel()
            return

        self.pending_snapshot = snapshot
        self._restart_timer()

    def _restart_timer(self):
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._scheduler.call_later(self.quiet_window_ms, self._on_quiet)

    def _on_quiet(self):
        self._timer = None
        snapshot = self.pending_snapshot
        self.pending_snapshot = None
        if snapshot is None:
            return
        self.last_emitted = snapshot
        self._on_changed(snapshot)

    def flush(self):
        """Отправить отложенный снимок немедленно."""
        if self._timer is not None:
            self._timer.cancel()
            self._on_quiet()

    def reset(self, snapshot: Optional[AudioSnapshot]):
        """Принять снимок как уже показанный, без события."""
        self.cancel()
        self.last_emitted = snapshot

    def cancel(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.pending_snapshot = None
