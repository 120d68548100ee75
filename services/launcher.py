import shlex
from typing import Callable, Optional

from gi.repository import Gio, GLib
from loguru import logger

LaunchCallback = Callable[[bool, Optional[str]], None]


def launch_application(command: str, on_result: Optional[LaunchCallback] = None) -> None:
    """
    Запустить внешнее приложение без блокировки.

    Результат запуска сообщается через on_result(ok, error) из главного
    цикла GLib, а не синхронно.
    """

    def _report(ok: bool, error: Optional[str]) -> bool:
        if on_result is not None:
            on_result(ok, error)
        return False

    try:
        argv = shlex.split(command)
    except ValueError as e:
        GLib.idle_add(_report, False, f"invalid command: {e}")
        return

    if not argv:
        GLib.idle_add(_report, False, "empty command")
        return

    try:
        process = Gio.Subprocess.new(argv, Gio.SubprocessFlags.NONE)
    except GLib.Error as e:
        GLib.idle_add(_report, False, e.message)
        return

    logger.debug(f"Launched {argv[0]} (pid {process.get_identifier()})")
    process.wait_check_async(None, _on_exit, argv[0])
    GLib.idle_add(_report, True, None)


def _on_exit(process: Gio.Subprocess, result: Gio.AsyncResult, name: str) -> None:
    try:
        process.wait_check_finish(result)
    except GLib.Error as e:
        logger.warning(f"{name} exited with error: {e.message}")


def notify_failure(summary: str, body: str) -> None:
    """Уведомление хосту о некритичной ошибке."""
    try:
        Gio.Subprocess.new(["notify-send", "-a", "volume-pill", summary, body],
                           Gio.SubprocessFlags.NONE)
    except GLib.Error as e:
        logger.warning(f"notify-send unavailable: {e.message}")
