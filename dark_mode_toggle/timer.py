import logging
from typing import Any, Callable, Protocol

from dark_mode_toggle.scheduler import SchedulerInitError

logger = logging.getLogger(__name__)


class PeriodicTimer(Protocol):
    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class TkPeriodicTimer:
    def __init__(self, root: Any) -> None:
        if root is None:
            raise SchedulerInitError("Unable to obtain a Tk root for the scheduler timer.")
        self.root = root
        self._job: str | None = None
        self._interval_ms = 0
        self._callback: Callable[[], None] | None = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.stop()
        self._interval_ms = interval_ms
        self._callback = callback
        self._job = self.root.after(interval_ms, self._fire)

    def stop(self) -> None:
        job = self._job
        self._job = None
        self._callback = None
        if job is not None:
            try:
                self.root.after_cancel(job)
            except Exception as ex:
                logger.debug("timer-cancel failed job=%s error=%s", job, ex)

    def _fire(self) -> None:
        callback = self._callback
        if callback is None:
            return
        fired = self._job
        try:
            callback()
        finally:
            # A callback that restarted the timer has already armed its own job.
            if self._callback is not None and self._job == fired:
                self._job = self.root.after(self._interval_ms, self._fire)
