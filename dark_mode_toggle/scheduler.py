import logging
from typing import TYPE_CHECKING

from dark_mode_toggle.clock import Clock, SystemClock
from dark_mode_toggle.settings import ConfigStore
from dark_mode_toggle.theme import ThemeSink
from dark_mode_toggle.window import is_within_light_window

if TYPE_CHECKING:
    from dark_mode_toggle.timer import PeriodicTimer

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 60_000


class SchedulerInitError(RuntimeError):
    pass


class ScheduleController:
    """Keeps the theme in step with the configured light-mode window.

    Forced refreshes always re-apply the computed theme (unless a manual
    override is pending); timer ticks only apply on a change of target. A
    manual override suppresses exactly one boundary crossing, after which
    the schedule is back in charge.
    """

    def __init__(
        self,
        settings: ConfigStore,
        theme: ThemeSink,
        timer: "PeriodicTimer | None",
        clock: Clock | None = None,
    ) -> None:
        if timer is None:
            raise SchedulerInitError("Unable to obtain a periodic timer for the scheduler.")
        self.settings = settings
        self.theme = theme
        self.clock = clock or SystemClock()
        self._timer = timer
        self._disposed = False
        self._has_baseline = False
        self._last_should_be_light = False

        self._timer.start(TICK_INTERVAL_MS, self.on_tick)
        logger.info("scheduler-start interval_ms=%s", TICK_INTERVAL_MS)
        self._evaluate(force=True)

    def refresh(self) -> None:
        self._evaluate(force=True)

    def on_tick(self) -> None:
        self._evaluate()

    def notify_manual_override(self) -> None:
        now = self.clock.now_utc()
        self.settings.record_manual_override(now)
        logger.info("scheduler-manual-override at=%s", now.isoformat())

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._timer.stop()
        logger.info("scheduler-disposed")

    def _evaluate(self, force: bool = False) -> None:
        if self._disposed:
            return

        if not self.settings.is_schedule_enabled:
            self._has_baseline = False
            return

        should_be_light = self._should_be_light()

        if force or not self._has_baseline:
            self._has_baseline = True
            self._last_should_be_light = should_be_light
            if self.settings.skip_next_transition:
                logger.info("scheduler-baseline suppressed should_be_light=%s", should_be_light)
                return
            self._apply(should_be_light, "refresh" if force else "baseline")
            return

        if should_be_light == self._last_should_be_light:
            return

        self._last_should_be_light = should_be_light
        if self.settings.skip_next_transition:
            self.settings.clear_skip_next_transition()
            logger.info("scheduler-transition skipped should_be_light=%s", should_be_light)
            return

        self._apply(should_be_light, "transition")

    def _should_be_light(self) -> bool:
        return is_within_light_window(
            self.clock.now_local_time_of_day(),
            self.settings.light_mode_start,
            self.settings.light_mode_end,
        )

    def _apply(self, should_be_light: bool, reason: str) -> None:
        logger.info("scheduler-apply should_be_light=%s reason=%s", should_be_light, reason)
        self.theme.set_theme(should_be_light)
