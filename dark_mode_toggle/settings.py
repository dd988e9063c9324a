import configparser
import datetime
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEDULE_SECTION = "Schedule"
OVERRIDE_SECTION = "Override"

SCHEDULE_ENABLED_KEY = "ScheduleEnabled"
LIGHT_START_HOUR_KEY = "LightModeStartHour"
LIGHT_START_MINUTE_KEY = "LightModeStartMinute"
LIGHT_END_HOUR_KEY = "LightModeEndHour"
LIGHT_END_MINUTE_KEY = "LightModeEndMinute"
LAST_MANUAL_TOGGLE_KEY = "LastManualToggleTime"
SKIP_NEXT_TRANSITION_KEY = "SkipNextTransition"

DEFAULT_LIGHT_START = datetime.time(9, 0)
DEFAULT_LIGHT_END = datetime.time(17, 0)

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


@dataclass
class ScheduleConfig:
    enabled: bool = False
    light_start: datetime.time = DEFAULT_LIGHT_START
    light_end: datetime.time = DEFAULT_LIGHT_END


@dataclass
class OverrideState:
    last_manual_toggle_utc: datetime.datetime | None = None
    skip_next_transition: bool = False


def normalize_time(hour: int, minute: int) -> datetime.time:
    return datetime.time(((hour % 24) + 24) % 24, ((minute % 60) + 60) % 60)


def is_valid_hhmm(text: str) -> bool:
    if len(text) != 5 or text[2] != ":":
        return False
    h, m = text.split(":", 1)
    if not (text.isascii() and h.isdigit() and m.isdigit()):
        return False
    return 0 <= int(h) <= 23 and 0 <= int(m) <= 59


def parse_hhmm(text: str) -> datetime.time:
    text = text.strip()
    if not is_valid_hhmm(text):
        raise ValueError(f"expected HH:MM, got {text!r}")
    h, m = text.split(":", 1)
    return datetime.time(int(h), int(m))


def format_hhmm(value: datetime.time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def utc_to_micros(value: datetime.datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return (value - _EPOCH) // datetime.timedelta(microseconds=1)


def micros_to_utc(value: int) -> datetime.datetime:
    return _EPOCH + datetime.timedelta(microseconds=value)


class ConfigStore:
    """Schedule settings and manual-override bookkeeping backed by an INI file.

    The store is the only writer of the file. Every setter updates the
    in-memory value and rewrites the whole file. Reads never raise: a missing
    file, a missing option or a value of the wrong type falls back to the
    documented default.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = Path(config_path)
        self._schedule = ScheduleConfig()
        self._override = OverrideState()
        self._load()

    @property
    def schedule(self) -> ScheduleConfig:
        return ScheduleConfig(self._schedule.enabled, self._schedule.light_start, self._schedule.light_end)

    @property
    def override(self) -> OverrideState:
        return OverrideState(self._override.last_manual_toggle_utc, self._override.skip_next_transition)

    @property
    def is_schedule_enabled(self) -> bool:
        return self._schedule.enabled

    @property
    def light_mode_start(self) -> datetime.time:
        return self._schedule.light_start

    @property
    def light_mode_end(self) -> datetime.time:
        return self._schedule.light_end

    @property
    def last_manual_toggle_utc(self) -> datetime.datetime | None:
        return self._override.last_manual_toggle_utc

    @property
    def skip_next_transition(self) -> bool:
        return self._override.skip_next_transition

    def set_schedule_enabled(self, enabled: bool) -> None:
        self._schedule.enabled = bool(enabled)
        self._save()

    def set_light_mode_start(self, hour: int, minute: int) -> None:
        self._schedule.light_start = normalize_time(hour, minute)
        self._save()

    def set_light_mode_end(self, hour: int, minute: int) -> None:
        self._schedule.light_end = normalize_time(hour, minute)
        self._save()

    def record_manual_override(self, utc_now: datetime.datetime) -> None:
        if utc_now.tzinfo is None:
            utc_now = utc_now.replace(tzinfo=datetime.timezone.utc)
        self._override.last_manual_toggle_utc = utc_now.astimezone(datetime.timezone.utc)
        self._override.skip_next_transition = True
        self._save()

    def clear_skip_next_transition(self) -> None:
        self._override.skip_next_transition = False
        self._save()

    def _load(self) -> None:
        cfg = self._new_parser()
        if self.config_path.exists():
            try:
                cfg.read(self.config_path, encoding="utf-8")
            except (configparser.Error, UnicodeDecodeError) as ex:
                logger.debug("settings-read failed path=%s error=%s", self.config_path, ex)
                cfg = self._new_parser()

        self._schedule = ScheduleConfig(
            enabled=self._read_bool(cfg, SCHEDULE_SECTION, SCHEDULE_ENABLED_KEY, False),
            light_start=normalize_time(
                self._read_int(cfg, SCHEDULE_SECTION, LIGHT_START_HOUR_KEY, DEFAULT_LIGHT_START.hour),
                self._read_int(cfg, SCHEDULE_SECTION, LIGHT_START_MINUTE_KEY, DEFAULT_LIGHT_START.minute),
            ),
            light_end=normalize_time(
                self._read_int(cfg, SCHEDULE_SECTION, LIGHT_END_HOUR_KEY, DEFAULT_LIGHT_END.hour),
                self._read_int(cfg, SCHEDULE_SECTION, LIGHT_END_MINUTE_KEY, DEFAULT_LIGHT_END.minute),
            ),
        )

        toggle_micros = self._read_int(cfg, OVERRIDE_SECTION, LAST_MANUAL_TOGGLE_KEY, None)
        last_toggle = None
        if toggle_micros is not None:
            try:
                last_toggle = micros_to_utc(toggle_micros)
            except OverflowError:
                logger.debug("settings-read out-of-range key=%s value=%s", LAST_MANUAL_TOGGLE_KEY, toggle_micros)
        self._override = OverrideState(
            last_manual_toggle_utc=last_toggle,
            skip_next_transition=self._read_bool(cfg, OVERRIDE_SECTION, SKIP_NEXT_TRANSITION_KEY, False),
        )

        self._save()

    def _save(self) -> None:
        # In-memory values stay authoritative when the file cannot be written.
        try:
            self._write()
        except OSError as ex:
            logger.warning("settings-write failed path=%s error=%s", self.config_path, ex)

    def _write(self) -> None:
        s = self._schedule
        o = self._override
        cfg = self._new_parser()
        cfg[SCHEDULE_SECTION] = {
            SCHEDULE_ENABLED_KEY: "true" if s.enabled else "false",
            LIGHT_START_HOUR_KEY: str(s.light_start.hour),
            LIGHT_START_MINUTE_KEY: str(s.light_start.minute),
            LIGHT_END_HOUR_KEY: str(s.light_end.hour),
            LIGHT_END_MINUTE_KEY: str(s.light_end.minute),
        }
        cfg[OVERRIDE_SECTION] = {
            LAST_MANUAL_TOGGLE_KEY: "" if o.last_manual_toggle_utc is None else str(utc_to_micros(o.last_manual_toggle_utc)),
            SKIP_NEXT_TRANSITION_KEY: "true" if o.skip_next_transition else "false",
        }
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as f:
            cfg.write(f)

    @staticmethod
    def _new_parser() -> configparser.ConfigParser:
        cfg = configparser.ConfigParser(interpolation=None)
        # Keep option names as written.
        cfg.optionxform = str
        return cfg

    @staticmethod
    def _read_int(cfg: configparser.ConfigParser, section: str, key: str, default: int | None) -> int | None:
        try:
            return cfg.getint(section, key, fallback=default)
        except ValueError:
            logger.debug("settings-read type-mismatch section=%s key=%s", section, key)
            return default

    @staticmethod
    def _read_bool(cfg: configparser.ConfigParser, section: str, key: str, default: bool) -> bool:
        try:
            return cfg.getboolean(section, key, fallback=default)
        except ValueError:
            logger.debug("settings-read type-mismatch section=%s key=%s", section, key)
            return default
