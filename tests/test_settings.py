import datetime

import pytest

from dark_mode_toggle.settings import (
    DEFAULT_LIGHT_END,
    DEFAULT_LIGHT_START,
    ConfigStore,
    format_hhmm,
    is_valid_hhmm,
    normalize_time,
    parse_hhmm,
)


def test_defaults_when_file_missing(tmp_path):
    store = ConfigStore(tmp_path / "config.ini")

    assert store.is_schedule_enabled is False
    assert store.light_mode_start == DEFAULT_LIGHT_START == datetime.time(9, 0)
    assert store.light_mode_end == DEFAULT_LIGHT_END == datetime.time(17, 0)
    assert store.last_manual_toggle_utc is None
    assert store.skip_next_transition is False


def test_load_materializes_defaults_with_key_case_preserved(tmp_path):
    path = tmp_path / "config.ini"
    ConfigStore(path)

    text = path.read_text(encoding="utf-8")
    assert "ScheduleEnabled = false" in text
    assert "LightModeStartHour = 9" in text
    assert "LightModeEndHour = 17" in text
    assert "SkipNextTransition = false" in text


def test_values_survive_reload(tmp_path):
    path = tmp_path / "config.ini"
    store = ConfigStore(path)
    store.set_schedule_enabled(True)
    store.set_light_mode_start(22, 30)
    store.set_light_mode_end(6, 15)
    toggled = datetime.datetime(2024, 5, 4, 21, 10, 3, 250, tzinfo=datetime.timezone.utc)
    store.record_manual_override(toggled)

    again = ConfigStore(path)
    assert again.is_schedule_enabled is True
    assert again.light_mode_start == datetime.time(22, 30)
    assert again.light_mode_end == datetime.time(6, 15)
    assert again.last_manual_toggle_utc == toggled
    assert again.skip_next_transition is True


def test_record_manual_override_converts_to_utc(store):
    plus_two = datetime.timezone(datetime.timedelta(hours=2))
    store.record_manual_override(datetime.datetime(2024, 1, 1, 10, 0, tzinfo=plus_two))

    assert store.last_manual_toggle_utc == datetime.datetime(2024, 1, 1, 8, 0, tzinfo=datetime.timezone.utc)
    assert store.last_manual_toggle_utc.utcoffset() == datetime.timedelta(0)


def test_clear_skip_next_transition_keeps_toggle_time(store):
    when = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
    store.record_manual_override(when)
    store.clear_skip_next_transition()

    assert store.skip_next_transition is False
    assert store.last_manual_toggle_utc == when


@pytest.mark.parametrize(
    "hour, minute, expected",
    [
        (9, 0, datetime.time(9, 0)),
        (24, 0, datetime.time(0, 0)),
        (25, 61, datetime.time(1, 1)),
        (-1, -1, datetime.time(23, 59)),
        (-25, 120, datetime.time(23, 0)),
    ],
)
def test_normalize_time(hour, minute, expected):
    assert normalize_time(hour, minute) == expected


def test_setters_normalize_out_of_range_values(store):
    store.set_light_mode_start(-2, 75)
    store.set_light_mode_end(48, -5)

    assert store.light_mode_start == datetime.time(22, 15)
    assert store.light_mode_end == datetime.time(0, 55)


def test_wrong_types_fall_back_to_defaults(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(
        "[Schedule]\n"
        "ScheduleEnabled = maybe\n"
        "LightModeStartHour = nine\n"
        "LightModeStartMinute = 30\n"
        "LightModeEndHour = 18.5\n"
        "[Override]\n"
        "LastManualToggleTime = yesterday\n"
        "SkipNextTransition = 2\n",
        encoding="utf-8",
    )
    store = ConfigStore(path)

    assert store.is_schedule_enabled is False
    assert store.light_mode_start == datetime.time(9, 30)
    assert store.light_mode_end == datetime.time(17, 0)
    assert store.last_manual_toggle_utc is None
    assert store.skip_next_transition is False


def test_out_of_range_stored_values_are_normalized_on_read(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Schedule]\nLightModeStartHour = 30\nLightModeStartMinute = -10\n", encoding="utf-8")

    assert ConfigStore(path).light_mode_start == datetime.time(6, 50)


def test_corrupt_file_reads_as_defaults(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("this is not an ini file\n[[[\n", encoding="utf-8")
    store = ConfigStore(path)

    assert store.is_schedule_enabled is False
    assert store.light_mode_start == datetime.time(9, 0)


def test_absurd_toggle_time_reads_as_absent(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Override]\nLastManualToggleTime = 99999999999999999999999\n", encoding="utf-8")

    assert ConfigStore(path).last_manual_toggle_utc is None


def test_snapshots_are_copies(store):
    snapshot = store.schedule
    snapshot.enabled = True

    assert store.is_schedule_enabled is False
    assert store.override.skip_next_transition is False


@pytest.mark.parametrize(
    "text, valid",
    [
        ("09:00", True),
        ("23:59", True),
        ("24:00", False),
        ("9:00", False),
        ("ab:cd", False),
        ("12:60", False),
        ("\u00b2\u00b3:00", False),
        ("12:\u0660\u0660", False),
    ],
)
def test_is_valid_hhmm(text, valid):
    assert is_valid_hhmm(text) is valid


def test_parse_and_format_hhmm():
    assert parse_hhmm(" 07:05 ") == datetime.time(7, 5)
    assert format_hhmm(datetime.time(7, 5)) == "07:05"
    with pytest.raises(ValueError):
        parse_hhmm("7am")


def test_write_failure_keeps_in_memory_values(tmp_path, caplog):
    blocked = tmp_path / "blocked"
    blocked.mkdir()
    store = ConfigStore(blocked)

    with caplog.at_level("WARNING", logger="dark_mode_toggle.settings"):
        store.set_schedule_enabled(True)
        store.set_light_mode_start(7, 30)

    assert store.is_schedule_enabled is True
    assert store.light_mode_start == datetime.time(7, 30)
    assert "settings-write failed" in caplog.text
