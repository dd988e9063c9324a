import datetime

import pytest

from dark_mode_toggle.settings import ConfigStore


class FakeClock:
    def __init__(self, hour: int = 10, minute: int = 0) -> None:
        self.local = datetime.time(hour, minute)
        self.utc = datetime.datetime(2024, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)

    def set(self, hour: int, minute: int = 0) -> None:
        self.local = datetime.time(hour, minute)

    def now_local_time_of_day(self) -> datetime.time:
        return self.local

    def now_utc(self) -> datetime.datetime:
        return self.utc


class RecordingSink:
    def __init__(self) -> None:
        self.calls: list[bool] = []

    def set_theme(self, is_light: bool) -> None:
        self.calls.append(is_light)


class FakeTimer:
    def __init__(self) -> None:
        self.interval_ms = None
        self.callback = None
        self.stop_calls = 0

    def start(self, interval_ms, callback) -> None:
        self.interval_ms = interval_ms
        self.callback = callback

    def stop(self) -> None:
        self.stop_calls += 1
        self.callback = None

    def fire(self) -> None:
        if self.callback is not None:
            self.callback()


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "config.ini")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def timer():
    return FakeTimer()
