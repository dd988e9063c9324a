import datetime
from typing import Protocol


class Clock(Protocol):
    def now_local_time_of_day(self) -> datetime.time: ...

    def now_utc(self) -> datetime.datetime: ...


class SystemClock:
    def now_local_time_of_day(self) -> datetime.time:
        return datetime.datetime.now().time()

    def now_utc(self) -> datetime.datetime:
        return datetime.datetime.now(datetime.timezone.utc)
