# utils/datetime_utils.py

import calendar
from datetime import datetime, date, timedelta, tzinfo
from typing import Optional, Tuple, Union

import pytz

DEFAULT_TIMEZONE = "Europe/Moscow"

class SystemClock:
    """Часы с учетом часового пояса, возвращают aware datetime"""

    def __init__(self, timezone: str = DEFAULT_TIMEZONE):
        self.tz = pytz.timezone(timezone)

    def __call__(self) -> datetime:
        return datetime.now(self.tz)

def to_local_date(dt: datetime, tz: Optional[tzinfo] = None) -> date:
    """Календарная дата события в часовом поясе пользователя"""
    if tz is not None and dt.tzinfo is not None:
        return dt.astimezone(tz).date()
    return dt.date()

def to_local_hour(dt: datetime, tz: Optional[tzinfo] = None) -> int:
    if tz is not None and dt.tzinfo is not None:
        return dt.astimezone(tz).hour
    return dt.hour

def week_start(day: Union[date, datetime]) -> date:
    """Понедельник недели, в которую попадает день"""
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())

def week_end(start: date) -> date:
    return start + timedelta(days=6)

def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Первый и последний день месяца"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)

def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1

def next_month(year: int, month: int) -> Tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1

def is_last_day_of_month(day: Union[date, datetime]) -> bool:
    if isinstance(day, datetime):
        day = day.date()
    return day == month_bounds(day.year, day.month)[1]
