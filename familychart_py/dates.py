"""Precision-aware date parsing for person attributes.

Dates in family data are often partial ("1995", "1995-03"). Parsing keeps the
precision instead of widening partial dates to a full calendar day, so a
year-only birthday is displayed and compared as a year.

Accepted formats: ``YYYY``, ``YYYY-MM``, ``MM/YYYY``, ``YYYY-MM-DD``,
``MM/DD/YYYY`` and ``DD/MM/YYYY`` / ``DD.MM.YYYY`` (the US order wins when
both readings are valid).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Tuple
import calendar
import datetime
import re


_YEAR_ONLY = re.compile(r"^(\d{4})$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$|^(\d{1,2})/(\d{4})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_US_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_EU_DATE = re.compile(r"^(\d{1,2})[/.](\d{1,2})[/.](\d{4})$")


@dataclass
class DateInfo:
    original: str = ""
    precision: str = "unknown"  # 'year'|'month'|'day'|'unknown'
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    is_valid: bool = False

    def to_date(self) -> Optional[datetime.date]:
        if not self.is_valid or self.precision != "day":
            return None
        return datetime.date(self.year, self.month, self.day)


def _valid_year(y: int) -> bool:
    return 1 <= y <= 9999


def _valid_month(m: int) -> bool:
    return 1 <= m <= 12


def _valid_day(d: int, m: int, y: int) -> bool:
    return d >= 1 and d <= calendar.monthrange(y, m)[1]


def _full(original: str, y: int, m: int, d: int) -> Optional[DateInfo]:
    if _valid_year(y) and _valid_month(m) and _valid_day(d, m, y):
        return DateInfo(original, "day", y, m, d, True)
    return None


def parse_date(value: Optional[str]) -> DateInfo:
    if not value or not isinstance(value, str):
        return DateInfo(original=value or "")
    txt = value.strip()
    if not txt:
        return DateInfo(original=value)

    m = _YEAR_ONLY.match(txt)
    if m and _valid_year(int(m.group(1))):
        return DateInfo(value, "year", int(m.group(1)), None, None, True)

    m = _YEAR_MONTH.match(txt)
    if m:
        year = int(m.group(1) or m.group(4))
        month = int(m.group(2) or m.group(3))
        if _valid_year(year) and _valid_month(month):
            return DateInfo(value, "month", year, month, None, True)

    m = _ISO_DATE.match(txt)
    if m:
        info = _full(value, int(m.group(1)), int(m.group(2)), int(m.group(3)))
        if info:
            return info

    m = _US_DATE.match(txt)
    if m:
        info = _full(value, int(m.group(3)), int(m.group(1)), int(m.group(2)))
        if info:
            return info

    m = _EU_DATE.match(txt)
    if m:
        info = _full(value, int(m.group(3)), int(m.group(2)), int(m.group(1)))
        if info:
            return info

    return DateInfo(original=value)


def create_date_info(year: int, month: Optional[int] = None, day: Optional[int] = None) -> DateInfo:
    if not _valid_year(year):
        return DateInfo()
    if month is not None and _valid_month(month):
        if day is not None and _valid_day(day, month, year):
            return DateInfo(f"{year:04d}-{month:02d}-{day:02d}", "day", year, month, day, True)
        return DateInfo(f"{year:04d}-{month:02d}", "month", year, month, None, True)
    return DateInfo(str(year), "year", year, None, None, True)


def format_date_info(info: DateInfo, month_format: str = "%B") -> str:
    """Format for display at the date's own precision.

    Invalid dates are returned as their original text.
    """
    if not info.is_valid:
        return info.original
    if info.precision == "year":
        return str(info.year)
    month_name = datetime.date(info.year, info.month, 15).strftime(month_format)
    if info.precision == "month":
        return f"{month_name} {info.year}"
    return f"{month_name} {info.day}, {info.year}"


def format_date(value: Optional[str], month_format: str = "%B") -> str:
    return format_date_info(parse_date(value), month_format=month_format)


def _sort_tuple(info: DateInfo) -> Tuple[int, int, int, int]:
    # invalid dates sort last; missing month/day count as 1
    if not info.is_valid:
        return (1, 0, 0, 0)
    return (0, info.year, info.month or 1, info.day or 1)


def compare_date_info(a: DateInfo, b: DateInfo) -> int:
    ta, tb = _sort_tuple(a), _sort_tuple(b)
    return (ta > tb) - (ta < tb)


def compare_dates(a: Optional[str], b: Optional[str]) -> int:
    return compare_date_info(parse_date(a), parse_date(b))


def birthday_key(person: Any) -> Tuple[int, int, int, int]:
    """Sort key for persons by their ``data['birthday']`` value."""
    data = getattr(person, "data", None) or {}
    return _sort_tuple(parse_date(data.get("birthday")))
