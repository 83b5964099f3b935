import datetime

import pytest

from familychart_py.dates import (
    birthday_key,
    compare_dates,
    create_date_info,
    format_date,
    parse_date,
)
from familychart_py.models import Person


@pytest.mark.parametrize(
    "text, precision, ymd",
    [
        ("1995", "year", (1995, None, None)),
        ("1995-03", "month", (1995, 3, None)),
        ("3/1995", "month", (1995, 3, None)),
        ("1995-03-15", "day", (1995, 3, 15)),
        ("03/15/1995", "day", (1995, 3, 15)),
        ("15/03/1995", "day", (1995, 3, 15)),
        ("15.03.1995", "day", (1995, 3, 15)),
        (" 2000 ", "year", (2000, None, None)),
    ],
)
def test_parse_date_formats(text, precision, ymd):
    info = parse_date(text)
    assert info.is_valid
    assert info.precision == precision
    assert (info.year, info.month, info.day) == ymd
    assert info.original == text


def test_us_order_wins_when_ambiguous():
    info = parse_date("04/05/2001")
    assert (info.month, info.day) == (4, 5)


@pytest.mark.parametrize("text", ["", None, "abc", "1995-13", "1995-02-30", "0000", "13/13/2000"])
def test_invalid_dates(text):
    info = parse_date(text)
    assert not info.is_valid
    assert info.precision == "unknown"


def test_to_date_only_for_full_dates():
    assert parse_date("2004-02-29").to_date() == datetime.date(2004, 2, 29)
    assert parse_date("2004-02").to_date() is None


def test_create_date_info():
    assert create_date_info(1995).precision == "year"
    assert create_date_info(1995, 3).original == "1995-03"
    d = create_date_info(1995, 3, 15)
    assert d.precision == "day" and d.original == "1995-03-15"
    assert create_date_info(1995, 2, 31).precision == "month"
    assert not create_date_info(0).is_valid


def test_format_date_keeps_precision():
    assert format_date("1995") == "1995"
    assert format_date("1995-03") == "March 1995"
    assert format_date("1995-03-15") == "March 15, 1995"
    assert format_date("1995-03-15", month_format="%b") == "Mar 15, 1995"
    assert format_date("someday") == "someday"


def test_compare_dates():
    assert compare_dates("1995", "1996") == -1
    assert compare_dates("1995-03-15", "1995-03") == 1
    assert compare_dates("1995", "1995-01-01") == 0
    assert compare_dates("junk", "1995") == 1
    assert compare_dates(None, None) == 0


def test_birthday_key_sorts_unknown_last():
    people = [
        Person(id="a", data={"birthday": "2001"}),
        Person(id="b"),
        Person(id="c", data={"birthday": "12/24/1999"}),
    ]
    assert [p.id for p in sorted(people, key=birthday_key)] == ["c", "a", "b"]
