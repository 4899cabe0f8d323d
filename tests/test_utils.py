from __future__ import annotations

import datetime as dt

import pytest

from mdsite.utils import format_date, join_url, ordinal_suffix, parse_bool, parse_int, resolve_date_format

DAY = dt.datetime(2024, 3, 1, 9, 5)


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        ("iso", "2024-03-01"),
        ("us-long", "March 1st, 2024"),
        ("us-short", "3/1/2024"),
        ("eu-long", "1 March 2024"),
        ("eu-medium", "1 Mar 2024"),
        ("eu-short", "1.3.2024"),
        ("uk", "1st March 2024"),
        ("%d/%m/%Y", "01/03/2024"),
    ],
)
def test_format_date_presets(fmt: str, expected: str) -> None:
    assert format_date(DAY, fmt) == expected


def test_format_date_with_time() -> None:
    assert format_date(DAY, "iso", with_time=True) == "2024-03-01 09:05"
    assert format_date(DAY) == "1 March 2024"


@pytest.mark.parametrize(
    ("day", "suffix"),
    [(1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (11, "th"), (12, "th"), (13, "th"), (21, "st"), (22, "nd"), (31, "st")],
)
def test_ordinal_suffix(day: int, suffix: str) -> None:
    assert ordinal_suffix(day) == suffix


def test_resolve_date_format_falls_back_to_default() -> None:
    assert resolve_date_format("") == "%n %B %Y"
    assert resolve_date_format("%Y") == "%Y"


def test_parse_helpers() -> None:
    assert parse_bool("Yes") is True
    assert parse_bool("off") is False
    assert parse_bool(None) is False
    assert parse_int("12", 5) == 12
    assert parse_int("twelve", 5) == 5
    assert parse_int(None, 5) == 5


def test_join_url() -> None:
    assert join_url("https://example.com/", "/about") == "https://example.com/about"
    assert join_url("https://example.com", "") == "https://example.com"
