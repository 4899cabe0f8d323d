from __future__ import annotations

import datetime as dt
from pathlib import Path

DATE_FMT = "%Y-%m-%d"
TIME_FMT = "%H:%M"
DEFAULT_DATE_FORMAT = "eu-long"

DATE_PRESETS = {
    "iso": "%Y-%m-%d",
    "us-long": "%B %o, %Y",
    "us-short": "%N/%n/%Y",
    "eu-long": "%n %B %Y",
    "eu-medium": "%n %b %Y",
    "eu-short": "%n.%N.%Y",
    "uk": "%o %B %Y",
}


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    return f"{base}/{path}"


def ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def resolve_date_format(name: str) -> str:
    name = (name or "").strip()
    if not name:
        return DATE_PRESETS[DEFAULT_DATE_FORMAT]
    return DATE_PRESETS.get(name, name)


def format_date(value: dt.datetime, fmt: str = DEFAULT_DATE_FORMAT, with_time: bool = False) -> str:
    pattern = resolve_date_format(fmt)
    if with_time:
        pattern = f"{pattern} {TIME_FMT}"
    pattern = (
        pattern.replace("%o", f"{value.day}{ordinal_suffix(value.day)}")
        .replace("%n", str(value.day))
        .replace("%N", str(value.month))
    )
    return value.strftime(pattern)


def mtime(path: Path) -> dt.datetime:
    return dt.datetime.fromtimestamp(path.stat().st_mtime)
