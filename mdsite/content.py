from __future__ import annotations

import datetime as dt
import re
import unicodedata

SEPARATOR_RE = re.compile(r"[\s_-]+")
INVALID_RE = re.compile(r"[^a-z0-9-]+")
HYPHENS_RE = re.compile(r"-{2,}")
DATE_LINE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[ T](\d{1,2}:\d{2}(?::\d{2})?))?$")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
HR_RE = re.compile(r"<hr\s*/?>", re.IGNORECASE)
READ_MORE_MARKER = "<!-- more -->"


def normalize(text: str) -> str:
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = SEPARATOR_RE.sub("-", text.lower())
    text = INVALID_RE.sub("", text)
    text = HYPHENS_RE.sub("-", text)
    return text.strip("-")


def title_case(slug: str) -> str:
    parts = [part for part in slug.split("-") if part]
    return " ".join(part[:1].upper() + part[1:] for part in parts)


def first_line(text: str) -> tuple[int, str]:
    lines = text.lstrip("\ufeff").splitlines()
    for index, line in enumerate(lines):
        if line.strip():
            return index, line.strip()
    return -1, ""


def parse_date_line(line: str) -> tuple[dt.datetime, bool] | None:
    match = DATE_LINE_RE.match(line.strip())
    if not match:
        return None
    try:
        day = dt.date.fromisoformat(match.group(1))
    except ValueError:
        return None
    time_value = match.group(2)
    if not time_value:
        return dt.datetime.combine(day, dt.time()), False
    try:
        moment = dt.time(*(int(part) for part in time_value.split(":")))
    except ValueError:
        return None
    return dt.datetime.combine(day, moment), True


def parse_leading_date(text: str) -> tuple[dt.datetime | None, bool]:
    _, line = first_line(text)
    parsed = parse_date_line(line) if line else None
    if parsed is None:
        return None, False
    return parsed


def has_leading_date(text: str) -> bool:
    return parse_leading_date(text)[0] is not None


def strip_date_line(text: str) -> str:
    index, line = first_line(text)
    if index < 0 or parse_date_line(line) is None:
        return text
    lines = text.lstrip("\ufeff").splitlines()
    return "\n".join(lines[index + 1 :]).lstrip("\n")


def extract_title(text: str) -> str:
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("# "):
            return stripped[2:].strip()
    return ""


def insert_read_more(text: str) -> str:
    lines = text.split("\n")
    in_fence = False
    fence_marker = ""
    seen_content = False
    index = 0
    while index < len(lines):
        line = lines[index]
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            seen_content = True
            index += 1
            continue
        if in_fence or line.strip():
            seen_content = seen_content or bool(line.strip())
            index += 1
            continue
        end = index
        while end < len(lines) and not lines[end].strip():
            end += 1
        if seen_content and end - index >= 2:
            return "\n".join(lines[:index] + ["", READ_MORE_MARKER, ""] + lines[end:])
        index = end
    return text


def extract_preview(html_text: str) -> str:
    pos = html_text.find(READ_MORE_MARKER)
    if pos >= 0:
        return html_text[:pos].rstrip()
    match = HR_RE.search(html_text)
    if match:
        return html_text[: match.start()].rstrip()
    end = html_text.find("</p>")
    if end >= 0:
        return html_text[: end + len("</p>")]
    return html_text
