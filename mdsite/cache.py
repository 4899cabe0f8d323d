from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import markdown

from .content import has_leading_date, insert_read_more, strip_date_line
from .render import read_text, write_text
from .utils import DATE_FMT, mtime

CACHE_SUFFIX = ".html"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "codehilite"]
MARKDOWN_EXTENSION_CONFIGS = {"codehilite": {"guess_lang": False, "css_class": "codehilite"}}

Converter = Callable[[str], str]


def markdown_to_html(text: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS, extension_configs=MARKDOWN_EXTENSION_CONFIGS)
    return md.convert(text)


def cache_path(source: Path, cache_dir: Path) -> Path:
    return cache_dir / f"{source.stem}{CACHE_SUFFIX}"


def is_fresh(source: Path, cached: Path) -> bool:
    if not cached.is_file():
        return False
    return cached.stat().st_mtime > source.stat().st_mtime


def insert_date_line(path: Path) -> bool:
    text = read_text(path)
    if has_leading_date(text):
        return False
    stat = path.stat()
    stamp = mtime(path).strftime(DATE_FMT)
    write_text(path, f"{stamp}\n\n{text}")
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns))
    return True


def prepare_markdown(text: str) -> str:
    return insert_read_more(strip_date_line(text))


def render_markdown(
    path: Path,
    cache_dir: Path,
    force: bool = False,
    auto_date: bool = False,
    converter: Converter = markdown_to_html,
) -> tuple[str, bool]:
    cached = cache_path(path, cache_dir)
    if not force and is_fresh(path, cached):
        return read_text(cached), False
    if auto_date:
        insert_date_line(path)
    rendered = converter(prepare_markdown(read_text(path)))
    write_text(cached, rendered)
    return rendered, True
