"""Tests for the per-source render cache."""

from __future__ import annotations

import datetime as dt
import os

from mdsite.cache import cache_path, insert_date_line, markdown_to_html, render_markdown
from mdsite.content import READ_MORE_MARKER


def identity(text: str) -> str:
    return text


def test_first_render_writes_cache(tree) -> None:
    source = tree.post("post1", "# Original content\n")

    html, changed = render_markdown(source, tree.cache)

    assert changed is True
    assert "Original content" in html
    assert cache_path(source, tree.cache).read_text(encoding="utf-8") == html


def test_unchanged_source_uses_cache(tree) -> None:
    source = tree.post("post1", "# Content\n")
    render_markdown(source, tree.cache)
    cached = cache_path(source, tree.cache)
    before = cached.stat().st_mtime_ns

    html, changed = render_markdown(source, tree.cache)

    assert changed is False
    assert "Content" in html
    assert cached.stat().st_mtime_ns == before


def test_newer_source_invalidates_cache(tree) -> None:
    source = tree.post("post1", "# Original\n")
    render_markdown(source, tree.cache)
    source.write_text("# Updated\n", encoding="utf-8")
    tree.touch_future("post1")

    html, changed = render_markdown(source, tree.cache)

    assert changed is True
    assert "Updated" in html
    assert "Updated" in cache_path(source, tree.cache).read_text(encoding="utf-8")


def test_equal_mtimes_are_not_fresh(tree) -> None:
    source = tree.post("post1", "# Post\n")
    render_markdown(source, tree.cache)
    cached = cache_path(source, tree.cache)
    stat = source.stat()
    os.utime(cached, ns=(stat.st_atime_ns, stat.st_mtime_ns))

    _, changed = render_markdown(source, tree.cache)

    assert changed is True


def test_force_rerenders(tree) -> None:
    source = tree.post("post1", "# Post\n")
    render_markdown(source, tree.cache)

    _, changed = render_markdown(source, tree.cache, force=True)

    assert changed is True


def test_cache_key_is_file_stem(tree) -> None:
    source = tree.post("My Post", "# Hi\n")

    render_markdown(source, tree.cache)

    assert (tree.cache / "My Post.html").is_file()


def test_leading_date_stripped_and_marker_inserted(tree) -> None:
    source = tree.post("post1", "2024-01-02\n\n# Title\n\nIntro\n\n\nRest\n")

    html, _ = render_markdown(source, tree.cache, converter=identity)

    assert not html.startswith("2024-01-02")
    assert html.startswith("# Title")
    assert f"Intro\n\n{READ_MORE_MARKER}\n\nRest" in html


def test_insert_date_line_is_idempotent_and_keeps_mtime(tree) -> None:
    source = tree.post("post1", "# Title\n\nBody\n", age=3600)
    before = source.stat().st_mtime_ns
    expected = dt.datetime.fromtimestamp(source.stat().st_mtime).strftime("%Y-%m-%d")

    assert insert_date_line(source) is True
    assert source.read_text(encoding="utf-8") == f"{expected}\n\n# Title\n\nBody\n"
    assert source.stat().st_mtime_ns == before
    assert insert_date_line(source) is False
    assert source.read_text(encoding="utf-8").count(expected) == 1


def test_insert_date_line_leaves_dated_source(tree) -> None:
    source = tree.post("post1", "2023-07-01 10:00\n# Title\n")

    assert insert_date_line(source) is False
    assert source.read_text(encoding="utf-8") == "2023-07-01 10:00\n# Title\n"


def test_auto_date_only_runs_when_enabled(tree) -> None:
    plain = tree.post("plain", "# Plain\n")
    dated = tree.post("dated", "# Dated\n")

    render_markdown(plain, tree.cache, converter=identity)
    html, _ = render_markdown(dated, tree.cache, auto_date=True, converter=identity)

    assert plain.read_text(encoding="utf-8") == "# Plain\n"
    assert dated.read_text(encoding="utf-8").splitlines()[0] != "# Dated"
    assert html.startswith("# Dated")
    assert cache_path(dated, tree.cache).stat().st_mtime > dated.stat().st_mtime


def test_markdown_converter_output() -> None:
    html = markdown_to_html(f"# Hello\n\nIntro\n\n{READ_MORE_MARKER}\n\nRest\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")

    assert "<h1" in html and "Hello</h1>" in html
    assert READ_MORE_MARKER in html
    assert "<table>" in html


def test_fenced_code_is_highlighted() -> None:
    html = markdown_to_html("```python\nprint('hi')\n```\n")

    assert 'class="codehilite"' in html
    assert "print" in html

