from __future__ import annotations

import os
import time
from dataclasses import replace
from pathlib import Path

import pytest

from mdsite.builder import BuildReport, build_site
from mdsite.config import BuildOptions
from mdsite.models import SiteConfig


class ContentTree:
    """Throwaway content/output/cache directories for build tests."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path
        self.pages = tmp_path / "pages"
        self.output = tmp_path / "public"
        self.cache = tmp_path / "html"
        self.pages.mkdir()

    def post(self, name: str, text: str, age: float = 60) -> Path:
        """Write ``name.md``; ``age`` seconds in the past controls ordering."""
        path = self.pages / f"{name}.md"
        path.write_text(text, encoding="utf-8")
        stamp = time.time() - age
        os.utime(path, (stamp, stamp))
        return path

    def touch_future(self, name: str, seconds: float = 10) -> None:
        path = self.pages / f"{name}.md"
        stamp = time.time() + seconds
        os.utime(path, (stamp, stamp))

    def bump(self, path: Path, seconds: float = 10) -> None:
        """Move an mtime into the future so the change is visible whatever the timestamp granularity."""
        stamp = time.time() + seconds
        os.utime(path, (stamp, stamp), follow_symlinks=False)

    def tag(self, name: str, posts: list[str]) -> Path:
        tag_dir = self.pages / name
        tag_dir.mkdir(exist_ok=True)
        for post in posts:
            (tag_dir / f"{post}.md").symlink_to(Path("..") / f"{post}.md")
        return tag_dir

    def menu(self, text: str) -> None:
        (self.pages / "menu.list").write_text(text, encoding="utf-8")

    def options(self, **overrides) -> BuildOptions:
        options = BuildOptions(
            content_dir=self.pages,
            output_dir=self.output,
            cache_dir=self.cache,
            quiet=True,
            site=SiteConfig(title="Test Site"),
        )
        return replace(options, **overrides)

    def build(self, **overrides) -> BuildReport:
        return build_site(self.options(**overrides))

    def read(self, name: str) -> str:
        path = self.output / name
        return path.read_text(encoding="utf-8") if path.exists() else ""

    def mtime(self, path: Path) -> int:
        return path.stat().st_mtime_ns


@pytest.fixture
def tree(tmp_path: Path) -> ContentTree:
    return ContentTree(tmp_path)
