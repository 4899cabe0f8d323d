from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path

from .content import title_case

TAG = "tag"
PAGE = "page"
TEXT = "text"


@dataclass(frozen=True)
class TagInfo:
    slug: str
    label: str


@dataclass
class SourceFile:
    """One markdown source and everything known about it during a build."""

    path: Path
    stem: str
    slug: str
    title: str
    created_at: dt.datetime
    has_time: bool
    modified_at: dt.datetime
    content: str = ""
    tags: tuple[TagInfo, ...] = ()

    @property
    def display_title(self) -> str:
        return self.title or title_case(self.slug)


@dataclass(frozen=True)
class MenuEntry:
    kind: str
    slug: str
    label: str
    indent: int = 0


@dataclass
class MenuItem:
    url: str
    label: str
    active: bool = False
    children: list[MenuItem] = field(default_factory=list)


@dataclass(frozen=True)
class PostPreview:
    slug: str
    title: str
    preview: str
    url: str
    date: str
    tags: tuple[TagInfo, ...] = ()


@dataclass(frozen=True)
class PageLink:
    page: int
    url: str
    is_current: bool = False
    is_ellipsis: bool = False


@dataclass(frozen=True)
class SiteConfig:
    base_url: str = ""
    title: str = "My Site"
    description: str = ""
