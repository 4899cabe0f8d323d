from __future__ import annotations

from typing import Sequence, TypeVar

from .models import PageLink

T = TypeVar("T")

FULL_LINKS_LIMIT = 7
WINDOW = 2


def paginate(items: Sequence[T], per_page: int) -> list[list[T]]:
    per_page = max(1, per_page)
    if not items:
        return [[]]
    return [list(items[start : start + per_page]) for start in range(0, len(items), per_page)]


def page_name(name: str, page: int) -> str:
    if page <= 1:
        return name
    return f"{name}-{page}"


def page_url(name: str, page: int, suffix: str = ".html") -> str:
    return f"{page_name(name, page)}{suffix}"


def page_links(name: str, current: int, total: int, suffix: str = ".html") -> list[PageLink]:
    if total <= 1:
        return []

    def link(page: int) -> PageLink:
        return PageLink(page=page, url=page_url(name, page, suffix), is_current=page == current)

    if total <= FULL_LINKS_LIMIT:
        return [link(page) for page in range(1, total + 1)]

    start = max(2, current - WINDOW)
    end = min(total - 1, current + WINDOW)
    links = [link(1)]
    if start > 2:
        links.append(PageLink(page=0, url="", is_ellipsis=True))
    links.extend(link(page) for page in range(start, end + 1))
    if end < total - 1:
        links.append(PageLink(page=0, url="", is_ellipsis=True))
    links.append(link(total))
    return links
