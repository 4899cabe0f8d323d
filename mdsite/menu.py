from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .content import normalize, title_case
from .models import PAGE, TAG, TEXT, MenuEntry, MenuItem
from .render import read_text

MENU_FILE = "menu.list"
HOME_SLUG = "index"
HOME_LABEL = "Home"
HOME_TOKENS = {"index", "home"}
TAG_PREFIX = "tag:"


def classify(text: str, tag_slugs: set[str], source_slugs: set[str], indent: int = 0) -> MenuEntry:
    label = text.strip()
    if label.lower().startswith(TAG_PREFIX):
        label = label[len(TAG_PREFIX) :].strip()
    slug = normalize(label)
    if slug in tag_slugs:
        return MenuEntry(TAG, slug, title_case(slug), indent)
    if slug in HOME_TOKENS:
        return MenuEntry(PAGE, HOME_SLUG, HOME_LABEL if slug == HOME_SLUG else label, indent)
    if slug in source_slugs:
        return MenuEntry(PAGE, slug, title_case(slug), indent)
    return MenuEntry(TEXT, slug, label, indent)


def parse_menu(text: str, tag_slugs: Iterable[str], source_slugs: Iterable[str]) -> list[list[MenuEntry]]:
    tag_slugs = set(tag_slugs)
    source_slugs = set(source_slugs)
    sections: list[list[MenuEntry]] = []
    current: list[MenuEntry] = []
    for line in text.splitlines():
        if not line.strip():
            if current:
                sections.append(current)
                current = []
            continue
        if line.lstrip().startswith("#"):
            continue
        indent = len(line) - len(line.lstrip(" "))
        current.append(classify(line, tag_slugs, source_slugs, indent))
    if current:
        sections.append(current)
    return sections


def default_menu(tag_slugs: Iterable[str]) -> list[list[MenuEntry]]:
    entries = [MenuEntry(PAGE, HOME_SLUG, HOME_LABEL)]
    entries.extend(MenuEntry(TAG, slug, title_case(slug)) for slug in sorted(set(tag_slugs)))
    return [entries]


def load_menu(path: Path, tag_slugs: Iterable[str], source_slugs: Iterable[str]) -> list[list[MenuEntry]]:
    if not path.is_file():
        return default_menu(tag_slugs)
    return parse_menu(read_text(path), tag_slugs, source_slugs)


def page_slugs(sections: list[list[MenuEntry]]) -> set[str]:
    return {
        entry.slug
        for section in sections
        for entry in section
        if entry.kind == PAGE and entry.slug != HOME_SLUG
    }


def _make_item(entry: MenuEntry, active: str, suffix: str) -> MenuItem:
    if entry.kind == TEXT:
        return MenuItem(url="", label=entry.label)
    return MenuItem(url=f"{entry.slug}{suffix}", label=entry.label, active=entry.slug == active)


def _build_level(
    entries: list[MenuEntry], index: int, parent_indent: int, active: str, suffix: str
) -> tuple[list[MenuItem], int]:
    items: list[MenuItem] = []
    while index < len(entries):
        entry = entries[index]
        if entry.indent <= parent_indent:
            break
        if entry.indent > parent_indent + 1:
            # skips a nesting level
            index += 1
            continue
        item = _make_item(entry, active, suffix)
        item.children, index = _build_level(entries, index + 1, entry.indent, active, suffix)
        items.append(item)
    return items, index


def build_tree(entries: list[MenuEntry], active: str = "", suffix: str = ".html") -> list[MenuItem]:
    items, _ = _build_level(entries, 0, -1, normalize(active), suffix)
    return items


def build_menus(sections: list[list[MenuEntry]], active: str = "", suffix: str = ".html") -> list[list[MenuItem]]:
    return [build_tree(section, active, suffix) for section in sections]
