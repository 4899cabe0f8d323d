from __future__ import annotations

from pathlib import Path

from .content import extract_title, normalize, parse_leading_date, title_case
from .errors import DuplicateSlugError, ReservedNameError, SlugCollisionError
from .menu import HOME_SLUG
from .models import SourceFile, TagInfo
from .render import read_text
from .utils import mtime

SOURCE_SUFFIX = ".md"


def read_source(path: Path) -> SourceFile:
    text = read_text(path)
    modified_at = mtime(path)
    created_at, has_time = parse_leading_date(text)
    if created_at is None:
        created_at = modified_at
    return SourceFile(
        path=path,
        stem=path.stem,
        slug=normalize(path.stem),
        title=extract_title(text),
        created_at=created_at,
        has_time=has_time,
        modified_at=modified_at,
    )


def list_source_paths(content_dir: Path) -> list[Path]:
    if not content_dir.is_dir():
        return []
    return sorted(
        (path for path in content_dir.glob(f"*{SOURCE_SUFFIX}") if path.is_file()),
        key=lambda p: p.as_posix(),
    )


def discover_sources(content_dir: Path) -> list[SourceFile]:
    sources = [read_source(path) for path in list_source_paths(content_dir)]
    sources.sort(key=lambda source: source.created_at, reverse=True)
    return sources


def _linked_slug(link: Path, content_dir: Path) -> str:
    if not link.is_symlink():
        return ""
    try:
        target = link.resolve(strict=True)
    except (OSError, RuntimeError):
        return ""
    if not target.is_file() or target.suffix != SOURCE_SUFFIX:
        return ""
    if target.parent != content_dir.resolve():
        return ""
    return normalize(target.stem)


def tag_dirs(content_dir: Path) -> list[Path]:
    if not content_dir.is_dir():
        return []
    return sorted(
        (path for path in content_dir.iterdir() if path.is_dir() and not path.is_symlink()),
        key=lambda p: p.name,
    )


def discover_tags(content_dir: Path) -> dict[str, list[str]]:
    tags: dict[str, list[str]] = {}
    for tag_dir in tag_dirs(content_dir):
        tagged = []
        for link in sorted(tag_dir.iterdir(), key=lambda p: p.name):
            slug = _linked_slug(link, content_dir)
            if slug and slug not in tagged:
                tagged.append(slug)
        if tagged:
            tags[tag_dir.name] = tagged
    return tags


def tag_infos(tags: dict[str, list[str]]) -> dict[str, TagInfo]:
    infos = {}
    for name in tags:
        slug = normalize(name)
        infos[name] = TagInfo(slug=slug, label=title_case(slug))
    return infos


def is_listing_page(slug: str, name: str) -> bool:
    if slug == name:
        return True
    number = slug[len(name) + 1 :] if slug.startswith(f"{name}-") else ""
    return number.isdigit() and int(number) >= 2


def check_collisions(sources: list[SourceFile], tags: dict[str, list[str]]) -> None:
    tag_slugs = {normalize(name): name for name in tags}
    listing_names = [HOME_SLUG, *tag_slugs]
    seen: dict[str, str] = {}
    for source in sorted(sources, key=lambda s: s.stem):
        if not source.slug:
            raise ReservedNameError(source.stem, "")
        if source.slug in tag_slugs:
            raise SlugCollisionError(source.stem, tag_slugs[source.slug])
        for name in listing_names:
            if is_listing_page(source.slug, name):
                raise ReservedNameError(source.stem, source.slug)
        if source.slug in seen:
            raise DuplicateSlugError(seen[source.slug], source.stem, source.slug)
        seen[source.slug] = source.stem


def attach_tags(sources: list[SourceFile], tags: dict[str, list[str]]) -> None:
    infos = tag_infos(tags)
    membership: dict[str, list[TagInfo]] = {}
    for name, slugs in tags.items():
        for slug in slugs:
            membership.setdefault(slug, []).append(infos[name])
    for source in sources:
        source.tags = tuple(sorted(membership.get(source.slug, []), key=lambda info: info.slug))
