from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .cache import CACHE_SUFFIX, cache_path, render_markdown
from .config import BuildOptions
from .content import normalize
from .discovery import attach_tags, check_collisions, discover_sources, discover_tags, tag_dirs, tag_infos
from .dispatch import Dispatcher, RenderContext, load_templates, template_module_path
from .errors import BuildError
from .menu import HOME_SLUG, MENU_FILE, build_menus, load_menu, page_slugs
from .models import SourceFile
from .paginate import page_url, paginate
from .render import remove_file, write_text


@dataclass
class BuildReport:
    pages: int = 0
    posts: int = 0
    lists: int = 0
    changed: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"Built: {self.pages} pages, {self.posts} posts, {self.lists} lists "
            f"({len(self.changed)} sources changed)"
        )


@dataclass
class Listing:
    name: str
    title: str
    posts: list[SourceFile]
    changed: bool


def newest_mtime(*paths: Path) -> float:
    newest = 0.0
    for path in paths:
        try:
            newest = max(newest, path.stat().st_mtime)
        except FileNotFoundError:
            continue
    return newest


def needs_regen(path: Path, threshold: float) -> bool:
    if not path.exists():
        return True
    return path.stat().st_mtime < threshold


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise BuildError(f"cannot create directory {path}: {exc.strerror or exc}") from exc


class SiteBuilder:
    """Runs one build pass.

    An output is rewritten when it is missing, when its source was re-rendered,
    or when it is older than anything it is made from: its cache artifact, the
    menu file, the template module and the tag directories. Listings also
    depend on the content directory itself, since adding or removing a source
    changes them. Without a ``menu.list`` the navigation is derived from the
    tag directories, so the content directory then counts for every page.
    """

    def __init__(self, options: BuildOptions):
        self.options = options
        self.report = BuildReport()

    def log(self, message: str) -> None:
        if not self.options.quiet:
            print(message)

    def write(self, path: Path, text: str) -> None:
        write_text(path, text)
        self.report.written.append(path)
        self.log(f"  {path}")

    def remove(self, path: Path) -> None:
        if path.is_dir():
            return
        if remove_file(path):
            self.report.removed.append(path)
            self.log(f"  removed {path}")

    def cached_mtime(self, *sources: SourceFile) -> float:
        return newest_mtime(*(cache_path(source.path, self.options.cache_dir) for source in sources))

    def build(self) -> BuildReport:
        options = self.options
        content_dir = options.content_dir
        if not content_dir.is_dir():
            raise BuildError(f"content directory not found: {content_dir}")

        sources = discover_sources(content_dir)
        tags = discover_tags(content_dir)
        check_collisions(sources, tags)
        attach_tags(sources, tags)
        infos = tag_infos(tags)

        menu_path = content_dir / MENU_FILE
        sections = load_menu(menu_path, [info.slug for info in infos.values()], [s.slug for s in sources])
        pages = page_slugs(sections)

        ensure_dir(options.output_dir)
        ensure_dir(options.cache_dir)
        templates = load_templates(options.cache_dir)
        tags_mtime = newest_mtime(*tag_dirs(content_dir))
        tree_mtime = max(newest_mtime(content_dir), tags_mtime)
        layout_mtime = newest_mtime(menu_path, template_module_path(options.cache_dir))
        if not menu_path.is_file():
            layout_mtime = max(layout_mtime, tree_mtime)
        dispatcher = Dispatcher(
            RenderContext(
                site=options.site,
                templates=templates,
                suffix=options.suffix,
                date_format=options.date_format,
            )
        )

        for source in sources:
            source.content, was_changed = render_markdown(
                source.path, options.cache_dir, force=options.force, auto_date=options.auto_date
            )
            if was_changed:
                self.report.changed.append(source.slug)
        changed = set(self.report.changed)

        self.prune(sources)

        for source in sources:
            out_path = options.output_dir / f"{source.slug}{options.suffix}"
            is_page = source.slug in pages
            threshold = max(layout_mtime, self.cached_mtime(source))
            if not is_page:
                threshold = max(threshold, tags_mtime)
            if not (options.force or source.slug in changed or needs_regen(out_path, threshold)):
                continue
            menus = build_menus(sections, source.slug, options.suffix)
            if is_page:
                self.write(out_path, dispatcher.page(source, menus))
                self.report.pages += 1
            else:
                self.write(out_path, dispatcher.post(source, menus))
                self.report.posts += 1

        posts = [source for source in sources if source.slug not in pages]
        list_mtime = max(layout_mtime, tree_mtime)
        for listing in self.listings(posts, tags, infos, changed):
            self.write_listing(dispatcher, sections, listing, list_mtime)
        return self.report

    def listings(self, posts: list[SourceFile], tags: dict, infos: dict, changed: set[str]) -> list[Listing]:
        listings = [
            Listing(
                name=HOME_SLUG,
                title=self.options.site.title,
                posts=posts,
                changed=any(post.slug in changed for post in posts),
            )
        ]
        for name, members in tags.items():
            member_set = set(members)
            tag_posts = [post for post in posts if post.slug in member_set]
            listings.append(
                Listing(
                    name=infos[name].slug,
                    title=infos[name].label,
                    posts=tag_posts,
                    changed=any(post.slug in changed for post in tag_posts),
                )
            )
        return listings

    def write_listing(self, dispatcher: Dispatcher, sections: list, listing: Listing, list_mtime: float) -> None:
        options = self.options
        threshold = max(list_mtime, self.cached_mtime(*listing.posts))
        groups = paginate(listing.posts, options.per_page)
        total = len(groups)
        menus = build_menus(sections, listing.name, options.suffix)
        for number, group in enumerate(groups, start=1):
            out_path = options.output_dir / page_url(listing.name, number, options.suffix)
            if not (options.force or listing.changed or needs_regen(out_path, threshold)):
                continue
            self.write(out_path, dispatcher.listing(listing.name, listing.title, group, menus, number, total))
            self.report.lists += 1
        number = total + 1
        while True:
            stale = options.output_dir / page_url(listing.name, number, options.suffix)
            if not stale.is_file():
                break
            self.remove(stale)
            number += 1

    def prune(self, sources: list[SourceFile]) -> None:
        options = self.options
        stems = {source.stem for source in sources}
        slugs = {source.slug for source in sources}
        for cached in sorted(options.cache_dir.glob(f"*{CACHE_SUFFIX}")):
            if cached.stem in stems:
                continue
            self.remove(cached)
            slug = normalize(cached.stem)
            if slug and slug not in slugs:
                self.remove(options.output_dir / f"{slug}{options.suffix}")


def build_site(options: BuildOptions) -> BuildReport:
    return SiteBuilder(options).build()
