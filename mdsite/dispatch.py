from __future__ import annotations

import datetime as dt
import importlib.util
import inspect
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import ModuleType
from typing import Callable

from . import pages
from .content import extract_preview
from .links import process_links
from .models import MenuItem, PostPreview, SiteConfig, SourceFile
from .paginate import page_links
from .utils import DEFAULT_DATE_FORMAT, format_date

TEMPLATE_MODULE = "templates.py"
MODULE_NAME = "mdsite_user_templates"

HOOKS = {
    "render_page": 7,
    "render_post": 8,
    "render_list": 8,
    "render_menu_item": 2,
    "render_head": 2,
    "render_top_nav": 2,
    "render_site_header": 1,
    "render_footer": 2,
}


@dataclass(frozen=True)
class TemplateSet:
    render_page: Callable[..., str] = pages.render_page
    render_post: Callable[..., str] = pages.render_post
    render_list: Callable[..., str] = pages.render_list
    render_menu_item: Callable[..., str] = pages.render_menu_item
    render_head: Callable[..., str] = pages.render_head
    render_top_nav: Callable[..., str] = pages.render_top_nav
    render_site_header: Callable[..., str] = pages.render_site_header
    render_footer: Callable[..., str] = pages.render_footer
    overridden: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class RenderContext:
    site: SiteConfig
    templates: TemplateSet = field(default_factory=TemplateSet)
    suffix: str = ".html"
    date_format: str = DEFAULT_DATE_FORMAT
    active: str = ""
    has_time: bool = False

    def url_for(self, name: str) -> str:
        return f"{name}{self.suffix}"

    def format_date(self, value: dt.datetime, with_time: bool | None = None) -> str:
        if with_time is None:
            with_time = self.has_time
        return format_date(value, self.date_format, with_time)


def accepts(func: Callable, count: int) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return True
    try:
        signature.bind(*range(count))
    except TypeError:
        return False
    return True


def resolve_templates(module: ModuleType | None) -> TemplateSet:
    if module is None:
        return TemplateSet()
    overrides = {}
    for name, count in HOOKS.items():
        candidate = getattr(module, name, None)
        if candidate is None:
            continue
        if not callable(candidate) or not accepts(candidate, count):
            print(
                f"Warning: {name} in template module does not take {count} arguments, using built-in",
                file=sys.stderr,
            )
            continue
        overrides[name] = candidate
    return TemplateSet(**overrides, overridden=frozenset(overrides))


def load_module(path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(MODULE_NAME, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def template_module_path(cache_dir: Path) -> Path:
    return cache_dir / TEMPLATE_MODULE


def load_templates(cache_dir: Path) -> TemplateSet:
    path = template_module_path(cache_dir)
    if not path.is_file():
        print(f"Warning: no template module at {path}, using built-in templates", file=sys.stderr)
        return TemplateSet()
    try:
        module = load_module(path)
    except Exception as exc:  # arbitrary user code
        print(f"Warning: failed to load {path} ({exc}), using built-in templates", file=sys.stderr)
        return TemplateSet()
    return resolve_templates(module)


class Dispatcher:
    def __init__(self, ctx: RenderContext):
        self.ctx = ctx

    def _context(self, active: str, has_time: bool = False) -> RenderContext:
        return replace(self.ctx, active=active, has_time=has_time)

    def _finish(self, html_text: str) -> str:
        return process_links(html_text, self.ctx.site)

    def page(self, source: SourceFile, menus: list[list[MenuItem]]) -> str:
        ctx = self._context(source.slug, source.has_time)
        html_text = ctx.templates.render_page(
            ctx,
            source.slug,
            source.display_title,
            source.content,
            source.created_at,
            source.modified_at,
            menus,
        )
        return self._finish(html_text)

    def post(self, source: SourceFile, menus: list[list[MenuItem]]) -> str:
        ctx = self._context(source.slug, source.has_time)
        html_text = ctx.templates.render_post(
            ctx,
            source.slug,
            source.display_title,
            source.content,
            source.created_at,
            source.modified_at,
            menus,
            list(source.tags),
        )
        return self._finish(html_text)

    def preview(self, source: SourceFile) -> PostPreview:
        return PostPreview(
            slug=source.slug,
            title=source.display_title,
            preview=extract_preview(source.content),
            url=self.ctx.url_for(source.slug),
            date=self.ctx.format_date(source.created_at, source.has_time),
            tags=source.tags,
        )

    def listing(
        self,
        name: str,
        title: str,
        posts: list[SourceFile],
        menus: list[list[MenuItem]],
        page: int,
        total_pages: int,
    ) -> str:
        ctx = self._context(name)
        previews = [self.preview(source) for source in posts]
        links = page_links(name, page, total_pages, ctx.suffix)
        html_text = ctx.templates.render_list(ctx, name, title, previews, menus, page, total_pages, links)
        return self._finish(html_text)
