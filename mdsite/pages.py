from __future__ import annotations

import datetime as dt
import html
from typing import TYPE_CHECKING

from .models import MenuItem, PageLink, PostPreview, TagInfo
from .paginate import page_url
from .render import render_template

if TYPE_CHECKING:
    from .dispatch import RenderContext

HOME_NAME = "index"

BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
{{head}}
</head>
<body>
{{site_header}}
{{top_nav}}
<main class="content">
{{content}}
</main>
{{footer}}
</body>
</html>
"""

DEFAULT_STYLE = (
    "body{max-width:46rem;margin:0 auto;padding:0 1rem;font-family:system-ui,sans-serif;line-height:1.6}"
    "nav ul{list-style:none;padding:0}nav li{display:inline-block;margin-right:1rem}"
    "nav li ul{display:none}nav li:hover ul{display:block;position:absolute}"
    "a.active{font-weight:bold}.post-meta{color:#666;font-size:.9rem}"
    ".tag{margin-left:.5rem}.pagination{margin:2rem 0}.pagination>*{margin-right:.5rem}"
)


def render_menu_item(ctx: RenderContext, item: MenuItem) -> str:
    active = ' class="active"' if item.active else ""
    label = html.escape(item.label)
    if item.url:
        link = f'<a href="{html.escape(item.url)}"{active}>{label}</a>'
    else:
        link = f'<span class="menu-heading">{label}</span>'
    children = ""
    if item.children:
        rendered = "".join(ctx.templates.render_menu_item(ctx, child) for child in item.children)
        children = f"<ul>{rendered}</ul>"
    return f"<li>{link}{children}</li>"


def render_menu(ctx: RenderContext, items: list[MenuItem]) -> str:
    return "".join(ctx.templates.render_menu_item(ctx, item) for item in items)


def render_head(ctx: RenderContext, title: str) -> str:
    site_title = ctx.site.title
    full_title = f"{title} | {site_title}" if title and title != site_title else site_title
    parts = [
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>{html.escape(full_title)}</title>",
    ]
    if ctx.site.description:
        parts.append(f'<meta name="description" content="{html.escape(ctx.site.description)}">')
    parts.append(f"<style>{DEFAULT_STYLE}</style>")
    parts.append('<link rel="stylesheet" href="style.css">')
    return "\n".join(parts)


def render_top_nav(ctx: RenderContext, menus: list[list[MenuItem]]) -> str:
    if not menus or not menus[0]:
        return ""
    return f'<nav class="site-nav"><ul>{render_menu(ctx, menus[0])}</ul></nav>'


def render_site_header(ctx: RenderContext) -> str:
    description = ""
    if ctx.site.description:
        description = f'<p class="site-description">{html.escape(ctx.site.description)}</p>'
    return (
        '<header class="site-header">'
        f'<p class="site-title"><a href="{ctx.url_for(HOME_NAME)}">{html.escape(ctx.site.title)}</a></p>'
        f"{description}"
        "</header>"
    )


def render_footer(ctx: RenderContext, menus: list[list[MenuItem]]) -> str:
    navs = [
        f'<nav class="footer-nav"><ul>{render_menu(ctx, items)}</ul></nav>'
        for items in menus[1:]
        if items
    ]
    year = dt.datetime.now().year
    return (
        '<footer class="site-footer">'
        f'{"".join(navs)}'
        f'<p class="copyright">&copy; {year} {html.escape(ctx.site.title)}</p>'
        "</footer>"
    )


def render_document(ctx: RenderContext, title: str, menus: list[list[MenuItem]], content: str) -> str:
    hooks = ctx.templates
    return render_template(
        BASE_TEMPLATE,
        head=hooks.render_head(ctx, title),
        site_header=hooks.render_site_header(ctx),
        top_nav=hooks.render_top_nav(ctx, menus),
        footer=hooks.render_footer(ctx, menus),
        content=content,
    )


def render_time(ctx: RenderContext, value: dt.datetime, css_class: str, with_time: bool | None = None) -> str:
    return (
        f'<time class="{css_class}" datetime="{value.replace(microsecond=0).isoformat()}">'
        f"{html.escape(ctx.format_date(value, with_time))}</time>"
    )


def render_tag_links(ctx: RenderContext, tags: list[TagInfo] | tuple[TagInfo, ...]) -> str:
    if not tags:
        return ""
    links = " ".join(
        f'<a class="tag" href="{ctx.url_for(tag.slug)}">{html.escape(tag.label)}</a>' for tag in tags
    )
    return f'<span class="post-tags">{links}</span>'


def render_page(
    ctx: RenderContext,
    slug: str,
    title: str,
    content: str,
    created: dt.datetime,
    modified: dt.datetime,
    menus: list[list[MenuItem]],
) -> str:
    body = (
        f'<article class="page" id="page-{html.escape(slug)}">'
        f"{content}"
        f'<p class="page-updated">Last updated {render_time(ctx, modified, "page-modified", False)}</p>'
        "</article>"
    )
    return render_document(ctx, title, menus, body)


def render_post(
    ctx: RenderContext,
    slug: str,
    title: str,
    content: str,
    created: dt.datetime,
    modified: dt.datetime,
    menus: list[list[MenuItem]],
    tags: list[TagInfo],
) -> str:
    updated = ""
    if modified.date() > created.date():
        updated = f' <span class="post-updated">Updated {render_time(ctx, modified, "post-modified", False)}</span>'
    body = (
        f'<article class="post" id="post-{html.escape(slug)}">'
        '<div class="post-meta">'
        f'{render_time(ctx, created, "post-date")}{updated}{render_tag_links(ctx, tags)}'
        "</div>"
        f'<div class="post-body">{content}</div>'
        "</article>"
    )
    return render_document(ctx, title, menus, body)


def render_preview(ctx: RenderContext, post: PostPreview) -> str:
    return (
        '<article class="post-preview">'
        '<div class="post-meta">'
        f'<span class="post-date">{html.escape(post.date)}</span>{render_tag_links(ctx, post.tags)}'
        "</div>"
        f'<div class="post-summary">{post.preview}</div>'
        f'<a class="post-more" href="{html.escape(post.url)}">Read more</a>'
        "</article>"
    )


def render_pagination(ctx: RenderContext, name: str, page: int, total_pages: int, links: list[PageLink]) -> str:
    if total_pages <= 1:
        return ""
    items = []
    if page > 1:
        items.append(f'<a class="page-prev" rel="prev" href="{page_url(name, page - 1, ctx.suffix)}">Previous</a>')
    for link in links:
        if link.is_ellipsis:
            items.append('<span class="page-ellipsis">&hellip;</span>')
        elif link.is_current:
            items.append(f'<span class="page-number is-active">{link.page}</span>')
        else:
            items.append(f'<a class="page-number" href="{link.url}">{link.page}</a>')
    if page < total_pages:
        items.append(f'<a class="page-next" rel="next" href="{page_url(name, page + 1, ctx.suffix)}">Next</a>')
    return f'<nav class="pagination">{"".join(items)}</nav>'


def render_list(
    ctx: RenderContext,
    name: str,
    title: str,
    posts: list[PostPreview],
    menus: list[list[MenuItem]],
    page: int,
    total_pages: int,
    links: list[PageLink],
) -> str:
    heading = html.escape(title)
    if page > 1:
        heading = f"{heading} <small>Page {page} of {total_pages}</small>"
    if posts:
        cards = "\n".join(render_preview(ctx, post) for post in posts)
    else:
        cards = '<p class="empty">No posts yet.</p>'
    body = (
        f'<section class="listing" id="list-{html.escape(name)}">'
        f'<div class="section-head"><h2>{heading}</h2></div>'
        f'<div class="post-list">{cards}</div>'
        f"{render_pagination(ctx, name, page, total_pages, links)}"
        "</section>"
    )
    head_title = title if page == 1 else f"{title} (page {page})"
    return render_document(ctx, head_title, menus, body)
