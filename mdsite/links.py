from __future__ import annotations

import html
import re
from html.parser import HTMLParser
from urllib.parse import urljoin

from .models import SiteConfig
from .utils import join_url

SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
INTERNAL_SCHEMES = ("mailto:", "data:")
WEB_SCHEMES = ("http://", "https://")
EXTERNAL_CLASS = "external"
EXTERNAL_TARGET = "_blank"
EXTERNAL_REL = ("noopener", "noreferrer")


def matches_base(url: str, base_url: str) -> bool:
    base = base_url.rstrip("/").lower()
    if not base:
        return False
    lowered = url.lower()
    if not lowered.startswith(base):
        return False
    rest = lowered[len(base) :]
    return not rest or rest[0] in "/?#"


def is_external(url: str, base_url: str = "") -> bool:
    url = url.strip()
    if not url or url.startswith("#"):
        return False
    if url.startswith("//"):
        return True
    if url.startswith("/"):
        return False
    lowered = url.lower()
    if lowered.startswith(INTERNAL_SCHEMES):
        return False
    if lowered.startswith(WEB_SCHEMES):
        return not matches_base(url, base_url)
    return bool(SCHEME_RE.match(url))


def absolutize(url: str, base_url: str) -> str:
    stripped = url.strip()
    if not base_url or not stripped or stripped.startswith(("#", "//")):
        return url
    if SCHEME_RE.match(stripped):
        return url
    if stripped.startswith("/"):
        return join_url(base_url, stripped)
    return urljoin(base_url.rstrip("/") + "/", stripped)


def _get(attrs: list[list], name: str) -> list | None:
    for attr in attrs:
        if attr[0] == name:
            return attr
    return None


def mark_external(attrs: list[list]) -> bool:
    changed = False
    class_attr = _get(attrs, "class")
    if class_attr is None:
        attrs.append(["class", EXTERNAL_CLASS])
        changed = True
    elif EXTERNAL_CLASS not in (class_attr[1] or "").split():
        class_attr[1] = f"{class_attr[1] or ''} {EXTERNAL_CLASS}".strip()
        changed = True
    if _get(attrs, "target") is None:
        attrs.append(["target", EXTERNAL_TARGET])
        changed = True
    rel_attr = _get(attrs, "rel")
    if rel_attr is None:
        attrs.append(["rel", " ".join(EXTERNAL_REL)])
        changed = True
    else:
        tokens = (rel_attr[1] or "").split()
        missing = [token for token in EXTERNAL_REL if token not in tokens]
        if missing:
            rel_attr[1] = " ".join(tokens + missing)
            changed = True
    return changed


def render_start_tag(tag: str, attrs: list[list], self_closing: bool = False) -> str:
    parts = [tag]
    for name, value in attrs:
        if value is None:
            parts.append(name)
        else:
            parts.append(f'{name}="{html.escape(value, quote=True)}"')
    end = " />" if self_closing else ">"
    return f"<{' '.join(parts)}{end}"


class LinkRewriter(HTMLParser):
    """Collects replacements for start tags and splices them into the source text.

    Everything outside a replaced start tag is copied from the input as is.
    """

    def __init__(self, base_url: str = ""):
        super().__init__()
        self.base_url = base_url.strip()
        self.edits: list[tuple[int, int, str]] = []
        self.line_starts = [0]

    def handle_starttag(self, tag, attrs):
        self._handle_start(tag, attrs, self_closing=False)

    def handle_startendtag(self, tag, attrs):
        self._handle_start(tag, attrs, self_closing=True)

    def _offset(self) -> int:
        lineno, column = self.getpos()
        return self.line_starts[lineno - 1] + column

    def _handle_start(self, tag: str, attrs: list[tuple[str, str | None]], self_closing: bool) -> None:
        items = [[name, value] for name, value in attrs]
        changed = False
        original_href = None
        for item in items:
            name, value = item
            if value is None:
                continue
            is_link = name == "href" and tag == "a"
            if is_link and original_href is None:
                original_href = value
            if self.base_url and (is_link or name == "src"):
                rewritten = absolutize(value, self.base_url)
                if rewritten != value:
                    item[1] = rewritten
                    changed = True
        if original_href is not None and is_external(original_href, self.base_url):
            changed = mark_external(items) or changed
        raw = self.get_starttag_text()
        if changed and raw:
            start = self._offset()
            self.edits.append((start, start + len(raw), render_start_tag(tag, items, self_closing)))

    def rewrite(self, html_text: str) -> str:
        self.line_starts = [0] + [match.end() for match in re.finditer("\n", html_text)]
        self.edits = []
        self.feed(html_text)
        self.close()
        parts = []
        position = 0
        for start, end, text in self.edits:
            parts.append(html_text[position:start])
            parts.append(text)
            position = end
        parts.append(html_text[position:])
        return "".join(parts)


def process_links(html_text: str, site: SiteConfig) -> str:
    if not html_text:
        return html_text
    return LinkRewriter(site.base_url).rewrite(html_text)
