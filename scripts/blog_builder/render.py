#!/usr/bin/env python3
"""
Render pass.

Runs the full Markdown-to-HTML traversal for one document. Behaviour at a
fixed set of extension points (headings, links, images, math, custom tags,
code blocks) comes from a RenderHooks object plugged into the renderer as an
override table; every other token uses mistune's default HTML.
"""
from __future__ import annotations

import re
from functools import partial
from typing import Callable, Dict, Mapping, Optional

import mistune
from mistune.util import striptags

from . import config
from .assets import AssetRegistry
from .document import Document
from .errors import RenderError
from .images import ImageResolver
from .markup import create_markdown
from .math_protection import wrap_display_math, wrap_inline_math
from .utils import warn

INTERNAL_LINK_RE = re.compile(r"^" + re.escape(config.LINK_SENTINEL) + r"(?P<id>[^#]+)(?P<fragment>#.*)?$")
CLASS_ANNOTATION_RE = re.compile(r"^\{(?P<cls>[^}]*)\}\s*(?P<alt>.*)$", re.DOTALL)


def parse_internal_link(url: str):
    """Return (id, fragment) for "*id#fragment" links, None for anything else."""
    m = INTERNAL_LINK_RE.match(url)
    if not m:
        return None
    return m.group("id"), m.group("fragment") or ""


class HookedRenderer(mistune.HTMLRenderer):
    """HTMLRenderer that consults an override table before its own methods."""

    def __init__(self, overrides: Mapping[str, Callable[..., str]]):
        super().__init__(escape=False)
        self.overrides = dict(overrides)

    def _get_method(self, name: str) -> Callable[..., str]:
        hook = self.overrides.get(name)
        if hook is not None:
            return partial(hook, self)
        return super()._get_method(name)


class RenderHooks:
    """
    Per-document render policy.

    Holds the read-only id index and the shared asset registry for the
    duration of one traversal, plus the document's first error.
    """

    def __init__(self, doc: Document, index: Mapping[str, Document],
                 assets: AssetRegistry, images: ImageResolver):
        self.doc = doc
        self.index = index
        self.assets = assets
        self.images = images
        self.error: Optional[RenderError] = None

    def overrides(self) -> Dict[str, Callable[..., str]]:
        return {
            "heading": self.heading,
            "link": self.link,
            "image": self.image,
            "inline_math": self.inline_math,
            "block_math": self.block_math,
            "custom_tag": self.custom_tag,
            "block_code": self.block_code,
        }

    def fail(self, err: RenderError) -> None:
        # first error wins
        if self.error is None:
            self.error = err

    # --- extension points ---

    def heading(self, renderer, text: str, level: int, **attrs) -> str:
        # The level-1 headline is the title, already taken by the analysis pass
        if level == 1:
            return ""
        return mistune.HTMLRenderer.heading(renderer, text, level, **attrs)

    def link(self, renderer, text: str, url: str, title: Optional[str] = None) -> str:
        target_ref = parse_internal_link(url)
        if target_ref is None:
            return mistune.HTMLRenderer.link(renderer, text, url, title)

        doc_id, fragment = target_ref
        target = self.index.get(doc_id)
        if target is None:
            self.fail(RenderError(
                f"{self.doc.filename!r}: contains link to document {doc_id!r} which does not exist.",
                self.doc.filename,
            ))
            return text

        if text == config.TITLE_MARKER:
            text = mistune.escape(target.title)
        return mistune.HTMLRenderer.link(renderer, text, target.permalink + fragment, target.title)

    def image(self, renderer, text: str, url: str, title: Optional[str] = None) -> str:
        try:
            image = self.images.resolve(self.doc, url, self.assets)
        except RenderError as e:
            self.fail(e)
            return ""

        alt = striptags(text)  # already entity-escaped by the text renderer
        css_class = ""
        m = CLASS_ANNOTATION_RE.match(alt)
        if m:
            css_class, alt = m.group("cls").strip(), m.group("alt")

        full_size = None
        if self.images.needs_resize(image):
            warn(f"image {image.uri!r} is wider ({image.width} pixels) than maximum of "
                 f"{self.images.max_width} pixels.")
            full_size = image.uri
            title = title or config.FULL_SIZE_TITLE
            image = self.images.fit(image, self.assets)

        html = self._img_tag(image, alt, title, css_class)
        if full_size is not None:
            html = f'<a href="{self._src(full_size)}">{html}</a>'
        return html

    def inline_math(self, renderer, text: str) -> str:
        self.doc.uses_math = True
        return wrap_inline_math(text)

    def block_math(self, renderer, text: str) -> str:
        self.doc.uses_math = True
        return wrap_display_math(text)

    def custom_tag(self, renderer, name: str, closing: bool) -> str:
        markup = config.CUSTOM_TAGS.get(name)
        if markup is None:
            self.fail(RenderError(f"{self.doc.filename!r}: unknown tag {name!r}", self.doc.filename))
            return ""
        return markup[1 if closing else 0] + "\n"

    def block_code(self, renderer, code: str, info: Optional[str] = None) -> str:
        if info:
            self.doc.uses_code = True
        return mistune.HTMLRenderer.block_code(renderer, code, info)

    # --- helpers ---

    @staticmethod
    def _src(uri: str) -> str:
        if "://" in uri or uri.startswith("data:"):
            return mistune.escape(uri)
        return mistune.escape(mistune.escape_url(uri))

    def _img_tag(self, image, alt: str, title: Optional[str], css_class: str) -> str:
        s = f'<img src="{self._src(image.uri)}" alt="{alt}"'
        if title:
            s += f' title="{mistune.safe_entity(title)}"'
        if css_class:
            s += f' class="{mistune.escape(css_class)}"'
        if image.size_known:
            s += f' width="{image.width}" height="{image.height}"'
        return s + " />"


def render_document(doc: Document, index: Mapping[str, Document],
                    assets: AssetRegistry, images: ImageResolver) -> Optional[RenderError]:
    """
    Render doc.raw_body into doc.content.

    Returns the first render error (also stored on doc.error); the content
    is produced in full either way. Asset conflicts are raised, not stored.
    """
    hooks = RenderHooks(doc, index, assets, images)
    md = create_markdown(HookedRenderer(hooks.overrides()))
    doc.content = md(doc.raw_body)
    doc.error = hooks.error
    return hooks.error
