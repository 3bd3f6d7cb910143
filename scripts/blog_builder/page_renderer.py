#!/usr/bin/env python3
"""
Page renderer - unified HTML page generation.
The single source of truth for creating HTML page skeletons.
"""
import re
from html import escape
from typing import Optional, Sequence

from . import config
from .config import BlogConfig
from .document import Document
from .sidebar import get_asset_url

MATHJAX_URL = "https://cdnjs.cloudflare.com/ajax/libs/mathjax/2.7.9/MathJax.js?config=TeX-AMS_HTML"
HIGHLIGHT_URL = "https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/highlight.min.js"


def get_common_head(cfg: BlogConfig, title: str, uses_math: bool, uses_code: bool) -> str:
    head = f"""<meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{escape(title)} - {escape(cfg.title)}</title>
    <link rel="stylesheet" href="{get_asset_url(cfg, 'static/style.css')}">
    <link rel="alternate" type="application/atom+xml" href="{get_asset_url(cfg, cfg.atom_feed_file)}">"""
    if uses_math:
        head += f'\n    <script async src="{MATHJAX_URL}"></script>'
    if uses_code:
        head += f'\n    <script src="{HIGHLIGHT_URL}"></script>'
        head += '\n    <script>document.addEventListener("DOMContentLoaded", () => hljs.highlightAll());</script>'
    return head


def render_article(doc: Document, heading_level: int = 1) -> str:
    """A single document's title, date line and body."""
    tag = f"h{heading_level}"
    date_html = ""
    if doc.published is not None:
        date_html = f'<div class="post-date">{doc.published.strftime("%B %d, %Y")}</div>'
    return f"""<article id="{escape(doc.id)}">
        <{tag} class="post-title">{escape(doc.title)}</{tag}>
        {date_html}
        {doc.content}
    </article>"""


def render_nav_buttons(cfg: BlogConfig, prev_doc: Optional[Document], next_doc: Optional[Document]) -> str:
    html = ""
    if prev_doc is not None:
        html += f'<a class="nav-prev" href="{get_asset_url(cfg, prev_doc.permalink)}">&larr; {escape(prev_doc.title)}</a>'
    if next_doc is not None:
        html += f'<a class="nav-next" href="{get_asset_url(cfg, next_doc.permalink)}">{escape(next_doc.title)} &rarr;</a>'
    return html


def render_page_html(cfg: BlogConfig, root: Document, docs: Sequence[Document], sidebar_html: str,
                     nav_buttons_html: str = "") -> str:
    """
    Unified page renderer - THE ONLY function that creates the HTML skeleton.

    Args:
        cfg: Site configuration
        root: Document the page is written for (gives the page title)
        docs: Documents shown on the page (the root itself, or a series)
        sidebar_html: Sidebar navigation HTML
        nav_buttons_html: Prev/next navigation HTML
    """
    uses_math = any(d.uses_math for d in docs)
    uses_code = any(d.uses_code for d in docs)
    head_html = get_common_head(cfg, root.title, uses_math, uses_code)

    if len(docs) == 1 and docs[0] is root:
        body_content = render_article(root)
    else:
        body_content = f'<h1 class="series-title">{escape(root.title)}</h1>\n'
        body_content += "\n".join(render_article(d, heading_level=2) for d in docs)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    {head_html}
</head>
<body>
    <aside class="sidebar" id="sidebar">
        {sidebar_html}
    </aside>
    <main class="content" id="doc_content">
        <!-- content-start -->
        {body_content}
        <!-- content-end -->
        <nav class="page-nav">{nav_buttons_html}</nav>
    </main>
</body>
</html>
"""


def validate_output_safety(html_content: str, filename: str) -> tuple:
    """
    Validates that output HTML is safe to write (not empty/corrupted).
    Returns: (is_safe: bool, error_message: str)
    """
    # Check 1: Exactly one doc_content
    doc_content_count = html_content.count('id="doc_content"')
    if doc_content_count != 1:
        return False, f"Invalid doc_content count in {filename}: {doc_content_count} (expected 1)"

    # Check 2: Content markers present
    match = re.search(r'<!-- content-start -->(.*?)<!-- content-end -->', html_content, re.DOTALL)
    if not match:
        return False, f"Missing content markers in {filename}"

    if len(html_content) < config.MIN_CONTENT_LENGTH:
        return False, f"Page too short ({len(html_content)} chars) for {filename}"

    # Check 3: Exactly one sidebar
    sidebar_count = html_content.count('class="sidebar"')
    if sidebar_count != 1:
        return False, f"Invalid sidebar count in {filename}: {sidebar_count} (expected 1)"

    return True, ""
