#!/usr/bin/env python3
"""
Sidebar builder for blog navigation.
Creates the HTML for the sidebar with recent posts, pages and series.
"""
from html import escape
from typing import List, Optional

from .config import BlogConfig
from .document import Document
from .graph import DocumentGraph


def get_asset_url(cfg: BlogConfig, rel_path: str) -> str:
    """
    Returns the web-ready URL for an asset.
    If base_url is set, uses absolute path: /blog/path/to/file
    Else, uses the relative path unchanged.
    """
    if cfg.base_url:
        clean_base = cfg.base_url.rstrip('/')
        clean_path = rel_path.lstrip('/')
        return f"{clean_base}/{clean_path}"
    return rel_path


def _item(cfg: BlogConfig, doc: Document, active: Optional[Document]) -> str:
    css = "nav-item active" if doc is active else "nav-item"
    return f'<li class="{css}"><a href="{get_asset_url(cfg, doc.permalink)}">{escape(doc.title)}</a></li>'


def build_sidebar(graph: DocumentGraph, cfg: BlogConfig, active: Optional[Document] = None) -> str:
    """Build the sidebar HTML with navigation."""
    home_url = get_asset_url(cfg, "index.html")
    feed_url = get_asset_url(cfg, cfg.atom_feed_file)

    html = f'''
    <div class="sidebar-header">
        <a href="{home_url}" class="header-title">{escape(cfg.title)}</a>
        <div class="tagline">{escape(cfg.tagline)}</div>
    </div>
    '''

    recent: List[Document] = graph.posts_by_date[:cfg.num_recent_posts]
    if recent:
        html += '<h4>Recent posts</h4><ul class="nav-list">'
        html += "".join(_item(cfg, d, active) for d in recent)
        html += '</ul>'

    if graph.collections:
        html += '<h4>Series</h4><ul class="nav-list">'
        html += "".join(_item(cfg, d, active) for d in graph.collections)
        html += '</ul>'

    if graph.pages:
        html += '<h4>Pages</h4><ul class="nav-list">'
        html += "".join(_item(cfg, d, active) for d in graph.pages)
        html += '</ul>'

    html += f'<p class="feed-link"><a href="{feed_url}">Atom feed</a></p>'
    return html
