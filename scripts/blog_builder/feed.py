#!/usr/bin/env python3
"""
Atom feed for the newest posts.
"""
from datetime import datetime
from html import escape

from bs4 import BeautifulSoup

from .config import BlogConfig
from .graph import DocumentGraph

SUMMARY_LENGTH = 280


def iso_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def summarize(content: str, limit: int = SUMMARY_LENGTH) -> str:
    """Plain-text summary of rendered HTML, cut at a word boundary."""
    soup = BeautifulSoup(content, "html.parser")
    for node in soup.find_all(["script", "noscript"]):
        node.decompose()
    text = " ".join(soup.get_text(" ").split())
    if len(text) <= limit:
        return text
    return text[:limit].rsplit(" ", 1)[0] + "…"


def render_atom_feed(graph: DocumentGraph, cfg: BlogConfig) -> str:
    site_url = cfg.url.rstrip("/")
    feed_id = site_url + "/blog/"
    posts = graph.posts_by_date[:cfg.num_feed_posts]

    updated = max((p.updated for p in posts if p.updated), default=None)
    entries = []
    for post in posts:
        link = f"{site_url}/{post.permalink}"
        entries.append(
            "\n".join(
                [
                    "<entry>",
                    f"<title>{escape(post.title)}</title>",
                    f"<id>{feed_id}{escape(post.asset_path)}</id>",
                    f'<link rel="alternate" href="{escape(link)}" />',
                    f"<published>{iso_date(post.published)}</published>",
                    f"<updated>{iso_date(post.updated or post.published)}</updated>",
                    f"<summary>{escape(summarize(post.content))}</summary>",
                    f'<content type="html">{escape(post.content)}</content>',
                    "</entry>",
                ]
            )
        )

    header = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<feed xmlns="http://www.w3.org/2005/Atom">',
        f"<title>{escape(cfg.title)}</title>",
        f"<id>{feed_id}</id>",
        f'<link rel="self" href="{escape(site_url)}/{escape(cfg.atom_feed_file)}" />',
        f'<link rel="alternate" href="{escape(site_url)}" />',
    ]
    if updated is not None:
        header.append(f"<updated>{iso_date(updated)}</updated>")
    if cfg.author:
        header.append(f"<author><name>{escape(cfg.author)}</name></author>")

    return "\n".join(header + entries + ["</feed>"]) + "\n"
