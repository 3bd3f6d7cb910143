#!/usr/bin/env python3
"""
Blog builder configuration.
Shared defaults plus the per-site settings loaded from JSON or the CLI.
"""
import json
from dataclasses import dataclass, field, fields
from pathlib import Path

# --- DEFAULTS ---
DEFAULT_MAX_IMAGE_WIDTH = 700  # wider images get a click-through link
DEFAULT_RESIZE_POLICY = "thumbnail"
RESIZE_POLICIES = ("thumbnail", "scale")

# Front matter
HEADER_SENTINEL = "-"
DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%b %d, %Y",
)

# Markup
LINK_SENTINEL = "*"
TITLE_MARKER = "%"
SELF_ESCAPING_CHARS = "\\`*_{}[]()#+-.!:|&<>~$"
CUSTOM_TAGS = {
    "figure": ("<figure>", "</figure>"),
    "caption": ("<figcaption>", "</figcaption>"),
    "aside": ("<aside>", "</aside>"),
    "note": ('<div class="note">', "</div>"),
}
FULL_SIZE_TITLE = "Click for full-size version."

# Content safety guardrails
MIN_CONTENT_LENGTH = 200  # Minimum characters for a written page


@dataclass
class BlogConfig:
    title: str = "Blog"
    tagline: str = ""
    url: str = "http://localhost"
    author: str = ""
    atom_feed_file: str = "feed.atom.xml"
    num_recent_posts: int = 5
    num_feed_posts: int = 10
    max_image_width: int = DEFAULT_MAX_IMAGE_WIDTH
    resize_policy: str = DEFAULT_RESIZE_POLICY
    post_dir: Path = field(default_factory=lambda: Path("posts"))
    template_dir: Path = field(default_factory=lambda: Path("template"))
    out_dir: Path = field(default_factory=lambda: Path("out"))
    base_url: str = ""

    def __post_init__(self):
        self.post_dir = Path(self.post_dir)
        self.template_dir = Path(self.template_dir)
        self.out_dir = Path(self.out_dir)
        if self.resize_policy not in RESIZE_POLICIES:
            raise ValueError(
                f"Unknown resize policy {self.resize_policy!r} "
                f"(expected one of {', '.join(RESIZE_POLICIES)})"
            )
        if self.max_image_width <= 0:
            raise ValueError("max_image_width must be positive")


def load_config(path: Path, **overrides) -> BlogConfig:
    """
    Load a BlogConfig from a JSON file.

    Keyword overrides (e.g. from the command line) win over file values;
    overrides that are None are ignored.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: configuration must be a JSON object")

    known = {f.name for f in fields(BlogConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{path}: unknown configuration keys: {', '.join(unknown)}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return BlogConfig(**data)
