#!/usr/bin/env python3
"""
Markdown engine setup.

Both passes share one grammar: mistune's CommonMark core plus tables,
strikethrough, bare URLs and math, and two local plugins for custom block
tags ("{{figure}}" ... "{{/figure}}") and backslash escapes.
"""
import re
from typing import Optional

import mistune

from . import config

CUSTOM_TAG_PATTERN = (
    r"^ {0,3}\{\{(?P<custom_tag_close>/?)(?P<custom_tag_name>[A-Za-z][\w-]*)\}\}[ \t]*(?:\n|$)"
)
ESCAPE_PATTERN = r"\\(?P<escaped_char>[" + re.escape(config.SELF_ESCAPING_CHARS) + r"])"

BUILTIN_PLUGINS = ["table", "strikethrough", "url", "math"]


def parse_custom_tag(block, m, state) -> int:
    state.append_token({
        "type": "custom_tag",
        "attrs": {
            "name": m.group("custom_tag_name"),
            "closing": bool(m.group("custom_tag_close")),
        },
    })
    return m.end()


def custom_tags(md: mistune.Markdown) -> None:
    """Block-level "{{name}}" / "{{/name}}" lines, rendered by RenderHooks.custom_tag."""
    md.block.register("custom_tag", CUSTOM_TAG_PATTERN, parse_custom_tag, before="list")


def parse_escape(inline, m, state) -> int:
    # an escaped "*" or "_" must never pair up as an emphasis delimiter
    inline.process_text(m.group("escaped_char"), state, parse_emphasis=False)
    return m.end()


def self_escapes(md: mistune.Markdown) -> None:
    r"""
    Backslash followed by a self-escaping character emits the bare character.
    Anything else ("\q") is not matched and stays literal text.
    """
    md.inline.register("escape", ESCAPE_PATTERN, parse_escape)


def create_markdown(renderer: Optional[mistune.BaseRenderer] = None) -> mistune.Markdown:
    """
    Build a parser. Without a renderer the parser returns the token tree
    (used by the analysis pass).
    """
    return mistune.create_markdown(
        escape=False,
        renderer=renderer,
        plugins=BUILTIN_PLUGINS + [custom_tags, self_escapes],
    )
