#!/usr/bin/env python3
"""
Analysis pass.

Walks the token tree of a document once, without producing output, to pick
up the title (first level-1 heading) and the feature flags used to decide
which scripts a page needs. Never fails: oddities are only warned about.
"""
from typing import Any, Dict, Iterable, List, Optional

from .document import Document
from .markup import create_markdown
from .utils import warn

MATH_TOKENS = ("inline_math", "block_math")


def plain_text(tokens: Iterable[Dict[str, Any]]) -> str:
    """Concatenate the visible text of inline tokens."""
    parts: List[str] = []
    for tok in tokens:
        if "children" in tok:
            parts.append(plain_text(tok["children"]))
        elif tok["type"] in ("softbreak", "linebreak"):
            parts.append(" ")
        elif "raw" in tok:
            parts.append(tok["raw"])
    return "".join(parts)


class DocumentAnalyzer:
    def __init__(self, doc: Document):
        self.doc = doc
        self.headings = 0

    def visit(self, tokens: Iterable[Dict[str, Any]]) -> None:
        for tok in tokens:
            kind = tok["type"]
            if kind == "heading":
                self.heading(tok)
            elif kind == "block_code":
                self.block_code(tok)
            elif kind in MATH_TOKENS:
                self.doc.uses_math = True

            if "children" in tok:
                self.visit(tok["children"])

    def heading(self, tok: Dict[str, Any]) -> None:
        if tok.get("attrs", {}).get("level") != 1:
            return

        text = plain_text(tok.get("children", [])).strip()
        if not text:
            warn(f"Document {self.doc.filename!r} has an empty level-1 headline")
            return

        self.headings += 1
        if self.headings > 1:
            warn(f"Document {self.doc.filename!r} defines multiple titles! (Level-1 headlines) "
                 f"Ignoring {text!r}")
            return

        if self.doc.title_from_header:
            if text != self.doc.title:
                warn(f"Document {self.doc.filename!r}: headline {text!r} differs from "
                     f"title {self.doc.title!r} set in front matter")
            return

        self.doc.title = text

    def block_code(self, tok: Dict[str, Any]) -> None:
        info: Optional[str] = tok.get("attrs", {}).get("info")
        if info or tok.get("style") == "fenced":
            self.doc.uses_code = True


def analyze(doc: Document) -> Document:
    """Run the analysis pass over doc.raw_body, updating title and flags."""
    md = create_markdown()
    tokens = md(doc.raw_body)
    DocumentAnalyzer(doc).visit(tokens)
    return doc
