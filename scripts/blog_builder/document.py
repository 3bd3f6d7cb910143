#!/usr/bin/env python3
"""
Document model.

A Document is created once from a source buffer (or synthesized for a
series collection), annotated by the analysis pass, linked by the graph
builder and finally filled with HTML by the render pass.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from .errors import RenderError


class DocumentKind(Enum):
    POST = "post"              # dated, indexed
    PAGE = "page"              # standalone, undated
    COLLECTION = "collection"  # synthesized from a series root


@dataclass(eq=False)
class Document:
    filename: str
    id: str
    kind: DocumentKind = DocumentKind.POST
    title: str = ""
    published: Optional[datetime] = None
    updated: Optional[datetime] = None
    content: str = ""

    # Series
    parent_id: str = ""
    parent: Optional[Document] = field(default=None, repr=False)
    children: List[Document] = field(default_factory=list, repr=False)

    # Feature flags, only touched by the analysis and render passes
    uses_math: bool = False
    uses_code: bool = False

    # Internals
    raw_body: str = field(default="", repr=False)
    title_from_header: bool = field(default=False, repr=False)
    error: Optional[RenderError] = field(default=None, repr=False)

    @property
    def permalink(self) -> str:
        """Name of the rendered HTML file for this document."""
        return f"p{self.id}.html"

    @property
    def asset_path(self) -> str:
        """Directory (relative to the content root) holding this document's files."""
        return self.id

    @property
    def standalone(self) -> bool:
        return self.kind is DocumentKind.PAGE

    @property
    def synthesized(self) -> bool:
        return self.kind is DocumentKind.COLLECTION

    def ancestors(self):
        """Yield this document, then its parent, grandparent, ..."""
        doc = self
        while doc is not None:
            yield doc
            doc = doc.parent


def id_sort_key(doc_id: str):
    """Total order on ids: numeric ids numerically, then textual ids."""
    if doc_id.isdigit():
        return (0, int(doc_id), "")
    return (1, 0, doc_id)
