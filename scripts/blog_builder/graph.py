#!/usr/bin/env python3
"""
Document graph.

Owns the full document list, resolves parent ids into a forest of series,
partitions documents into pages and date-ordered posts and synthesizes the
archive page and the series collections.
"""
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .document import Document, DocumentKind, id_sort_key
from .errors import GraphError

ARCHIVE_ID = "archive"


class DocumentGraph:
    def __init__(self, documents: Iterable[Document] = ()):
        self.all_documents: List[Document] = []  # master list, pages and posts
        self.pages: List[Document] = []           # standalone pages
        self.posts_by_date: List[Document] = []   # newest first
        self.series: List[Document] = []          # posts with children
        self.collections: List[Document] = []     # one per series
        self.most_recent: Optional[Document] = None
        self._by_id: Dict[str, Document] = {}

        for doc in documents:
            self.add(doc)

    def add(self, doc: Document) -> Document:
        other = self._by_id.get(doc.id)
        if other is not None:
            raise GraphError(
                f"duplicate document id {doc.id!r} ({other.filename!r} and {doc.filename!r})",
                doc.filename,
            )
        self._by_id[doc.id] = doc
        self.all_documents.append(doc)
        return doc

    def find(self, doc_id: str) -> Optional[Document]:
        """Find a document by its id."""
        return self._by_id.get(doc_id)

    def index(self) -> Mapping[str, Document]:
        """Read-only snapshot of id -> document for the render pass."""
        return MappingProxyType(dict(self._by_id))

    def link(self) -> None:
        """Resolve parents, then sort and index pages, posts and series."""
        inserted = list(self.all_documents)
        self.all_documents.sort(key=lambda d: id_sort_key(d.id))

        # Link children to their parents (and back)
        for doc in self.all_documents:
            if not doc.parent_id:
                continue
            parent = self.find(doc.parent_id)
            if parent is None:
                raise GraphError(
                    f"{doc.id!r}: parent id {doc.parent_id!r} does not correspond to an existing document.",
                    doc.filename,
                )
            doc.parent = parent
            parent.children.append(doc)

        self._check_cycles()

        self.pages = [d for d in self.all_documents if d.kind is DocumentKind.PAGE]
        # stable: equal dates keep insertion order
        self.posts_by_date = sorted(
            (d for d in inserted if d.kind is DocumentKind.POST),
            key=lambda d: d.published,
            reverse=True,
        )
        self.series = [d for d in self.posts_by_date if d.children]
        self.most_recent = self.posts_by_date[0] if self.posts_by_date else None

    def _check_cycles(self) -> None:
        for doc in self.all_documents:
            seen = set()
            node = doc
            while node is not None:
                if node.id in seen:
                    raise GraphError(f"{doc.id!r}: parent chain forms a cycle", doc.filename)
                seen.add(node.id)
                node = node.parent

    def generate_collections(self) -> List[Document]:
        """Synthesize one collection document per series root."""
        for root in self.series:
            coll = Document(
                filename=f"<collection {root.id}>",
                id=f"{root.id}-all",
                kind=DocumentKind.COLLECTION,
                title=root.title,
                published=root.published,
                updated=max((d.updated for d in root.children if d.updated), default=root.updated),
            )
            # shares the series list, it is not recomputed
            coll.children = root.children
            refresh_flags(coll)
            self.add(coll)
            self.collections.append(coll)
        return self.collections

    def refresh_collections(self) -> None:
        """Recompute collection flags once the render pass has run."""
        for coll in self.collections:
            refresh_flags(coll)

    def generate_archive(self) -> Document:
        """Generate the "Archives" standalone page and add it to the graph."""
        from .front_matter import load_document

        lines = ["-type=page", "-title=Archives", ""]
        prev = None
        for post in self.posts_by_date:
            # If the month has changed, print a heading.
            month = (post.published.year, post.published.month)
            if month != prev:
                lines += ["", "### " + post.published.strftime("%B %Y"), ""]
                prev = month
            lines.append(f"* [%](*{post.id})")

        archive = load_document(ARCHIVE_ID, "\n".join(lines) + "\n", doc_id=ARCHIVE_ID)
        self.add(archive)
        self.pages.append(archive)
        return archive


def refresh_flags(coll: Document) -> None:
    coll.uses_math = any(d.uses_math for d in coll.children)
    coll.uses_code = any(d.uses_code for d in coll.children)
