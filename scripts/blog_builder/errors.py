#!/usr/bin/env python3
"""
Build error taxonomy.

Parse, structure and graph errors abort the build. Render errors are
collected per document and handed back to the caller.
"""
from typing import Optional


class BuildError(Exception):
    """Base class for every error raised while building the blog."""

    def __init__(self, message: str, document: Optional[str] = None):
        super().__init__(message)
        self.document = document


class ParseError(BuildError):
    """Malformed front matter: bad line, unknown property, bad time or type."""


class StructureError(BuildError):
    """A parsed document is missing a title or a publish time."""


class GraphError(BuildError):
    """The document graph is incoherent (duplicate id, missing parent, cycle)."""


class AssetConflictError(GraphError):
    """Two different source files claim the same output path."""


class RenderError(BuildError):
    """Scoped to one document: unresolved link or image, unknown tag."""
