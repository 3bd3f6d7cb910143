#!/usr/bin/env python3
"""
Utility functions for the builder.
Includes warnings and document discovery.
"""
import sys
from pathlib import Path
from typing import List


def warn(msg: str) -> None:
    """Print a non-fatal warning to stderr."""
    print(f"Warning: {msg}", file=sys.stderr)


def discover_documents(post_dir: Path) -> List["Document"]:
    """Read every *.md file in the content directory and parse it."""
    from .front_matter import load_document

    post_dir = Path(post_dir)
    if not post_dir.is_dir():
        raise FileNotFoundError(f"Content directory not found: {post_dir}")

    documents = []
    for f in sorted(post_dir.glob("*.md")):
        documents.append(load_document(f.name, f.read_bytes()))

    print(f"  Discovered {len(documents)} documents in {post_dir}")
    return documents
