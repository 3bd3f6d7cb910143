#!/usr/bin/env python3
"""
Front matter parsing.

Lines at the beginning of a document that start with "-" are property
assignments of the form "-key=value". Everything after the first line that
does not start with "-" is the Markdown body, kept verbatim.
"""
from datetime import datetime
from pathlib import PurePath
from typing import Optional, Tuple, Union

from . import config
from .analysis import analyze
from .document import Document, DocumentKind
from .errors import ParseError, StructureError

# Types that can be declared in front matter. Collections are synthesized only.
DECLARABLE_KINDS = {
    DocumentKind.POST.value: DocumentKind.POST,
    DocumentKind.PAGE.value: DocumentKind.PAGE,
}


def derive_id(filename: str) -> str:
    """
    Generate a document id from its file name.

    "12-some-title.md" -> "12" (numeric prefix before the first dash),
    "about.md" -> "about" (basename minus extension).
    """
    stem = PurePath(filename).name
    if "." in stem:
        stem = stem[:stem.rindex(".")]
    prefix, sep, _ = stem.partition("-")
    if sep and prefix.isdigit():
        return prefix
    return stem


def parse_key_value_line(line: str) -> Tuple[str, str]:
    """Split "key=value"; returns ("", "") when there is no key."""
    key, sep, value = line.partition("=")
    if not sep:
        return "", ""
    return key.strip(), value.strip()


def parse_time(filename: str, value: str) -> datetime:
    for fmt in config.DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ParseError(f"{filename!r}: error while trying to parse time {value!r}", filename)


def parse_front_matter(filename: str, contents: Union[bytes, str],
                       doc_id: Optional[str] = None) -> Document:
    """
    Parse the header block of a raw buffer into a new Document.

    Args:
        filename: Source file name, used for the id and in error messages
        contents: Raw file contents (bytes are decoded as UTF-8)
        doc_id: Explicit id; derived from the file name when omitted

    Raises:
        ParseError: on a malformed line, unknown property, time or type
    """
    if isinstance(contents, bytes):
        try:
            contents = contents.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"{filename!r}: not valid UTF-8 ({e})", filename) from e

    doc = Document(filename=filename, id=doc_id or derive_id(filename))
    rest = contents

    while rest.startswith(config.HEADER_SENTINEL):
        line, newline, remainder = rest.partition("\n")
        rest = remainder if newline else ""

        line = line[1:]
        # if this line was terminated by CRLF, strip the CR too
        if line.endswith("\r"):
            line = line[:-1]

        key, value = parse_key_value_line(line)
        if not key:
            raise ParseError(f"{filename!r}: malformed configuration line {line!r}", filename)

        if key == "title":
            doc.title = value
        elif key in ("time", "published"):
            doc.published = parse_time(filename, value)
        elif key == "updated":
            doc.updated = parse_time(filename, value)
        elif key == "type":
            kind = DECLARABLE_KINDS.get(value.lower())
            if kind is None:
                raise ParseError(f"{filename!r}: unknown document type {value!r}", filename)
            doc.kind = kind
        elif key == "parent":
            if not value:
                raise ParseError(f"{filename!r}: empty parent id", filename)
            doc.parent_id = value
        elif key == "id":
            if not value:
                raise ParseError(f"{filename!r}: empty id", filename)
            doc.id = value
        else:
            raise ParseError(f"{filename!r}: unknown property {key!r}", filename)

    doc.raw_body = rest
    doc.title_from_header = bool(doc.title)
    if doc.updated is None:
        doc.updated = doc.published
    return doc


def validate(doc: Document) -> Document:
    """Structural checks that need the whole header (and the analysis pass)."""
    if not doc.title:
        raise StructureError(f"document {doc.filename!r} has no title", doc.filename)
    if not doc.standalone and doc.published is None:
        raise StructureError(f"post {doc.filename!r} doesn't have a time set", doc.filename)
    return doc


def load_document(filename: str, contents: Union[bytes, str],
                  doc_id: Optional[str] = None) -> Document:
    """Front matter, analysis pass, then validation."""
    doc = parse_front_matter(filename, contents, doc_id)
    analyze(doc)
    return validate(doc)
