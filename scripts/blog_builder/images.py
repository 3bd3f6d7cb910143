#!/usr/bin/env python3
"""
Image lookup, size probing and resizing.

References are resolved in order: absolute URLs pass through, references
with a "/" are relative to the content root, bare names are searched in the
document's asset directory and then in each ancestor's.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath
from typing import Optional, Tuple
from urllib.parse import unquote, urlsplit

from PIL import Image, UnidentifiedImageError

from . import config
from .assets import AssetRegistry
from .document import Document
from .errors import RenderError


@dataclass(frozen=True)
class ImageInfo:
    uri: str
    width: int = 0
    height: int = 0
    source: Optional[Path] = None

    @property
    def size_known(self) -> bool:
        return self.width > 0 and self.height > 0


def is_absolute_url(ref: str) -> bool:
    parts = urlsplit(ref)
    return len(parts.scheme) > 1 and bool(parts.netloc or parts.scheme == "data")


def probe_size(path: Path) -> Tuple[int, int]:
    with Image.open(path) as img:
        return img.size


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)


def _scaled_height(width: int, height: int, max_width: int) -> int:
    return max(1, round(height * max_width / width))


class ScaleResize:
    """Keep the original file, shrink the displayed dimensions."""

    name = "scale"

    def resize(self, image: ImageInfo, max_width: int, assets: AssetRegistry) -> ImageInfo:
        return replace(image, width=max_width,
                       height=_scaled_height(image.width, image.height, max_width))


class ThumbnailResize:
    """Write a bounded-width copy next to the source and display that instead."""

    name = "thumbnail"

    def resize(self, image: ImageInfo, max_width: int, assets: AssetRegistry) -> ImageInfo:
        src = image.source
        with Image.open(src) as img:
            extra = ".thumb.png" if _has_alpha(img) else ".thumb.jpg"
            thumb_path = Path(str(src) + extra)

            if not self._up_to_date(thumb_path, src, max_width):
                size = (max_width, _scaled_height(img.width, img.height, max_width))
                thumb = img.convert("RGBA" if extra == ".thumb.png" else "RGB")
                thumb = thumb.resize(size, Image.Resampling.BICUBIC)
                thumb.save(thumb_path)

        uri = image.uri + extra
        assets.add(uri, thumb_path)
        width, height = probe_size(thumb_path)
        return ImageInfo(uri, width, height, thumb_path)

    @staticmethod
    def _up_to_date(thumb_path: Path, src: Path, max_width: int) -> bool:
        if not thumb_path.is_file():
            return False
        if thumb_path.stat().st_mtime < src.stat().st_mtime:
            return False
        return probe_size(thumb_path)[0] == max_width


RESIZE_POLICIES = {
    ScaleResize.name: ScaleResize,
    ThumbnailResize.name: ThumbnailResize,
}


def make_resize_policy(name: str):
    try:
        return RESIZE_POLICIES[name]()
    except KeyError:
        raise ValueError(f"Unknown resize policy {name!r}") from None


class ImageResolver:
    def __init__(self, content_root: Path, max_width: int = config.DEFAULT_MAX_IMAGE_WIDTH,
                 policy=None):
        self.content_root = Path(content_root)
        self.max_width = max_width
        self.policy = policy or ThumbnailResize()

    def resolve(self, doc: Document, ref: str, assets: AssetRegistry) -> ImageInfo:
        """
        Locate an image, register it as a static asset and probe its size.

        Raises:
            RenderError: the reference is invalid, missing or not an image
        """
        # If it's an absolute URL, pass it through - but we don't know the size.
        if is_absolute_url(ref):
            return ImageInfo(ref)

        name = unquote(ref)
        if name.startswith("/") or PurePosixPath(name).is_absolute():
            raise RenderError(
                f"{doc.filename!r}: image {ref!r} needs to be either an absolute URL or a relative path.",
                doc.filename,
            )

        found = self._find(doc, name)
        if found is None:
            raise RenderError(f"{doc.filename!r}: Image {ref!r} not found.", doc.filename)

        uri, path = found
        try:
            width, height = probe_size(path)
        except (UnidentifiedImageError, OSError) as e:
            raise RenderError(f"{doc.filename!r}: cannot read image {ref!r}: {e}", doc.filename) from e

        assets.add(uri, path)
        return ImageInfo(uri, width, height, path)

    def _find(self, doc: Document, name: str) -> Optional[Tuple[str, Path]]:
        if "/" in name:
            rel = PurePosixPath(name)
            if ".." in rel.parts:
                return None
            path = self.content_root.joinpath(*rel.parts)
            return (rel.as_posix(), path) if path.is_file() else None

        # Search first in the asset dir for this document, then its ancestors
        for d in doc.ancestors():
            path = self.content_root / d.asset_path / name
            if path.is_file():
                return f"{d.asset_path}/{name}", path
        return None

    def needs_resize(self, image: ImageInfo) -> bool:
        return image.size_known and image.width > self.max_width

    def fit(self, image: ImageInfo, assets: AssetRegistry) -> ImageInfo:
        """Apply the resize policy to an oversized local image."""
        return self.policy.resize(image, self.max_width, assets)
