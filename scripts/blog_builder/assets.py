#!/usr/bin/env python3
"""
Static asset registry.

Maps output-relative web paths to source files. Shared by every document
during rendering; a path may only ever be claimed by one source file.
"""
import os
import shutil
from pathlib import Path
from typing import Dict, Iterator, Tuple

from .errors import AssetConflictError


def _normalize(source) -> str:
    return os.path.normpath(str(source))


class AssetRegistry:
    def __init__(self):
        self.files: Dict[str, str] = {}  # dst web path -> src path

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, web_path: str) -> bool:
        return web_path in self.files

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(sorted(self.files.items()))

    def source_for(self, web_path: str) -> Path:
        return Path(self.files[web_path])

    def add(self, web_path: str, source) -> None:
        """
        Register a static file. Re-adding the same mapping is a no-op;
        mapping a claimed path to a different source is fatal.
        """
        src = _normalize(source)
        existing = self.files.get(web_path)
        if existing is None:
            self.files[web_path] = src
        elif existing != src:
            raise AssetConflictError(
                f"Double definition for path {web_path!r} - assigned to both {existing!r} and {src!r}.",
                web_path,
            )

    def add_directory(self, root: Path, prefix: str = "static") -> int:
        """Add every file below root/prefix, keyed by its path relative to root."""
        root = Path(root)
        base = root / prefix
        if not base.is_dir():
            return 0

        count = 0
        for path in sorted(base.rglob("*")):
            if path.is_file():
                self.add(path.relative_to(root).as_posix(), path)
                count += 1
        return count

    def copy_to(self, out_dir: Path) -> int:
        """Copy all registered files below out_dir."""
        out_dir = Path(out_dir)
        for web_path, src in self:
            dst = out_dir / Path(*web_path.split("/"))
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dst)
        return len(self.files)
