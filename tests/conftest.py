import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Make the package importable without installing it
SCRIPTS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "scripts")
if SCRIPTS_DIR not in sys.path:
    sys.path.insert(0, SCRIPTS_DIR)

from blog_builder import (  # noqa: E402
    AssetRegistry,
    DocumentGraph,
    ImageResolver,
    ThumbnailResize,
    load_document,
    render_document,
)


def make_image(path: Path, size, mode="RGB") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    color = (200, 40, 40, 128) if mode == "RGBA" else (200, 40, 40)
    Image.new(mode, size, color).save(path)
    return path


class Site:
    """A throwaway content tree plus the state one build would share."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.assets = AssetRegistry()
        self.documents = []
        self._graph = None

    def post(self, filename: str, text: str):
        doc = load_document(filename, text)
        self.documents.append(doc)
        return doc

    def write(self, filename: str, text: str) -> Path:
        path = self.root / filename
        path.write_text(text, encoding="utf-8")
        return path

    def image(self, rel_path: str, size=(100, 50), mode="RGB") -> Path:
        return make_image(self.root / rel_path, size, mode)

    @property
    def graph(self) -> DocumentGraph:
        if self._graph is None:
            self._graph = DocumentGraph(self.documents)
            self._graph.link()
        return self._graph

    def render(self, doc, max_width=700, policy=None):
        images = ImageResolver(self.root, max_width, policy or ThumbnailResize())
        err = render_document(doc, self.graph.index(), self.assets, images)
        return doc.content, err


@pytest.fixture
def site(tmp_path):
    return Site(tmp_path / "posts")


@pytest.fixture
def out_dir(tmp_path):
    path = tmp_path / "out"
    return path
