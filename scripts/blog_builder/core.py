#!/usr/bin/env python3
"""
Build driver.

Order matters: the whole document graph is linked before the first render
pass, because links and images resolve against every document and the
shared asset registry.
"""
import shutil
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from .assets import AssetRegistry
from .config import BlogConfig
from .document import Document, DocumentKind
from .errors import BuildError, RenderError
from .feed import render_atom_feed
from .graph import DocumentGraph
from .images import ImageResolver, make_resize_policy
from .page_renderer import render_nav_buttons, render_page_html, validate_output_safety
from .render import render_document
from .sidebar import build_sidebar
from .utils import discover_documents


@dataclass
class BuildResult:
    graph: DocumentGraph
    assets: AssetRegistry
    failures: Dict[str, RenderError] = field(default_factory=dict)
    written: List[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def render_all(graph: DocumentGraph, assets: AssetRegistry, images: ImageResolver,
               progress: bool = True) -> Dict[str, RenderError]:
    """
    Render every parsed document. A failing document does not stop the
    batch; failures are returned keyed by filename.
    """
    index = graph.index()
    failures: Dict[str, RenderError] = {}
    docs = [d for d in graph.all_documents if d.kind is not DocumentKind.COLLECTION]
    for doc in tqdm(docs, desc="Rendering", unit="doc", disable=not progress):
        err = render_document(doc, index, assets, images)
        if err is not None:
            failures[doc.filename] = err
    graph.refresh_collections()
    return failures


def build(cfg: BlogConfig, progress: bool = True) -> BuildResult:
    """Read, link and render the blog. Parse and graph errors are raised."""
    assets = AssetRegistry()
    static_count = assets.add_directory(cfg.template_dir, "static")
    print(f"--> Registered {static_count} static files from {cfg.template_dir}")

    graph = DocumentGraph(discover_documents(cfg.post_dir))
    graph.link()
    graph.generate_archive()
    graph.generate_collections()
    print(f"--> Linked {len(graph.posts_by_date)} posts, {len(graph.pages)} pages, "
          f"{len(graph.series)} series")

    images = ImageResolver(cfg.post_dir, cfg.max_image_width, make_resize_policy(cfg.resize_policy))
    failures = render_all(graph, assets, images, progress=progress)
    return BuildResult(graph=graph, assets=assets, failures=failures)


def _write_page(path: Path, html: str) -> Path:
    is_safe, message = validate_output_safety(html, path.name)
    if not is_safe:
        raise BuildError(f"Refusing to write {path}: {message}", path.name)
    path.write_text(html, encoding="utf-8")
    return path


def write_output(result: BuildResult, cfg: BlogConfig) -> List[Path]:
    """Wipe the output dir, then write static files, pages and the feed."""
    graph = result.graph
    out_dir = Path(cfg.out_dir)
    if out_dir.exists():
        shutil.rmtree(out_dir)
    out_dir.mkdir(parents=True)

    copied = result.assets.copy_to(out_dir)
    print(f"--> Copied {copied} static files")

    written = result.written

    def page(root: Document, docs, prev_doc: Optional[Document] = None,
             next_doc: Optional[Document] = None) -> Path:
        print(f"   [Write] {root.title!r} -> {root.permalink}")
        html = render_page_html(
            cfg, root, docs,
            sidebar_html=build_sidebar(graph, cfg, active=root),
            nav_buttons_html=render_nav_buttons(cfg, prev_doc, next_doc),
        )
        path = _write_page(out_dir / root.permalink, html)
        written.append(path)
        return path

    for doc in graph.pages:
        page(doc, [doc])

    posts = graph.posts_by_date
    for idx, post in enumerate(posts):
        newer = posts[idx - 1] if idx > 0 else None
        older = posts[idx + 1] if idx + 1 < len(posts) else None
        path = page(post, [post], prev_doc=older, next_doc=newer)

        # If this is the most recent post, make a copy for index.html.
        if post is graph.most_recent:
            written.append(Path(shutil.copyfile(path, out_dir / "index.html")))

    for coll in graph.collections:
        # oldest first; the shared children list keeps its own order
        docs = sorted(coll.children, key=lambda d: d.published or datetime.min)
        page(coll, docs)

    feed_path = out_dir / cfg.atom_feed_file
    feed_path.write_text(render_atom_feed(graph, cfg), encoding="utf-8")
    written.append(feed_path)
    return written


def report_failures(failures: Dict[str, RenderError]) -> None:
    for name, err in sorted(failures.items()):
        print(f"   [FAIL] {name}: {err}", file=sys.stderr)


def main(cfg: BlogConfig, best_effort: bool = False, progress: bool = True) -> int:
    """Run the full build. Returns a process exit code."""
    print(f"Build Roots:\n  Posts: {cfg.post_dir}\n  Templates: {cfg.template_dir}\n  Out:  {cfg.out_dir}")
    try:
        result = build(cfg, progress=progress)
        if result.failures:
            print(f"\n[WARNING] {len(result.failures)} documents failed to render.", file=sys.stderr)
            report_failures(result.failures)
            if not best_effort:
                return 2
        write_output(result, cfg)
    except (BuildError, OSError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    print(f"\n[SUCCESS] Wrote {len(result.written)} files to {cfg.out_dir}")
    return 0
