#!/usr/bin/env python3
"""
Blog Builder Package
====================

Turns a directory of Markdown posts into a linked static HTML blog with
series, cross-post links, image thumbnails and MathJax math.

Modules:
    - config: Defaults and the BlogConfig settings object
    - document: The Document model
    - front_matter: "-key=value" header parsing and validation
    - analysis: Title and feature-flag extraction pass
    - graph: Parent/child linking, ordering, archive and collections
    - render: Markdown-to-HTML pass with link/image/math/tag overrides
    - images: Image lookup, size probing and resize policies
    - assets: Static asset registry
    - page_renderer, sidebar, feed: Output collaborators
    - core: The build driver

Usage:
    from blog_builder import run
    run(BlogConfig(post_dir=Path("posts")))
"""

__version__ = "1.0.0"

import sys
from pathlib import Path
from typing import Optional

from .config import (
    BlogConfig,
    load_config,
    RESIZE_POLICIES,
)

from .document import (
    Document,
    DocumentKind,
)

from .errors import (
    BuildError,
    ParseError,
    StructureError,
    GraphError,
    AssetConflictError,
    RenderError,
)

from .front_matter import (
    derive_id,
    parse_front_matter,
    load_document,
)

from .analysis import analyze

from .graph import DocumentGraph

from .assets import AssetRegistry

from .images import (
    ImageResolver,
    ScaleResize,
    ThumbnailResize,
    make_resize_policy,
)

from .render import render_document


def run(cfg: BlogConfig, best_effort: bool = False, progress: bool = True) -> int:
    """
    Run the full build pipeline.

    Args:
        cfg: Site configuration
        best_effort: Publish even if some documents failed to render
        progress: Show a progress bar while rendering
    """
    from . import core
    return core.main(cfg, best_effort=best_effort, progress=progress)


def run_with_args(argv: Optional[list] = None) -> int:
    """
    Run the build with command-line arguments.
    This is the CLI entry point.
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="Build a static blog from Markdown posts.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    blog-builder --posts posts --out out
    blog-builder --config blog.json --resize-policy scale
    blog-builder --config blog.json --best-effort --quiet
        """
    )
    parser.add_argument("--config", type=Path, help="JSON file with site settings")
    parser.add_argument("--posts", type=Path, dest="post_dir", help="Directory with *.md posts")
    parser.add_argument("--templates", type=Path, dest="template_dir", help="Template directory (static/ is copied)")
    parser.add_argument("--out", type=Path, dest="out_dir", help="Output directory (wiped on every build)")
    parser.add_argument("--base-url", help="Base URL for asset links (e.g. '/blog')")
    parser.add_argument("--max-image-width", type=int, help="Images wider than this get a click-through link")
    parser.add_argument("--resize-policy", choices=RESIZE_POLICIES, help="How oversized images are shown")
    parser.add_argument("--best-effort", action="store_true", help="Write output even if documents failed to render")
    parser.add_argument("--quiet", action="store_true", help="No progress bar")

    args = parser.parse_args(argv)
    overrides = {
        "post_dir": args.post_dir,
        "template_dir": args.template_dir,
        "out_dir": args.out_dir,
        "base_url": args.base_url,
        "max_image_width": args.max_image_width,
        "resize_policy": args.resize_policy,
    }

    try:
        if args.config:
            cfg = load_config(args.config, **overrides)
        else:
            cfg = BlogConfig(**{k: v for k, v in overrides.items() if v is not None})
    except (OSError, ValueError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    return run(cfg, best_effort=args.best_effort, progress=not args.quiet)


__all__ = [
    # Main entry points
    'run',
    'run_with_args',
    # Config
    'BlogConfig',
    'load_config',
    'RESIZE_POLICIES',
    # Model
    'Document',
    'DocumentKind',
    # Errors
    'BuildError',
    'ParseError',
    'StructureError',
    'GraphError',
    'AssetConflictError',
    'RenderError',
    # Passes
    'derive_id',
    'parse_front_matter',
    'load_document',
    'analyze',
    'DocumentGraph',
    'AssetRegistry',
    'ImageResolver',
    'ScaleResize',
    'ThumbnailResize',
    'make_resize_policy',
    'render_document',
]
