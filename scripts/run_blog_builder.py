#!/usr/bin/env python3
"""
Blog Builder
============

Turns a directory of Markdown posts into a static HTML blog.

Usage:
    python run_blog_builder.py --posts posts --templates template --out out
    python run_blog_builder.py --config blog.json --resize-policy scale

Features:
    - "-key=value" front matter (title, time, updated, type, parent, id)
    - Post series with generated collection pages
    - Cross-post links: [%](*12) links post 12 with its title
    - Image lookup through the series, thumbnails for wide images
    - MathJax math and highlight.js code blocks, loaded only when used
    - Archive page and Atom feed
"""

import sys
import os

# Ensure the scripts directory is in the path
script_dir = os.path.dirname(os.path.abspath(__file__))
if script_dir not in sys.path:
    sys.path.insert(0, script_dir)


def main():
    """Main entry point for the blog builder."""
    from blog_builder import run_with_args
    return run_with_args()


if __name__ == "__main__":
    sys.exit(main())
