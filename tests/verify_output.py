#!/usr/bin/env python3
import argparse
import glob
import os
import sys
from typing import List, Tuple
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup


def find_html_files(publish_dir: str) -> List[str]:
    return sorted(glob.glob(os.path.join(publish_dir, "**", "*.html"), recursive=True))


def read_soup(path: str) -> BeautifulSoup:
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        return BeautifulSoup(f.read(), "html.parser")


def contains_math(soup: BeautifulSoup) -> bool:
    return any("math/tex" in s.get("type", "") for s in soup.find_all("script"))


def contains_mathjax(soup: BeautifulSoup) -> bool:
    return any("mathjax" in s.get("src", "").lower() for s in soup.find_all("script"))


def extract_img_srcs(soup: BeautifulSoup) -> List[str]:
    return [img["src"] for img in soup.find_all("img") if img.get("src")]


def extract_local_links(soup: BeautifulSoup) -> List[str]:
    links = []
    for a in soup.find_all("a", href=True):
        href = a["href"]
        if is_external_or_data_url(href) or href.startswith("#"):
            continue
        links.append(href)
    return links


def is_external_or_data_url(path: str) -> bool:
    p = path.lower()
    return p.startswith("http://") or p.startswith("https://") or p.startswith("data:")


def local_target(publish_dir: str, ref: str) -> str:
    path = unquote(urlsplit(ref).path)
    return os.path.normpath(os.path.join(publish_dir, path))


def check_references(html_files: List[str], publish_dir: str) -> Tuple[bool, List[Tuple[str, str]]]:
    """Every local <img src> and <a href> must point at a written file."""
    missing: List[Tuple[str, str]] = []
    for html_file in html_files:
        soup = read_soup(html_file)
        for ref in extract_img_srcs(soup) + extract_local_links(soup):
            if is_external_or_data_url(ref):
                continue
            if not os.path.exists(local_target(publish_dir, ref)):
                missing.append((html_file, ref))
    return (len(missing) == 0, missing)


def check_mathjax(html_files: List[str]) -> List[str]:
    """Pages with math must load MathJax."""
    missing = []
    for html_file in html_files:
        soup = read_soup(html_file)
        if contains_math(soup) and not contains_mathjax(soup):
            missing.append(html_file)
    return missing


def verify(publish_dir: str) -> int:
    publish_dir = os.path.abspath(publish_dir)
    if not os.path.isdir(publish_dir):
        print(f"ERROR: publish directory not found: {publish_dir}", file=sys.stderr)
        return 2

    html_files = find_html_files(publish_dir)
    if not html_files or not os.path.exists(os.path.join(publish_dir, "index.html")):
        print(f"ERROR: No index.html found in {publish_dir}", file=sys.stderr)
        return 2

    no_mathjax = check_mathjax(html_files)
    if no_mathjax:
        for html_file in no_mathjax:
            print(f"ERROR: MathJax not loaded in {html_file}", file=sys.stderr)
        return 3

    ok_refs, missing = check_references(html_files, publish_dir)
    if not ok_refs:
        print("ERROR: Missing files referenced by HTML:", file=sys.stderr)
        for html_file, ref in missing[:50]:  # limit to avoid huge logs
            print(f"  {html_file} -> {ref}", file=sys.stderr)
        if len(missing) > 50:
            print(f"  ... and {len(missing) - 50} more", file=sys.stderr)
        return 4

    # All checks passed
    print(f"OK: {len(html_files)} HTML files validated in {publish_dir}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Verify generated blog output")
    parser.add_argument("--publish-dir", default="out", help="Directory with generated site files")
    args = parser.parse_args()
    return verify(args.publish_dir)


if __name__ == "__main__":
    sys.exit(main())
