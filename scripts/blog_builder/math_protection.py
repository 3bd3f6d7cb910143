#!/usr/bin/env python3
"""
Math passthrough.
Keeps LaTeX math away from Markdown/HTML processing so MathJax can typeset
it in the browser.
"""
from mistune import escape


def wrap_inline_math(tex: str) -> str:
    r"""
    MathJax reads the raw source from the script element; the noscript
    fallback shows the escaped source between \( and \).
    """
    return (
        f'<script type="math/tex">{tex}</script>'
        f"<noscript>\\({escape(tex)}\\)</noscript>"
    )


def wrap_display_math(tex: str) -> str:
    return (
        f'<script type="math/tex; mode=display">{tex}</script>'
        f"<noscript>\\[{escape(tex)}\\]</noscript>\n"
    )
