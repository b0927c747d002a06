"""
Provide test utilities for codeblock and for projects that use it.
"""

from __future__ import annotations

import html5lib
from html5lib.html5parser import ParseError


def assert_html(html: str) -> str:
    """
    Assert that an HTML fragment is well-formed.
    """
    try:
        html5lib.HTMLParser(strict=True).parseFragment(html)
    except ParseError as e:
        raise AssertionError(f'HTML parse error "{e}" in:\n{html}') from None
    return html
