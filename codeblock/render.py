"""
Render code blocks to HTML.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from markupsafe import escape

from codeblock.highlight import highlight

if TYPE_CHECKING:
    from codeblock.config import HighlighterConfiguration
    from codeblock.markup import CodeBlockDirective

_BLANK_LINES = re.compile(r"\A[\n\r]+|[\n\r]+\Z")
_TRAILING_LINE_BREAK = re.compile(r"(?:\r\n|\n|\r)\Z")


def strip_blank_lines(code: str) -> str:
    """
    Remove leading and trailing line breaks.

    Whitespace on the first and last lines of code is preserved.
    """
    return _BLANK_LINES.sub("", code)


def language_class(language: str | None) -> str:
    """
    Build the CSS class name for a language.

    ``+`` is not valid in a bare CSS class token, so it is replaced by ``-``.
    """
    return f"language-{(language or '').replace('+', '-')}"


def wrap(
    highlighted_html: str, caption_html: str | None, language: str | None
) -> str:
    """
    Wrap highlighted code in a figure.
    """
    code_attributes = " ".join(
        [
            f'class="{escape(language_class(language))}"',
            f'data-lang="{escape(language or "")}"',
        ]
    )
    code = _TRAILING_LINE_BREAK.sub("", highlighted_html, count=1)
    return (
        f'<figure class="highlight">{caption_html or ""}<pre><code {code_attributes}>'
        f"{code}</code></pre></figure>"
    )


def render_code_block(
    directive: CodeBlockDirective,
    body: str,
    configuration: HighlighterConfiguration,
    *,
    prefix: str | None = None,
    suffix: str | None = None,
) -> str:
    """
    Render a code block's body to HTML.

    ``prefix`` and ``suffix`` default to the configuration's values.
    """
    code = strip_blank_lines(body)
    rendered = wrap(
        highlight(directive, code, configuration),
        directive.caption_html,
        directive.language,
    )
    return (
        (configuration.prefix if prefix is None else prefix)
        + rendered
        + (configuration.suffix if suffix is None else suffix)
    )
