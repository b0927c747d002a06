"""
Parse code block tag markup into directives.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, TYPE_CHECKING, final

from markupsafe import escape

from codeblock.error import UserFacingError

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping

_LANG = re.compile(r"\s*lang:(\S+)", re.IGNORECASE)
_CAPTION_URL_TITLE = re.compile(
    r"(\S[\S\s]*)\s+(https?://\S+|/\S+)\s*(.+)?", re.IGNORECASE
)
_CAPTION = re.compile(r"(\S[\S\s]*)")
_FILE_EXTENSION = re.compile(r"[\S\s]*\w\.(\w+)")
_STARTING_LINE = re.compile(r"\S+#L(\d+)")

_HIGHLIGHT_SYNTAX = re.compile(
    r'^([a-zA-Z0-9.+#-]+)((\s+\w+(=(\w+|"([0-9]+\s)*[0-9]+"))?)*)$'
)
_HIGHLIGHT_OPTION = re.compile(r'(?:\w="[^"]*"|\w=\w|\w)+')

DEFAULT_LINK_LABEL = "link"


class MarkupSyntaxError(UserFacingError, ValueError):
    """
    Raised when tag markup is invalid.
    """

    pass


@final
@dataclass(frozen=True)
class CodeBlockDirective:
    """
    One parsed occurrence of a code block tag.
    """

    title: str | None = None
    language: str | None = None
    caption_html: str | None = None
    link_url: str | None = None
    link_label: str | None = None
    starting_line: int = 1
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    line_numbers: bool = True


@lru_cache(maxsize=256)
def parse_markup(markup: str) -> CodeBlockDirective:
    """
    Parse ``codeblock`` tag markup.

    The markup reads ``[lang:<language>] [title] [url] [link label]``. Every part is
    optional, and markup that matches nothing produces a directive without a caption.
    """
    language = None
    lang_match = _LANG.search(markup)
    if lang_match:
        language = lang_match.group(1)
        markup = _LANG.sub("", markup, count=1)
    markup = markup.strip()

    title = None
    caption_html = None
    link_url = None
    link_label = None
    starting_line = 1

    caption_url_title_match = _CAPTION_URL_TITLE.search(markup)
    if caption_url_title_match:
        title = caption_url_title_match.group(1).replace("%20", " ")
        link_url = caption_url_title_match.group(2)
        link_label = caption_url_title_match.group(3) or DEFAULT_LINK_LABEL
        caption_html = (
            f"<figcaption><span>{escape(title)}</span> "
            f'<a href="{escape(link_url)}">{escape(link_label)}</a></figcaption>'
        )
        starting_line_match = _STARTING_LINE.search(link_url)
        if starting_line_match:
            starting_line = int(starting_line_match.group(1))
    else:
        caption_match = _CAPTION.search(markup)
        if caption_match:
            title = caption_match.group(1)
            caption_html = f"<figcaption><span>{escape(title)}</span></figcaption>\n"

    if language is None and title is not None:
        file_extension_match = _FILE_EXTENSION.search(title)
        if file_extension_match:
            language = file_extension_match.group(1)

    return CodeBlockDirective(
        title=title,
        language=language,
        caption_html=caption_html,
        link_url=link_url,
        link_label=link_label,
        starting_line=starting_line,
    )


@lru_cache(maxsize=256)
def parse_highlight_markup(markup: str) -> CodeBlockDirective:
    """
    Parse ``highlight`` tag markup.

    The markup reads ``<language> [option...]``, where each option is ``name``,
    ``name=value``, or ``name="<space-separated numbers>"``.

    :raises codeblock.markup.MarkupSyntaxError: Raised if the markup is invalid.
    """
    match = _HIGHLIGHT_SYNTAX.match(markup.strip())
    if not match:
        raise MarkupSyntaxError(
            f"""Syntax Error in tag 'highlight' while parsing the following markup:

  {markup}

Valid syntax: highlight <lang> [linenos]"""
        )
    options = _parse_highlight_options(match.group(2))
    return CodeBlockDirective(
        language=match.group(1).lower(),
        options=MappingProxyType(options),
        line_numbers="linenos" in options,
    )


def _parse_highlight_options(markup: str) -> MutableMapping[str, Any]:
    options: MutableMapping[str, Any] = {}
    for option in _HIGHLIGHT_OPTION.findall(markup):
        key, _, value = option.partition("=")
        if '"' in value:
            options[key] = value.replace('"', "").split()
        else:
            options[key] = value or True
    if options.get("linenos") is True:
        options["linenos"] = "inline"
    return options
