"""
Highlight code using the configured backend.
"""

from __future__ import annotations

import logging
import re
from typing import Any, TYPE_CHECKING

from markupsafe import escape
from typing_extensions import assert_never

from codeblock.config import Highlighter
from codeblock.error import UserFacingError
from codeblock.requirement import ExecutableRequirement, ModuleRequirement
from codeblock.subprocess import SubprocessError, run_process

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping, Sequence
    from pygments.lexer import Lexer
    from codeblock.config import HighlighterConfiguration
    from codeblock.markup import CodeBlockDirective

#: The options forwarded to ``pygmentize`` in safe mode, and their defaults.
SAFE_OPTIONS: Mapping[str, Any] = {
    "startinline": None,
    "hl_lines": None,
    "linenos": None,
    "encoding": "utf-8",
    "cssclass": None,
}

_WRAPPER_START = re.compile(r'^<div class="[^"]*"><pre>(?:<span></span>)?')
_WRAPPER_END = re.compile(r"</pre></div>\s*$")


class HighlightError(UserFacingError, RuntimeError):
    """
    Raised when a highlighter failed to highlight code.
    """

    pass


def highlight(
    directive: CodeBlockDirective,
    code: str,
    configuration: HighlighterConfiguration,
) -> str:
    """
    Highlight code for a directive.

    The returned HTML is not wrapped in ``<pre>`` or ``<figure>`` elements.

    :raises codeblock.requirement.RequirementError: Raised if the highlighter is not available.
    :raises codeblock.highlight.HighlightError: Raised if the highlighter failed.
    """
    highlighter = configuration.highlighter
    if highlighter is Highlighter.PYGMENTS:
        return highlight_pygments(directive, code)
    if highlighter is Highlighter.PYGMENTIZE:
        return highlight_pygmentize(
            directive,
            code,
            executable=configuration.pygmentize,
            safe=configuration.safe,
        )
    if highlighter is Highlighter.NONE:
        return highlight_none(code)
    assert_never(highlighter)


def highlight_pygments(directive: CodeBlockDirective, code: str) -> str:
    """
    Highlight code in-process with Pygments.
    """
    ModuleRequirement("pygments", distribution_name="Pygments").assert_met()
    from pygments import highlight as pygments_highlight
    from pygments.formatters.html import HtmlFormatter

    formatter = HtmlFormatter(
        linenos="inline" if directive.line_numbers else False,
        linenostart=directive.starting_line,
    )
    return _unwrap(
        pygments_highlight(code, _find_lexer(directive.language, code), formatter)
    )


def _find_lexer(language: str | None, code: str) -> Lexer:
    from pygments.lexers import get_lexer_by_name, guess_lexer
    from pygments.lexers.special import TextLexer
    from pygments.util import ClassNotFound

    if language:
        try:
            if language == "guess":
                return guess_lexer(code)
            return get_lexer_by_name(language)
        except ClassNotFound:
            logging.getLogger(__name__).debug(
                f'No lexer found for "{language}". Falling back to plain text.'
            )
    return TextLexer()


def highlight_pygmentize(
    directive: CodeBlockDirective,
    code: str,
    *,
    executable: str = "pygmentize",
    safe: bool = False,
) -> str:
    """
    Highlight code with the ``pygmentize`` executable.

    :raises codeblock.highlight.HighlightError: Raised if ``pygmentize`` returned no usable output.
    """
    ExecutableRequirement(executable).assert_met()
    options = sanitize_options(directive.options, safe)
    encoding = str(options.get("encoding", "utf-8"))
    highlighted = None
    try:
        highlighted = run_process(
            build_pygmentize_command(executable, directive.language, options),
            stdin=code.encode(encoding),
        ).decode(encoding)
    except (SubprocessError, LookupError, UnicodeError) as error:
        logging.getLogger(__name__).debug(str(error))
    if not highlighted:
        logging.getLogger(__name__).error(
            f"""There was an error highlighting your code:

{code}

While attempting to convert the above code, {executable} returned an unacceptable value.
"""
        )
        raise HighlightError(
            f"{executable} returned an unacceptable value when attempting to highlight some code."
        )
    return _unwrap(highlighted)


def build_pygmentize_command(
    executable: str, language: str | None, options: Mapping[str, Any]
) -> Sequence[str]:
    """
    Build the ``pygmentize`` command line for the given language and options.
    """
    command = [executable, "-f", "html", "-l", language or "text"]
    for key, value in options.items():
        command += ["-P", f"{key}={_format_option(value)}"]
    return command


def _format_option(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return " ".join(map(str, value))
    return str(value)


def sanitize_options(options: Mapping[str, Any], safe: bool) -> Mapping[str, Any]:
    """
    Restrict highlighter options in safe mode.

    Outside safe mode, options are returned unchanged. In safe mode, only
    :py:data:`codeblock.highlight.SAFE_OPTIONS` are kept, defaults are applied,
    and options without a value are dropped.
    """
    if not safe:
        return dict(options)
    sanitized: MutableMapping[str, Any] = {}
    for key, default in SAFE_OPTIONS.items():
        value = options.get(key, default)
        if value is not None:
            sanitized[key] = value
    return sanitized


def highlight_none(code: str) -> str:
    """
    Escape code without highlighting it.
    """
    return str(escape(code)).strip()


def _unwrap(highlighted: str) -> str:
    return _WRAPPER_END.sub("", _WRAPPER_START.sub("", highlighted, count=1), count=1)
