"""
Provide the ``codeblock`` and ``highlight`` tags for `Jinja2 <https://jinja.palletsprojects.com>`_.

Register the tags with an environment through :py:func:`codeblock.jinja2.register`:

.. code-block:: jinja

    {% codeblock Got pain? painrelief.sh https://site.com/painrelief.sh Download it! %}
    $ rm -rf ~/PAIN
    {% endcodeblock %}

    {% highlight ruby linenos %}
    puts "Hello"
    {% endhighlight %}
"""

from __future__ import annotations

import re
from typing import Any, Callable, ClassVar, TYPE_CHECKING, cast, final

from jinja2 import nodes
from jinja2.ext import Extension
from markupsafe import Markup
from typing_extensions import override

from codeblock.config import HighlighterConfiguration
from codeblock.markup import (
    CodeBlockDirective,
    MarkupSyntaxError,
    parse_highlight_markup,
    parse_markup,
)
from codeblock.render import render_code_block

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from jinja2 import Environment
    from jinja2.parser import Parser
    from jinja2.runtime import Context

#: The render context variable that overrides the configured prefix.
PREFIX_CONTEXT_VAR = "highlighter_prefix"
#: The render context variable that overrides the configured suffix.
SUFFIX_CONTEXT_VAR = "highlighter_suffix"


def environment_configuration(environment: Environment) -> HighlighterConfiguration:
    """
    Get the code block configuration for a Jinja2 environment.
    """
    return cast(HighlighterConfiguration, environment.codeblock_configuration)  # type: ignore[attr-defined]


class _CodeBlockExtensionBase(Extension):
    """
    A block tag whose opening markup is free text rather than Jinja2 expressions.

    Tag markup is captured verbatim and turned into a string literal before the
    template is tokenized. ``{% raw %}`` sections are left untouched.
    """

    tag: ClassVar[str]

    def __init__(self, environment: Environment):
        super().__init__(environment)
        environment.extend(codeblock_configuration=HighlighterConfiguration())

    def parse_directive(self, markup: str) -> CodeBlockDirective:
        """
        Parse the tag's markup.

        :raises codeblock.markup.MarkupSyntaxError: Raised if the markup is invalid.
        """
        raise NotImplementedError(repr(self))

    def _tag_pattern(self) -> re.Pattern[str]:
        block_start = re.escape(self.environment.block_start_string)
        block_end = re.escape(self.environment.block_end_string)
        raw = (
            rf"{block_start}[-+]?\s*raw\s*[-+]?{block_end}"
            rf".*?{block_start}[-+]?\s*endraw\s*[-+]?{block_end}"
        )
        tag = (
            rf"{block_start}(?P<open>[-+]?)\s*{re.escape(self.tag)}"
            rf"(?P<markup>(?:\s.*?)?)\s*(?P<close>[-+]?){block_end}"
        )
        return re.compile(rf"(?P<raw>{raw})|{tag}", re.DOTALL)

    def _quote_markup(self, match: re.Match[str]) -> str:
        if match.group("raw") is not None:
            return match.group("raw")
        return "{block_start}{open} {tag} {markup} {close}{block_end}".format(
            block_start=self.environment.block_start_string,
            open=match.group("open"),
            tag=self.tag,
            markup=repr(match.group("markup").strip()),
            close=match.group("close"),
            block_end=self.environment.block_end_string,
        )

    @override
    def preprocess(
        self, source: str, name: str | None, filename: str | None = None
    ) -> str:
        return self._tag_pattern().sub(self._quote_markup, source)

    @override
    def parse(self, parser: Parser) -> nodes.Node:
        lineno = next(parser.stream).lineno
        markup = parser.stream.expect("string").value
        try:
            self.parse_directive(markup)
        except MarkupSyntaxError as error:
            parser.fail(str(error), lineno)
        body = parser.parse_statements((f"name:end{self.tag}",), drop_needle=True)
        return nodes.CallBlock(
            self.call_method(
                "_render", [nodes.Const(markup), nodes.ContextReference()]
            ),
            [],
            [],
            body,
        ).set_lineno(lineno)

    def _render(
        self, markup: str, context: Context, caller: Callable[[], Any]
    ) -> Markup | Awaitable[Markup]:
        if self.environment.is_async:
            return self._render_async(markup, context, caller)
        return self._render_body(markup, context, caller())

    async def _render_async(
        self, markup: str, context: Context, caller: Callable[[], Any]
    ) -> Markup:
        return self._render_body(markup, context, await caller())

    def _render_body(self, markup: str, context: Context, body: Any) -> Markup:
        return Markup(
            render_code_block(
                self.parse_directive(markup),
                str(body),
                environment_configuration(self.environment),
                prefix=context.get(PREFIX_CONTEXT_VAR),
                suffix=context.get(SUFFIX_CONTEXT_VAR),
            )
        )


@final
class CodeBlockExtension(_CodeBlockExtensionBase):
    """
    Provide the ``{% codeblock [lang:<language>] [title] [url] [link text] %}`` tag.
    """

    tag = "codeblock"
    tags = {tag}

    @override
    def parse_directive(self, markup: str) -> CodeBlockDirective:
        return parse_markup(markup)


@final
class HighlightExtension(_CodeBlockExtensionBase):
    """
    Provide the ``{% highlight <language> [option...] %}`` tag.
    """

    tag = "highlight"
    tags = {tag}

    @override
    def parse_directive(self, markup: str) -> CodeBlockDirective:
        return parse_highlight_markup(markup)


def register(
    environment: Environment,
    configuration: HighlighterConfiguration | None = None,
) -> None:
    """
    Register the code block tags with a Jinja2 environment.
    """
    environment.add_extension(CodeBlockExtension)
    environment.add_extension(HighlightExtension)
    if configuration is not None:
        environment.codeblock_configuration = configuration  # type: ignore[attr-defined]
