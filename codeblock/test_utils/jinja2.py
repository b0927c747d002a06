"""
Utilities for testing Jinja2 templates that use code block tags.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from jinja2 import Environment

from codeblock.config import HighlighterConfiguration
from codeblock.jinja2 import register

if TYPE_CHECKING:
    from collections.abc import Mapping


def new_environment(
    configuration: HighlighterConfiguration | None = None,
    **kwargs: Any,
) -> Environment:
    """
    Create a Jinja2 environment with the code block tags registered.
    """
    environment = Environment(**kwargs)
    register(
        environment,
        HighlighterConfiguration() if configuration is None else configuration,
    )
    return environment


def render_template_string(
    template: str,
    *,
    configuration: HighlighterConfiguration | None = None,
    data: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> str:
    """
    Render a template string with the code block tags registered.
    """
    return (
        new_environment(configuration, **kwargs)
        .from_string(template)
        .render(**(data or {}))
    )


class TemplateStringTestBase:
    """
    A base class for testing Jinja2 template strings.
    """

    configuration: HighlighterConfiguration | None = None
    """
    The configuration to render templates with. Defaults to a new, default configuration.
    """

    def render_template_string(
        self,
        template: str,
        *,
        data: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> str:
        """
        Render a template string with the code block tags registered.
        """
        return render_template_string(
            template, configuration=self.configuration, data=data, **kwargs
        )
