"""
Provide the Command Line Interface.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click
from click import Context, Option, Parameter
from jinja2 import Environment, FileSystemLoader, TemplateError

from codeblock import __version__
from codeblock.config import (
    Highlighter,
    HighlighterConfiguration,
    load_configuration_file,
)
from codeblock.error import UserFacingError
from codeblock.jinja2 import register
from codeblock.logging import CliHandler
from codeblock.requirement import ModuleRequirement


@contextmanager
def catch_exceptions() -> Iterator[None]:
    """
    Catch and log all exceptions.
    """
    try:
        yield
    except KeyboardInterrupt:
        print("Quitting...")  # noqa T201
        sys.exit(0)
    except Exception as e:
        logger = logging.getLogger(__name__)
        if isinstance(e, (UserFacingError, TemplateError)):
            logger.error(str(e))
        else:
            logger.exception(e)
        sys.exit(1)


def _init_ctx_logging(ctx: Context, __: Option | Parameter | None, is_verbose: bool) -> None:
    handler = CliHandler()
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    ctx.call_on_close(lambda: root_logger.removeHandler(handler))
    if is_verbose:
        logging.getLogger("codeblock").setLevel(logging.DEBUG)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_init_ctx_logging,
    help="Show verbose output, including debugging information.",
)
@click.version_option(version=__version__)
def main() -> None:
    """
    Render code blocks in Jinja2 templates to highlighted HTML.
    """


@main.command()
@click.argument(
    "template",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    default="-",
)
@click.option(
    "--configuration",
    "-c",
    "configuration_file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="The path to a JSON or YAML highlighter configuration file.",
)
@click.option(
    "--highlighter",
    type=click.Choice([highlighter.value for highlighter in Highlighter]),
    help="The highlighter to use. Overrides the configuration file.",
)
@click.option(
    "--safe/--no-safe",
    default=None,
    help="Restrict the options passed on to external highlighters. Overrides the configuration file.",
)
@catch_exceptions()
def render(
    template: Path,
    configuration_file_path: Path | None,
    highlighter: str | None,
    safe: bool | None,
) -> None:
    """
    Render a Jinja2 template file, or stdin, to stdout.
    """
    configuration = HighlighterConfiguration()
    if configuration_file_path is not None:
        load_configuration_file(configuration, configuration_file_path)
    if highlighter is not None:
        configuration.highlighter = Highlighter(highlighter)
    if safe is not None:
        configuration.safe = safe

    if str(template) == "-":
        environment = Environment()
        register(environment, configuration)
        with click.open_file("-") as f:
            source = f.read()
        rendered = environment.from_string(source).render()
    else:
        if not template.is_file():
            raise UserFacingError(f'Could not find the file "{template}".')
        environment = Environment(loader=FileSystemLoader(template.parent))
        register(environment, configuration)
        rendered = environment.get_template(template.name).render()
    click.echo(rendered)


@main.command()
@click.argument("style", default="default")
@catch_exceptions()
def style(style: str) -> None:
    """
    Print the CSS for a Pygments style.
    """
    ModuleRequirement("pygments", distribution_name="Pygments").assert_met()
    from pygments.formatters.html import HtmlFormatter
    from pygments.util import ClassNotFound

    try:
        formatter = HtmlFormatter(style=style)
    except ClassNotFound:
        raise UserFacingError(f'Unknown Pygments style "{style}".') from None
    click.echo(formatter.get_style_defs(".highlight"))
