"""
The Configuration API.
"""

from __future__ import annotations

from enum import Enum
from typing import final, TYPE_CHECKING, Self

from typing_extensions import override

from codeblock.assertion import (
    OptionalField,
    assert_bool,
    assert_enum,
    assert_record,
    assert_setattr,
    assert_str,
)
from codeblock.assertion.error import AssertionFailedGroup
from codeblock.serde import Dumpable, Loadable, load_file

if TYPE_CHECKING:
    from pathlib import Path
    from codeblock.serde import Dump, DumpMapping


class Configuration(Loadable, Dumpable):
    """
    Any configuration object.
    """

    def update(self, other: Self) -> None:
        """
        Update this configuration with the values from ``other``.
        """
        self.load(other.dump())


class Highlighter(Enum):
    """
    The available highlighting backends.
    """

    #: Highlight in-process with Pygments.
    PYGMENTS = "pygments"
    #: Highlight with the ``pygmentize`` executable in a subprocess.
    PYGMENTIZE = "pygmentize"
    #: Do not highlight, and only escape the code.
    NONE = "none"


@final
class HighlighterConfiguration(Configuration):
    """
    Provide configuration for rendering code blocks.
    """

    def __init__(
        self,
        *,
        highlighter: Highlighter = Highlighter.PYGMENTS,
        safe: bool = False,
        prefix: str = "",
        suffix: str = "",
        pygmentize: str = "pygmentize",
    ):
        super().__init__()
        self._highlighter = highlighter
        self._safe = safe
        self._prefix = prefix
        self._suffix = suffix
        self._pygmentize = pygmentize

    @property
    def highlighter(self) -> Highlighter:
        """
        The highlighting backend.
        """
        return self._highlighter

    @highlighter.setter
    def highlighter(self, highlighter: Highlighter) -> None:
        self._highlighter = highlighter

    @property
    def safe(self) -> bool:
        """
        Whether to restrict the options forwarded to external highlighters.
        """
        return self._safe

    @safe.setter
    def safe(self, safe: bool) -> None:
        self._safe = safe

    @property
    def prefix(self) -> str:
        """
        The HTML to prepend to every rendered code block.
        """
        return self._prefix

    @prefix.setter
    def prefix(self, prefix: str) -> None:
        self._prefix = prefix

    @property
    def suffix(self) -> str:
        """
        The HTML to append to every rendered code block.
        """
        return self._suffix

    @suffix.setter
    def suffix(self, suffix: str) -> None:
        self._suffix = suffix

    @property
    def pygmentize(self) -> str:
        """
        The ``pygmentize`` executable used by :py:attr:`codeblock.config.Highlighter.PYGMENTIZE`.
        """
        return self._pygmentize

    @pygmentize.setter
    def pygmentize(self, pygmentize: str) -> None:
        self._pygmentize = pygmentize

    @override
    def load(self, dump: Dump) -> None:
        assert_record(
            OptionalField(
                "highlighter",
                assert_enum(Highlighter) | assert_setattr(self, "highlighter"),
            ),
            OptionalField("safe", assert_bool() | assert_setattr(self, "safe")),
            OptionalField("prefix", assert_str() | assert_setattr(self, "prefix")),
            OptionalField("suffix", assert_str() | assert_setattr(self, "suffix")),
            OptionalField(
                "pygmentize", assert_str() | assert_setattr(self, "pygmentize")
            ),
        )(dump)

    @override
    def dump(self) -> DumpMapping[Dump]:
        return {
            "highlighter": self.highlighter.value,
            "safe": self.safe,
            "prefix": self.prefix,
            "suffix": self.suffix,
            "pygmentize": self.pygmentize,
        }


def load_configuration_file(
    configuration: Configuration, configuration_file_path: Path
) -> None:
    """
    Load configuration from a JSON or YAML file.
    """
    with AssertionFailedGroup().assert_valid() as errors:
        with errors.catch(f"in {configuration_file_path.resolve()}"):
            configuration.load(load_file(configuration_file_path))
