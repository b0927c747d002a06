"""
An API to produce and load serializable data dumps.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import MutableMapping, MutableSequence
from typing import TypeVar, TypeAlias, TYPE_CHECKING

import yaml

from codeblock.assertion.error import AssertionFailed

if TYPE_CHECKING:
    from pathlib import Path

#: A serialized dump.
Dump: TypeAlias = (
    bool
    | int
    | float
    | str
    | None
    | MutableSequence["Dump"]
    | MutableMapping[str, "Dump"]
)
_DumpT = TypeVar("_DumpT", bound=Dump)

#: A dump which is a mapping whose keys are strings and values are serialized dumps.
DumpMapping: TypeAlias = MutableMapping[str, _DumpT]


class Dumpable(ABC):
    """
    Instances can be produce serialized data dumps of ``self``.
    """

    @abstractmethod
    def dump(self) -> Dump:
        """
        Produce a serialized data dump of ``self``.
        """
        pass


class Loadable(ABC):
    """
    Instances can load serializable data dumps into ``self``.
    """

    @abstractmethod
    def load(self, dump: Dump) -> None:
        """
        Load a serialized data dump into ``self``.

        :raises codeblock.assertion.error.AssertionFailed: Raised if the dump is invalid.
        """
        pass


def load_file(file_path: Path) -> Dump:
    """
    Read a JSON or YAML file into a dump.

    The format is chosen by the file's extension.
    """
    with open(file_path, encoding="utf-8") as f:
        source = f.read()
    suffix = file_path.suffix.lower()
    if suffix == ".json":
        try:
            return json.loads(source)  # type: ignore[no-any-return]
        except json.JSONDecodeError as error:
            raise AssertionFailed(f"Invalid JSON: {error}.") from error
    if suffix in (".yaml", ".yml"):
        try:
            return yaml.safe_load(source)  # type: ignore[no-any-return]
        except yaml.YAMLError as error:
            raise AssertionFailed(f"Invalid YAML: {error}.") from error
    raise AssertionFailed(
        f'Unknown file format "{file_path.suffix}". Use one of ".json", ".yaml", ".yml".'
    )
