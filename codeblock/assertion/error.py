"""
Provide assertion failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from textwrap import indent
from typing import Iterator, Self, TYPE_CHECKING, TypeAlias

from typing_extensions import override

from codeblock.error import UserFacingError

if TYPE_CHECKING:
    from collections.abc import Sequence, MutableSequence


class AssertionContext(ABC):
    """
    The context in which an assertion is invoked.
    """

    @abstractmethod
    def format(self) -> str:
        """
        Format this context to a string.
        """
        pass


class Key(AssertionContext):
    """
    A mapping key context.
    """

    def __init__(self, key: str):
        self._key = key

    @override
    def format(self) -> str:
        return f'["{self._key}"]'


Contextey: TypeAlias = AssertionContext | str


def format_contexts(*contexts: Contextey) -> Sequence[str]:
    """
    Format the contexts as human-readable lines.

    Consecutive data contexts are collapsed into a single path such as ``data["highlighter"]``.
    """
    lines: MutableSequence[str] = []
    data_path: str | None = None
    for context in contexts:
        if isinstance(context, AssertionContext):
            data_path = (data_path or "data") + context.format()
            continue
        if data_path is not None:
            lines.append(data_path)
            data_path = None
        lines.append(context)
    if data_path is not None:
        lines.append(data_path)
    return lines


class AssertionFailed(UserFacingError, ValueError):
    """
    An assertion failure.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self._contexts: tuple[Contextey, ...] = ()

    @override
    def __str__(self) -> str:
        return (
            super().__str__()
            + "\n"
            + indent("\n".join(format_contexts(*self.contexts)), "- ")
        ).strip()

    def raised(self, error_type: type[AssertionFailed]) -> bool:
        """
        Check if the error matches the given error type.
        """
        return isinstance(self, error_type)

    @property
    def contexts(self) -> tuple[Contextey, ...]:
        """
        Get the human-readable contexts describing where the error occurred in the source data.
        """
        return self._contexts

    def with_context(self, *contexts: Contextey) -> Self:
        """
        Add a message describing the error's context.
        """
        self_copy = self._copy()
        self_copy._contexts = (*reversed(contexts), *self._contexts)
        return self_copy

    def _copy(self) -> Self:
        return type(self)(self._message)


class AssertionFailedGroup(AssertionFailed):
    """
    A group of zero or more assertion failures.
    """

    def __init__(
        self,
        errors: Sequence[AssertionFailed] | None = None,
    ):
        super().__init__("The following errors occurred")
        self._errors: MutableSequence[AssertionFailed] = []
        if errors is not None:
            self.append(*errors)

    def __iter__(self) -> Iterator[AssertionFailed]:
        yield from self._errors

    @override
    def __str__(self) -> str:
        return "\n\n".join(str(error) for error in self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    @override
    def raised(self, error_type: type[AssertionFailed]) -> bool:
        return any(error.raised(error_type) for error in self._errors)

    @property
    def valid(self) -> bool:
        """
        Check that this collection contains no errors.
        """
        return len(self._errors) == 0

    @property
    def invalid(self) -> bool:
        """
        Check that this collection contains at least one error.
        """
        return not self.valid

    @contextmanager
    def assert_valid(self) -> Iterator[Self]:
        """
        Assert that this collection contains no errors.
        """
        if self.invalid:
            raise self
        with self.catch():
            yield self
        if self.invalid:  # type: ignore[redundant-expr]
            raise self

    def append(self, *errors: AssertionFailed) -> None:
        """
        Append errors to this collection.
        """
        for error in errors:
            if isinstance(error, AssertionFailedGroup):
                self.append(*error)
            else:
                self._errors.append(error.with_context(*reversed(self._contexts)))

    @override
    def with_context(self, *contexts: Contextey) -> Self:
        self_copy = super().with_context(*contexts)
        self_copy._errors = [error.with_context(*contexts) for error in self._errors]
        return self_copy

    @override
    def _copy(self) -> Self:
        return type(self)()

    @contextmanager
    def catch(self, *contexts: Contextey) -> Iterator[AssertionFailedGroup]:
        """
        Catch any errors raised within this context manager and add them to the collection.

        :return: A new collection that will only contain any newly raised errors.
        """
        context_errors: AssertionFailedGroup = AssertionFailedGroup()
        if contexts:
            context_errors = context_errors.with_context(*contexts)
        try:
            yield context_errors
        except AssertionFailed as e:
            context_errors.append(e)
        self.append(*context_errors)
