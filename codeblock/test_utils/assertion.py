"""
Test utilities for :py:mod:`codeblock.assertion`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TYPE_CHECKING

from codeblock.assertion.error import (
    AssertionFailed,
    AssertionFailedGroup,
    Contextey,
    format_contexts,
)

if TYPE_CHECKING:
    from collections.abc import Sequence


def assert_error(
    actual_error: AssertionFailed,
    *,
    error_type: type[AssertionFailed] = AssertionFailed,
    error_message: str | None = None,
    error_contexts: Sequence[Contextey] | None = None,
) -> Sequence[AssertionFailed]:
    """
    Assert that an error (group) contains an error matching the given parameters.
    """
    if isinstance(actual_error, AssertionFailedGroup):
        errors = [*actual_error]
    else:
        errors = [actual_error]
    errors = [error for error in errors if isinstance(error, error_type)]
    if error_message is not None:
        errors = [
            error
            for error in errors
            if str(error).startswith(error_message)
        ]
    if error_contexts is not None:
        expected_contexts = format_contexts(*error_contexts)
        errors = [
            error
            for error in errors
            if format_contexts(*error.contexts) == expected_contexts
        ]
    if errors:
        return errors
    raise AssertionError(f"Failed raising {error_type.__name__}.")


@contextmanager
def raises_error(
    *,
    error_type: type[AssertionFailed] = AssertionFailed,
    error_message: str | None = None,
    error_contexts: Sequence[Contextey] | None = None,
) -> Iterator[AssertionFailedGroup]:
    """
    Provide a context manager to assert that an error matching the given parameters is raised.
    """
    errors = AssertionFailedGroup()
    with errors.catch():
        yield errors
    assert_error(
        errors,
        error_type=error_type,
        error_message=error_message,
        error_contexts=error_contexts,
    )
