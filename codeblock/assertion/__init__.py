"""
The Assertion API.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import (
    Callable,
    Any,
    Generic,
    TypeVar,
    MutableMapping,
    TypeAlias,
    final,
)

from codeblock.assertion.error import AssertionFailedGroup, AssertionFailed, Key

_AssertionValueT = TypeVar("_AssertionValueT")
_AssertionReturnT = TypeVar("_AssertionReturnT")
_EnumT = TypeVar("_EnumT", bound=Enum)

Assertion: TypeAlias = Callable[
    [
        _AssertionValueT,
    ],
    _AssertionReturnT,
]

_AssertionsExtendReturnT = TypeVar("_AssertionsExtendReturnT")


class AssertionChain(Generic[_AssertionValueT, _AssertionReturnT]):
    """
    An assertion chain.

    Assertion chains let you chain/link/combine assertions into pipelines that take an input
    value and, if the assertions pass, return an output value. Each chain may be (re)used as many
    times as needed.

    Assertion chains are assertions themselves: you can use a chain wherever you can use a 'plain'
    assertion.
    """

    def __init__(self, _assertion: Assertion[_AssertionValueT, _AssertionReturnT]):
        self._assertion = _assertion

    def chain(
        self, assertion: Assertion[_AssertionReturnT, _AssertionsExtendReturnT]
    ) -> AssertionChain[_AssertionValueT, _AssertionsExtendReturnT]:
        """
        Extend the chain with the given assertion.
        """
        return AssertionChain(lambda value: assertion(self(value)))

    def __or__(
        self, _assertion: Assertion[_AssertionReturnT, _AssertionsExtendReturnT]
    ) -> AssertionChain[_AssertionValueT, _AssertionsExtendReturnT]:
        return self.chain(_assertion)

    def __call__(self, value: _AssertionValueT) -> _AssertionReturnT:
        """
        Invoke the chain with a value.

        :raises codeblock.assertion.error.AssertionFailed: Raised if any part of the
            assertion chain fails.
        """
        return self._assertion(value)


@dataclass(frozen=True)
class _Field(Generic[_AssertionValueT, _AssertionReturnT]):
    name: str
    assertion: Assertion[_AssertionValueT, _AssertionReturnT] | None = None


@final
@dataclass(frozen=True)
class OptionalField(
    Generic[_AssertionValueT, _AssertionReturnT],
    _Field[_AssertionValueT, _AssertionReturnT],
):
    """
    An optional key-value mapping field.
    """

    pass  # pragma: no cover


_ASSERT_TYPE_VIOLATION_ERROR_MESSAGES: Mapping[type, str] = {
    bool: "This must be a boolean.",
    Mapping: "This must be a key-value mapping.",
    str: "This must be a string.",
}


def _assert_type(
    value: Any,
    value_required_type: type,
    value_disallowed_type: type | None = None,
) -> Any:
    if isinstance(value, value_required_type) and (
        value_disallowed_type is None or not isinstance(value, value_disallowed_type)
    ):
        return value
    raise AssertionFailed(_ASSERT_TYPE_VIOLATION_ERROR_MESSAGES[value_required_type])


def assert_bool() -> AssertionChain[Any, bool]:
    """
    Assert that a value is a Python ``bool``.
    """

    def _assert_bool(value: Any) -> bool:
        return _assert_type(value, bool)  # type: ignore[no-any-return]

    return AssertionChain(_assert_bool)


def assert_str() -> AssertionChain[Any, str]:
    """
    Assert that a value is a Python ``str``.
    """

    def _assert_str(value: Any) -> str:
        return _assert_type(value, str)  # type: ignore[no-any-return]

    return AssertionChain(_assert_str)


def assert_enum(enum_type: type[_EnumT]) -> AssertionChain[Any, _EnumT]:
    """
    Assert that a value is one of the values of the given enum.
    """

    def _assert_enum(value: str) -> _EnumT:
        try:
            return enum_type(value)
        except ValueError:
            raise AssertionFailed(
                '"{value}" is not valid. Choose one of: {choices}.'.format(
                    value=value,
                    choices=", ".join(f'"{member.value}"' for member in enum_type),
                )
            ) from None

    return assert_str() | _assert_enum


def assert_mapping() -> AssertionChain[Any, MutableMapping[Any, Any]]:
    """
    Assert that a value is a key-value mapping.
    """

    def _assert_mapping(value: Any) -> MutableMapping[Any, Any]:
        return dict(_assert_type(value, Mapping))

    return AssertionChain(_assert_mapping)


def assert_fields(
    *fields: _Field[Any, Any],
) -> AssertionChain[Any, MutableMapping[str, Any]]:
    """
    Assert that a value is a key-value mapping of arbitrary value types, and assert several of its values.
    """

    def _assert_fields(value: Mapping[Any, Any]) -> MutableMapping[str, Any]:
        mapping: MutableMapping[str, Any] = {}
        with AssertionFailedGroup().assert_valid() as errors:
            for field in fields:
                with errors.catch(Key(field.name)):
                    if field.name in value:
                        mapping[field.name] = (
                            field.assertion(value[field.name])
                            if field.assertion
                            else value[field.name]
                        )
        return mapping

    return assert_mapping() | _assert_fields


def assert_record(
    *fields: _Field[Any, Any],
) -> AssertionChain[Any, MutableMapping[str, Any]]:
    """
    Assert that a value is a record: a key-value mapping of arbitrary value types, with a known structure.

    To validate a key-value mapping as a records, assertions for all possible keys
    MUST be provided. Any keys present in the value for which no field assertions
    are provided will cause the entire record assertion to fail.
    """

    def _assert_record(value: Mapping[Any, Any]) -> MutableMapping[str, Any]:
        known_keys = {x.name for x in fields}
        unknown_keys = set(value.keys()) - known_keys
        with AssertionFailedGroup().assert_valid() as errors:
            for unknown_key in sorted(map(str, unknown_keys)):
                with errors.catch(Key(unknown_key)):
                    raise AssertionFailed(
                        'Unknown key: "{unknown_key}". Did you mean one of: {known_keys}?'.format(
                            unknown_key=unknown_key,
                            known_keys=", ".join(f'"{x}"' for x in sorted(known_keys)),
                        )
                    )
            return assert_fields(*fields)(value)

    return assert_mapping() | _assert_record


def assert_setattr(
    instance: object,
    attr_name: str,
) -> AssertionChain[Any, Any]:
    """
    Set a value for the given object's attribute.
    """

    def _assert_setattr(value: Any) -> Any:
        setattr(instance, attr_name, value)
        # Return the getter's return value rather than the assertion value, just
        # in case the setter and/or getter perform changes to the value.
        return getattr(instance, attr_name)

    return AssertionChain(_assert_setattr)
