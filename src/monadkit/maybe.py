"""Maybe type: Some[T] | Nothing for optional values.

Used by `Result.maybe_ok`/`maybe_fail` and by `flat_map_maybe`, where a
Nothing is turned into a Fail carrying a caller-supplied error.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn

import msgspec

from monadkit.errors import InvalidStateError

if TYPE_CHECKING:
    from monadkit.result import Result

__all__ = ['Maybe', 'Nothing', 'NothingType', 'Some', 'maybe', 'none', 'some']


class Some[T](msgspec.Struct, frozen=True, gc=False):
    """Some variant of Maybe containing a value of type T.

    Examples:
        >>> Some(42).unwrap()
        42
        >>> Some(42).map(lambda x: x * 2)
        Some(value=84)
    """

    value: T

    def is_some(self) -> bool:
        """Return True since this is Some."""
        return True

    def is_none(self) -> bool:
        """Return False since this is Some."""
        return False

    def unwrap(self) -> T:
        return self.value

    def value_or(self, default: T) -> T:  # noqa: ARG002
        """Return the contained value, ignoring the default."""
        return self.value

    def map[U](self, fn: Callable[[T], U]) -> Maybe[U]:
        """Apply `fn` to the value; a None outcome collapses to Nothing."""
        return maybe(fn(self.value))

    def flat_map[U](self, fn: Callable[[T], Maybe[U]]) -> Maybe[U]:
        return fn(self.value)

    def filter(self, predicate: Callable[[T], bool]) -> Maybe[T]:
        """Return self if the predicate holds, else Nothing."""
        if predicate(self.value):
            return self
        return Nothing

    def match[M](self, some: Callable[[T], M], none: Callable[[], M]) -> M:  # noqa: ARG002
        return some(self.value)

    def to_result[E](self, err: E) -> Result[T, E]:  # noqa: ARG002
        """Convert to Ok(value)."""
        from monadkit.result import Ok

        return Ok(self.value)


class NothingType(msgspec.Struct, frozen=True, gc=False):
    """Nothing variant of Maybe representing absence of a value.

    This is a singleton - use the `Nothing` constant instead of
    instantiating NothingType directly.

    Examples:
        >>> Nothing.is_none()
        True
        >>> Nothing.value_or(0)
        0
    """

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise since Nothing has no value.

        Raises:
            InvalidStateError: Always.
        """
        raise InvalidStateError('Cannot unwrap Nothing')

    def value_or[T](self, default: T) -> T:
        return default

    def map(self, fn: Callable[[Any], Any]) -> NothingType:  # noqa: ARG002
        return self

    def flat_map(self, fn: Callable[[Any], Any]) -> NothingType:  # noqa: ARG002
        return self

    def filter(self, predicate: Callable[[Any], bool]) -> NothingType:  # noqa: ARG002
        return self

    def match[M](self, some: Callable[[Any], M], none: Callable[[], M]) -> M:  # noqa: ARG002
        return none()

    def to_result[E](self, err: E) -> Result[Any, E]:
        """Convert to Fail(err)."""
        from monadkit.result import Fail

        return Fail(err)

    def __repr__(self) -> str:
        return 'Nothing'


Nothing = NothingType()

type Maybe[T] = Some[T] | NothingType


def maybe[T](value: T | None) -> Maybe[T]:
    """Some(value) unless `value` is None.

    Presence is decided by identity with None only: falsy values such as
    0, '' and False are Some.

    Examples:
        >>> maybe(0)
        Some(value=0)
        >>> maybe(None)
        Nothing
    """
    if value is None:
        return Nothing
    return Some(value)


def some[T](value: T) -> Maybe[T]:
    """Create Some(value)."""
    return Some(value)


def none() -> NothingType:
    """Return the Nothing singleton."""
    return Nothing
