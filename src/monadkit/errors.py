"""Error types: dual struct+exception for Result and raise-based code."""

from __future__ import annotations

from typing import Any

import msgspec

__all__ = [
    'InvalidState',
    'InvalidStateError',
    'Rejected',
    'RejectedError',
]


# --- Misuse Errors ---


class InvalidState(msgspec.Struct, frozen=True, gc=False):
    """Misuse or unusable state - struct variant for Result[T, InvalidState].

    An AsyncResult whose single-use source was cancelled mid-await resolves
    to Fail(InvalidState) on every later await.
    """

    message: str
    value: Any = None

    def to_exception(self) -> InvalidStateError:
        """Convert to exception for raise-based code."""
        return InvalidStateError(self.message, self.value)


class InvalidStateError(RuntimeError):
    """Unwrap called on the wrong variant - exception variant.

    Raised by `Fail.unwrap()`, `Ok.unwrap_fail()` and `Nothing.unwrap()`.
    These are the only operations in the package that raise on purpose.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        self.message = message
        self.value = value
        super().__init__(message)

    def to_struct(self) -> InvalidState:
        """Convert to struct for Result-based code."""
        return InvalidState(self.message, self.value)


# --- Bridging Errors ---


class Rejected(msgspec.Struct, frozen=True, gc=False):
    """A Fail payload leaving the Result world - struct variant."""

    reason: Any

    def to_exception(self) -> RejectedError:
        """Convert to exception for raise-based code."""
        return RejectedError(self.reason)


class RejectedError(Exception):
    """A non-exception Fail payload raised through an awaitable - exception variant."""

    def __init__(self, reason: Any) -> None:
        self.reason = reason
        super().__init__(f'Rejected with {reason!r}')

    def to_struct(self) -> Rejected:
        """Convert to struct for Result-based code."""
        return Rejected(self.reason)
