"""Tests for the error struct/exception pairs."""

import pytest

from monadkit.errors import InvalidState, InvalidStateError, Rejected, RejectedError


class TestInvalidState:
    def test_struct_to_exception(self):
        exc = InvalidState('wrong variant', 3).to_exception()
        assert isinstance(exc, InvalidStateError)
        assert exc.message == 'wrong variant'
        assert exc.value == 3

    def test_exception_to_struct(self):
        assert InvalidStateError('wrong variant', 3).to_struct() == InvalidState('wrong variant', 3)

    def test_is_runtime_error(self):
        with pytest.raises(RuntimeError, match='wrong variant'):
            raise InvalidStateError('wrong variant')


class TestRejected:
    def test_round_trip(self):
        assert RejectedError('boom').to_struct().to_exception().reason == 'boom'

    def test_message(self):
        assert str(RejectedError('boom')) == "Rejected with 'boom'"

    def test_struct_is_frozen(self):
        with pytest.raises(AttributeError):
            Rejected('x').reason = 'y'  # type: ignore[misc]
