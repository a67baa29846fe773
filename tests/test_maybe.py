"""Tests for the Maybe type (Some and Nothing)."""

import pytest
from hypothesis import given

from monadkit import Fail, InvalidStateError, Nothing, NothingType, Ok, Some, maybe, none, some
from tests.strategies import integers


class TestConstruction:
    def test_maybe_none_is_nothing(self):
        assert maybe(None) is Nothing

    @pytest.mark.parametrize('value', [0, '', False, [], 0.0])
    def test_falsy_values_are_present(self, value):
        """Presence is decided by `is None` only."""
        assert maybe(value) == Some(value)
        assert maybe(value).is_some()

    def test_some_and_none_factories(self):
        assert some(1) == Some(1)
        assert none() is Nothing

    def test_nothing_singleton_equality(self):
        assert NothingType() == Nothing

    def test_repr(self):
        assert repr(Nothing) == 'Nothing'
        assert repr(Some(1)) == 'Some(value=1)'


class TestAccessors:
    def test_unwrap_some(self):
        assert Some(3).unwrap() == 3

    def test_unwrap_nothing_raises(self):
        with pytest.raises(InvalidStateError):
            Nothing.unwrap()

    def test_value_or(self):
        assert Some(0).value_or(5) == 0
        assert Nothing.value_or(5) == 5

    def test_match(self):
        assert Some(2).match(some=lambda v: v + 1, none=lambda: 0) == 3
        assert Nothing.match(some=lambda v: v + 1, none=lambda: 0) == 0


class TestCombinators:
    def test_map(self):
        assert Some(2).map(lambda v: v * 2) == Some(4)
        assert Nothing.map(lambda v: v * 2) is Nothing

    def test_map_to_none_collapses(self):
        assert Some({}).map(lambda d: d.get('missing')) is Nothing

    def test_flat_map(self):
        assert Some(2).flat_map(lambda v: Some(v + 1)) == Some(3)
        assert Some(2).flat_map(lambda v: Nothing) is Nothing

    def test_filter(self):
        assert Some(2).filter(lambda v: v > 1) == Some(2)
        assert Some(0).filter(lambda v: v > 1) is Nothing
        assert Nothing.filter(lambda v: True) is Nothing

    @given(integers)
    def test_to_result_round_trip(self, value):
        """Ok(v).maybe_ok().to_result(e) is Ok(v) again."""
        assert Ok(value).maybe_ok().to_result('missing') == Ok(value)

    def test_nothing_to_result(self):
        assert Nothing.to_result('missing') == Fail('missing')
