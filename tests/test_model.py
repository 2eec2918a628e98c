"""
Tests for fluidlet model objects.

These tests verify:
    - Reading states and accessors
    - CellState defaults
    - Declaration defaults and type resolution
    - Type matching rules
"""

import copy

import pytest

from fluidlet.errors import FluidError, UnboundVariableError
from fluidlet.model import (
    NO_DEFAULT,
    CellState,
    Declaration,
    Reading,
    type_for_name,
    value_matches_type,
)


class TestReading:
    """Test Reading views."""

    def test_overridden_reading(self):
        reading = Reading("YEAR", overridden=True, present=True, _value=2019)
        assert reading.value == 2019
        assert reading.get(0) == 2019

    def test_absent_reading(self):
        reading = Reading("YEAR", overridden=False, present=False)
        assert reading.get() is None
        assert reading.get(7) == 7
        with pytest.raises(UnboundVariableError, match="YEAR"):
            reading.value

    def test_unbound_error_is_lookup_error(self):
        assert issubclass(UnboundVariableError, LookupError)
        assert issubclass(UnboundVariableError, FluidError)

    def test_reading_is_frozen(self):
        reading = Reading("YEAR", overridden=True, present=True, _value=2019)
        with pytest.raises(AttributeError):
            reading.overridden = False


class TestCellState:
    """Test CellState snapshots."""

    def test_defaults(self):
        state = CellState()
        assert state.materialized is False
        assert state.depth == 0
        assert state.initializing is False


class TestDeclaration:
    """Test Declaration objects."""

    def test_minimal_declaration(self):
        d = Declaration(name="REQUEST_ID")
        assert d.type_name == "any"
        assert d.default is NO_DEFAULT
        assert d.has_default is False
        assert d.element_type is None

    def test_declaration_with_default(self):
        d = Declaration(name="HASH_LENGTH", type_name="int", default=8)
        assert d.has_default is True
        assert d.element_type is int

    def test_none_is_a_real_default(self):
        d = Declaration(name="OPTIONAL", default=None)
        assert d.has_default is True


class TestNoDefault:
    """Test the NO_DEFAULT sentinel."""

    def test_is_falsy_singleton(self):
        assert not NO_DEFAULT
        assert repr(NO_DEFAULT) == "NO_DEFAULT"
        assert type(NO_DEFAULT)() is NO_DEFAULT

    def test_survives_copy(self):
        assert copy.deepcopy(NO_DEFAULT) is NO_DEFAULT


class TestTypes:
    """Test type names and matching."""

    def test_unknown_type_name(self):
        with pytest.raises(KeyError):
            type_for_name("complex")

    def test_int_rejects_bool(self):
        assert value_matches_type(3, int)
        assert not value_matches_type(True, int)

    def test_float_accepts_int(self):
        assert value_matches_type(3, float)
        assert value_matches_type(3.5, float)
        assert not value_matches_type(False, float)

    def test_any_accepts_everything(self):
        assert value_matches_type(object(), None)
