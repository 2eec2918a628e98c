"""
Tests for serialization of fluid declarations.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `fluidlet.serialization`.
"""

from fluidlet.manifest import parse_manifest
from fluidlet.model import NO_DEFAULT, Declaration
from fluidlet.serialization import (
    declaration_from_dict,
    declaration_to_dict,
    declarations_from_json,
    declarations_from_yaml,
    declarations_to_dict,
    declarations_to_json,
    declarations_to_yaml,
)


def build_sample_declarations():
    return [
        Declaration(name="HASH_LENGTH", type_name="int", default=8, description="Hash length"),
        Declaration(name="REQUEST_ID", type_name="str"),
        Declaration(name="TAGS", type_name="list", default=["a", "b"]),
        Declaration(name="MAYBE", default=None),
    ]


def test_missing_default_is_omitted():
    d = declaration_to_dict(Declaration(name="REQUEST_ID", type_name="str"))
    assert d == {"name": "REQUEST_ID", "type": "str"}
    assert declaration_from_dict(d).default is NO_DEFAULT


def test_none_default_is_kept():
    d = declaration_to_dict(Declaration(name="MAYBE", default=None))
    assert "default" in d
    assert declaration_from_dict(d).default is None


def test_json_roundtrip():
    declarations = build_sample_declarations()
    restored = declarations_from_json(declarations_to_json(declarations))
    assert restored == declarations


def test_yaml_roundtrip():
    declarations = build_sample_declarations()
    before = declarations_to_dict(declarations)
    restored = declarations_from_yaml(declarations_to_yaml(declarations))
    assert declarations_to_dict(restored) == before


def test_yaml_output_is_a_manifest():
    declarations = build_sample_declarations()
    assert parse_manifest(declarations_to_yaml(declarations)) == declarations
