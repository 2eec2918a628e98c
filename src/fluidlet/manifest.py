"""
Manifest Parser for fluid declarations (YAML text -> Declaration objects).

Manifest Format:
    fluids:
      - name: HASH_LENGTH
        type: int
        default: 8
        description: Length of hash representations in characters
      - name: REQUEST_ID
        type: str

Syntax Notes:
    - type is optional and defaults to "any"
    - default is optional; without it the fluid has no default value
    - Unknown keys are ignored with a warning
"""

import warnings
from pathlib import Path
from typing import Any, List, Union

import yaml

from fluidlet.declare import FluidRegistry
from fluidlet.errors import ManifestParseError
from fluidlet.model import NO_DEFAULT, TYPE_NAMES, Declaration, value_matches_type

KNOWN_KEYS = {"name", "type", "default", "description"}


def _parse_entry(entry: Any, index: int) -> Declaration:
    if not isinstance(entry, dict):
        raise ManifestParseError(f"Entry {index} must be a mapping, got {type(entry).__name__}")

    name = entry.get("name")
    if not isinstance(name, str) or not name.isidentifier():
        raise ManifestParseError(f"Entry {index} has an invalid name: {name!r}")

    unknown = set(entry) - KNOWN_KEYS
    if unknown:
        warnings.warn(f"Unknown keys for {name}: {sorted(unknown)}", UserWarning)

    type_name = entry.get("type") or "any"
    if not isinstance(type_name, str) or type_name not in TYPE_NAMES:
        raise ManifestParseError(
            f"Unknown type '{type_name}' for {name}; expected one of {sorted(TYPE_NAMES)}"
        )

    default = entry.get("default", NO_DEFAULT)
    if default is not NO_DEFAULT and not value_matches_type(default, TYPE_NAMES[type_name]):
        raise ManifestParseError(
            f"Default for {name} must be {type_name}, got {type(default).__name__}"
        )

    description = entry.get("description")
    return Declaration(
        name=name,
        type_name=type_name,
        default=default,
        description=str(description) if description is not None else None,
    )


def parse_manifest(text: str) -> List[Declaration]:
    """
    Parse a YAML manifest into declarations.

    Args:
        text: Manifest content

    Returns:
        Declarations in manifest order

    Raises:
        ManifestParseError: If the document is empty, malformed, or declares
            an unknown type, a mistyped default or a duplicate name
    """
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"Invalid YAML: {str(e)}") from e

    if doc is None:
        raise ManifestParseError("Manifest is empty")
    if not isinstance(doc, dict) or not isinstance(doc.get("fluids"), list):
        raise ManifestParseError("Manifest must contain a 'fluids' list")

    declarations = [_parse_entry(entry, i) for i, entry in enumerate(doc["fluids"], start=1)]

    names = [d.name for d in declarations]
    duplicates = {n for n in names if names.count(n) > 1}
    if duplicates:
        raise ManifestParseError(f"Duplicate fluid names: {sorted(duplicates)}")

    return declarations


def load_manifest(filepath: Union[str, Path]) -> List[Declaration]:
    """
    Load and parse a manifest file.

    Raises:
        FileNotFoundError: If the file does not exist
        ManifestParseError: If parsing fails
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Manifest file not found: {filepath}")
    return parse_manifest(path.read_text(encoding="utf-8"))


def registry_from_manifest(text: str) -> FluidRegistry:
    """Parse a manifest and declare every entry in a fresh registry."""
    registry = FluidRegistry()
    registry.declare_many(parse_manifest(text))
    return registry
