"""
Serialization helpers for fluid declarations.

Provides lossless JSON/YAML round-trip via intermediate dict representation.
The YAML form is a valid manifest (see fluidlet.manifest).
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from fluidlet.model import NO_DEFAULT, Declaration


def declaration_to_dict(d: Declaration) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": d.name, "type": d.type_name}
    if d.has_default:
        out["default"] = d.default
    if d.description is not None:
        out["description"] = d.description
    return out


def declaration_from_dict(d: Dict[str, Any]) -> Declaration:
    return Declaration(
        name=d["name"],
        type_name=d.get("type", "any"),
        default=d.get("default", NO_DEFAULT),
        description=d.get("description"),
    )


def declarations_to_dict(declarations: List[Declaration]) -> Dict[str, Any]:
    return {"fluids": [declaration_to_dict(d) for d in declarations]}


def declarations_from_dict(d: Dict[str, Any]) -> List[Declaration]:
    return [declaration_from_dict(entry) for entry in d.get("fluids", [])]


def declarations_to_json(declarations: List[Declaration]) -> str:
    return json.dumps(declarations_to_dict(declarations), sort_keys=True)


def declarations_from_json(s: str) -> List[Declaration]:
    return declarations_from_dict(json.loads(s))


def declarations_to_yaml(declarations: List[Declaration]) -> str:
    return yaml.safe_dump(declarations_to_dict(declarations), sort_keys=False)


def declarations_from_yaml(s: str) -> List[Declaration]:
    return declarations_from_dict(yaml.safe_load(s))
