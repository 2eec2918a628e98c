"""
Example fluid variables for demos and tests.

Builds a small registry in the spirit of logging/formatting configuration:
a debug switch, an indentation level, a hash display length and a log prefix.
"""
from fluidlet.declare import FluidRegistry
from fluidlet.manifest import parse_manifest

EXAMPLE_MANIFEST = """\
fluids:
  - name: HASH_LENGTH
    type: int
    default: 8
    description: Length of hash representations in characters
  - name: LOG_PREFIX
    type: str
    default: ""
  - name: REQUEST_ID
    type: str
    description: Identifier of the request being served, if any
"""


def build_example_registry() -> FluidRegistry:
    registry = FluidRegistry()
    registry.declare("DEBUG", bool, default=False)
    registry.declare("INDENT", int, default=0)
    registry.declare_many(parse_manifest(EXAMPLE_MANIFEST))
    return registry


def format_hash(registry: FluidRegistry, digest: str) -> str:
    """Render a digest using the current HASH_LENGTH and LOG_PREFIX."""
    length = registry["HASH_LENGTH"].get()
    prefix = registry["LOG_PREFIX"].get()
    indent = " " * registry["INDENT"].get()
    return f"{indent}{prefix}{digest[:length]}"
