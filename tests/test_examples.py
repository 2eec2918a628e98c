"""
Test the example registry used by the demos.
"""

from fluidlet.declare import bind_all
from fluidlet.examples import build_example_registry, format_hash

DIGEST = "9f86d081884c7d659a2feaa0c55ad015"


def test_example_registry_structure():
    registry = build_example_registry()
    assert registry.names() == ["DEBUG", "INDENT", "HASH_LENGTH", "LOG_PREFIX", "REQUEST_ID"]
    assert registry["HASH_LENGTH"].get() == 8
    assert registry["REQUEST_ID"].initializer is None


def test_format_hash_follows_bindings():
    registry = build_example_registry()
    assert format_hash(registry, DIGEST) == "9f86d081"
    bindings = {
        registry["HASH_LENGTH"]: 4,
        registry["LOG_PREFIX"]: "sha256:",
        registry["INDENT"]: 2,
    }
    with bind_all(bindings):
        assert format_hash(registry, DIGEST) == "  sha256:9f86"
    assert format_hash(registry, DIGEST) == "9f86d081"
