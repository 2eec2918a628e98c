"""
Tests for the registry analyzer.
"""

import threading

from fluidlet.declare import FluidRegistry, bind_all
from fluidlet.report import DEEP_NESTING_THRESHOLD, analyze_registry


def build_registry():
    registry = FluidRegistry()
    registry.declare("DEBUG", bool, default=False)
    registry.declare("INDENT", int, default=0)
    registry.declare("REQUEST_ID", str)
    return registry


def test_idle_registry():
    registry = build_registry()
    report = analyze_registry(registry)
    assert report.total_cells == 3
    assert report.overridden == []
    assert report.materialized == []
    assert report.without_default == ["REQUEST_ID"]
    assert report.max_depth == 0
    assert any("no default" in w for w in report.warnings)


def test_report_does_not_materialize():
    registry = build_registry()
    analyze_registry(registry)
    assert registry["DEBUG"].state().materialized is False


def test_overrides_and_materialized_defaults():
    registry = build_registry()
    registry["INDENT"].get()
    with bind_all([(registry["DEBUG"], True), (registry["DEBUG"], False)]):
        report = analyze_registry(registry)
    assert report.overridden == ["DEBUG"]
    assert report.materialized == ["INDENT"]
    assert report.depths == {"DEBUG": 2, "INDENT": 0, "REQUEST_ID": 0}
    assert report.max_depth == 2


def test_other_threads_are_invisible():
    registry = build_registry()
    reports = []
    with registry["DEBUG"].assign(True):
        t = threading.Thread(target=lambda: reports.append(analyze_registry(registry)))
        t.start()
        t.join()
    assert reports[0].overridden == []


def test_deep_nesting_warning():
    registry = build_registry()
    indent = registry["INDENT"]
    with bind_all([(indent, n) for n in range(DEEP_NESTING_THRESHOLD + 1)]):
        report = analyze_registry(registry)
    assert any("INDENT is nested" in w for w in report.warnings)
