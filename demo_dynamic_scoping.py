"""
Demo: dynamic scoping, exception safety and thread isolation.
"""

import threading

from fluidlet import fluid_let
from fluidlet.examples import build_example_registry, format_hash
from fluidlet.report import analyze_registry

ENABLED = fluid_let("ENABLED", bool, default=False)


def show(label):
    print(f"  {label:<28} ENABLED = {ENABLED.get()}")


def nested():
    show("inside outer binding")
    ENABLED.scoped_bind(False, lambda: show("inside inner binding"))
    show("inner binding exited")


def failing():
    show("before failure")
    raise RuntimeError("boom")


def main():
    print()
    print("=" * 70)
    print("DYNAMIC SCOPING")
    print("=" * 70)
    show("default")
    ENABLED.scoped_bind(True, nested)
    show("outer binding exited")

    print()
    print("EXCEPTION SAFETY")
    try:
        ENABLED.scoped_bind(True, failing)
    except RuntimeError as e:
        print(f"  caught: {e}")
    show("after failure")

    print()
    print("THREAD ISOLATION")
    seen = []
    with ENABLED.assign(True):
        t = threading.Thread(target=lambda: seen.append(ENABLED.get()))
        t.start()
        t.join()
        show("main thread")
    print(f"  {'worker thread':<28} ENABLED = {seen[0]}")

    print()
    print("REGISTRY")
    registry = build_example_registry()
    digest = "9f86d081884c7d659a2feaa0c55ad015"
    print(f"  {format_hash(registry, digest)}")
    with registry["HASH_LENGTH"].assign(16), registry["LOG_PREFIX"].assign("sha256:"):
        print(f"  {format_hash(registry, digest)}")
        report = analyze_registry(registry)
        print(f"  overridden: {report.overridden}")
    for warning in report.warnings:
        print(f"  warning: {warning}")
    print()


if __name__ == "__main__":
    main()
