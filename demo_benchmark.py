"""
Demo: cost of reading and binding a fluid variable compared to a plain global.
"""

import timeit

from fluidlet import fluid_let

COUNTER = fluid_let("COUNTER", int, default=0)
PLAIN_COUNTER = None
MAGIC_VALUE = 42
ITERATIONS = 200_000


def read_fluid():
    return COUNTER.get(0)


def read_plain():
    return PLAIN_COUNTER if PLAIN_COUNTER is not None else 0


def bind_fluid():
    return COUNTER.scoped_bind(MAGIC_VALUE, read_fluid)


def bind_plain():
    global PLAIN_COUNTER
    PLAIN_COUNTER = MAGIC_VALUE
    try:
        return read_plain()
    finally:
        PLAIN_COUNTER = None


def report(label, func):
    seconds = timeit.timeit(func, number=ITERATIONS)
    print(f"  {label:<16} {seconds / ITERATIONS * 1e9:8.1f} ns/op")


def main():
    print()
    print("=" * 70)
    print(f"FLUID VARIABLE BENCHMARK ({ITERATIONS} iterations)")
    print("=" * 70)
    with COUNTER.assign(1):
        report("get / dynamic", read_fluid)
    report("get / static", read_plain)
    report("set / dynamic", bind_fluid)
    report("set / static", bind_plain)
    print()


if __name__ == "__main__":
    main()
