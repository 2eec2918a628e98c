"""
Dynamic Cell: the binding engine behind every fluid variable.

A DynamicCell owns one per-thread slot. The slot holds a stack of the
overrides currently active on that thread, plus the lazily materialized
default. Overrides are installed by entering a Binding and removed by
exiting it, strictly last-in first-out.

Reading:
    CELL.access(lambda reading: ...)   # full Reading view
    CELL.get(fallback)                 # value or fallback
    CELL.copied() / CELL.cloned()      # shallow / deep copy of the value

Writing (always scoped):
    CELL.scoped_bind(value, body)      # body() runs with value installed
    with CELL.assign(value): ...       # same, as a with-block
    @CELL.bound(value)                 # same, around every call

IMPORTANT:
    Bindings are per thread, not per asyncio task. A binding held across
    an await or a generator yield is visible to anything else running on
    the same thread until the scope exits. Re-establish bindings after a
    suspension point if another task may have run in between.

    Cancellation (KeyboardInterrupt, GeneratorExit, asyncio.CancelledError)
    is an exception in Python, so restoration always runs.
"""

from __future__ import annotations

import copy
import functools
import logging
import threading
from typing import Any, Callable, Generic, List, Optional, TypeVar

from fluidlet.errors import BindingOrderError, ReentrancyError
from fluidlet.model import CellState, Reading, value_matches_type

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class _Slot(threading.local):
    """Per-thread state of one cell. Dropped when the thread ends."""

    def __init__(self) -> None:
        self.frames: List[Binding] = []
        self.default: Any = None
        self.materialized = False
        self.initializing = False


class Binding:
    """
    One scoped override of a DynamicCell.

    Entering installs `value` as the innermost override on the current
    thread. Exiting removes it again and reinstates whatever was active
    before (an outer override, or nothing).

    A Binding may be entered again after it has been exited, but never
    while it is still active.

    Raises (on exit):
        BindingOrderError: If a more recent binding of the same cell is
            still active (those newer bindings are removed together with
            this one, so the caller sees the state from before its own
            install), if exited on another thread, or if not active.
            A newer binding removed this way exits quietly later.
    """

    def __init__(self, cell: DynamicCell, value: Any) -> None:
        self.cell = cell
        self.value = value
        self._thread: Optional[int] = None
        self._depth = 0
        self._unwound = False

    @property
    def active(self) -> bool:
        return self._thread is not None

    def __enter__(self) -> Any:
        if self._thread is not None:
            raise BindingOrderError(
                f"Binding of '{self.cell.name}' is already active"
            )
        slot = self.cell._slot
        self.cell._check_not_initializing(slot, "bind")
        slot.frames.append(self)
        self._thread = threading.get_ident()
        self._unwound = False
        self._depth = len(slot.frames)
        logger.debug("Bound %s=%r (depth %d)", self.cell.name, self.value, self._depth)
        return self.value

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._unwound:
            # Already removed when an outer binding of the same cell exited.
            self._unwound = False
            return False
        if self._thread is None:
            raise BindingOrderError(
                f"Binding of '{self.cell.name}' exited without being entered"
            )
        if self._thread != threading.get_ident():
            raise BindingOrderError(
                f"Binding of '{self.cell.name}' exited on a different thread"
            )
        frames = self.cell._slot.frames
        if frames[-1] is not self:
            stale = frames[self._depth - 1:]
            for binding in stale:
                binding._thread = None
                binding._unwound = binding is not self
            del frames[self._depth - 1:]
            logger.warning(
                "Binding of %s at depth %d exited while depth %d was active; unwound",
                self.cell.name, self._depth, self._depth + len(stale) - 1,
            )
            raise BindingOrderError(
                f"Binding of '{self.cell.name}' at depth {self._depth} exited "
                f"while depth {self._depth + len(stale) - 1} was still active"
            )
        frames.pop()
        self._thread = None
        logger.debug("Restored %s (depth %d)", self.cell.name, len(frames))
        return False

    def __repr__(self) -> str:
        return f"Binding({self.cell.name!r}, {self.value!r}, active={self.active})"


class DynamicCell(Generic[T]):
    """
    A named, process-wide fluid variable with per-thread values.

    Properties:
        name:
            Identifier used in messages and registries

        initializer:
            Zero-argument callable producing the default value.
            Runs lazily, at most once per thread, on the first read
            with no active override. None means "no default".

        type_:
            Optional element type. Plain classes are enforced on every
            install; anything else (e.g. typing.List[int]) is documentation.

        description:
            Optional human-readable description

    A cell is created once and shared; copying it returns the same cell.
    """

    def __init__(
        self,
        name: str,
        initializer: Optional[Callable[[], T]] = None,
        type_: Any = None,
        description: Optional[str] = None,
    ) -> None:
        self.name = name
        self.initializer = initializer
        self.type_ = type_
        self.description = description
        self._slot = _Slot()

    def __repr__(self) -> str:
        return f"DynamicCell({self.name!r})"

    def __copy__(self) -> DynamicCell[T]:
        return self

    def __deepcopy__(self, memo) -> DynamicCell[T]:
        return self

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    def _check_not_initializing(self, slot: _Slot, action: str) -> None:
        if slot.initializing:
            raise ReentrancyError(
                f"Cannot {action} fluid variable '{self.name}' "
                f"while its default initializer is running"
            )

    def _materialize(self, slot: _Slot) -> None:
        slot.initializing = True
        try:
            value = self.initializer()
        finally:
            slot.initializing = False
        slot.default = value
        slot.materialized = True
        logger.debug("Materialized default for %s: %r", self.name, value)

    def _read(self) -> Reading:
        slot = self._slot
        self._check_not_initializing(slot, "read")
        if slot.frames:
            return Reading(self.name, overridden=True, present=True, _value=slot.frames[-1].value)
        if self.initializer is None:
            return Reading(self.name, overridden=False, present=False)
        if not slot.materialized:
            self._materialize(slot)
        return Reading(self.name, overridden=False, present=True, _value=slot.default)

    def access(self, observer: Callable[[Reading], R]) -> R:
        """
        Call observer with a Reading of the current value.

        Args:
            observer: Callable taking a Reading

        Returns:
            Whatever observer returns

        Raises:
            ReentrancyError: If called from this cell's own initializer
        """
        return observer(self._read())

    def get(self, fallback: Any = None) -> Any:
        """Current value (override or default), or fallback if there is none."""
        return self._read().get(fallback)

    def copied(self) -> T:
        """
        Shallow copy of the current value.

        Raises:
            UnboundVariableError: If there is no override and no default
        """
        return self.access(lambda reading: copy.copy(reading.value))

    def cloned(self) -> T:
        """
        Deep copy of the current value.

        Raises:
            UnboundVariableError: If there is no override and no default
        """
        return self.access(lambda reading: copy.deepcopy(reading.value))

    def is_overridden(self) -> bool:
        return bool(self._slot.frames)

    def state(self) -> CellState:
        """Snapshot of this cell's state on the calling thread."""
        slot = self._slot
        return CellState(
            materialized=slot.materialized,
            depth=len(slot.frames),
            initializing=slot.initializing,
        )

    # =========================================================================
    # SCOPED WRITE ACCESS
    # =========================================================================

    def assign(self, value: T) -> Binding:
        """
        Prepare a scoped override; use it as a context manager.

            with HASH_LENGTH.assign(16):
                ...

        Raises:
            TypeError: If value does not match the cell's element type
        """
        if isinstance(self.type_, type) and not value_matches_type(value, self.type_):
            raise TypeError(
                f"Fluid variable '{self.name}' expects {self.type_.__name__}, "
                f"got {type(value).__name__}"
            )
        return Binding(self, value)

    def scoped_bind(self, value: T, body: Callable[[], R]) -> R:
        """
        Run body() with value installed, then restore the prior state.

        Restoration happens on every exit path, before an exception raised
        by body propagates to the caller.

        Returns:
            The result of body()
        """
        with self.assign(value):
            return body()

    def bound(self, value: T) -> Callable[[Callable[..., R]], Callable[..., R]]:
        """Decorator running the wrapped function under assign(value)."""

        def decorator(func: Callable[..., R]) -> Callable[..., R]:
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with self.assign(value):
                    return func(*args, **kwargs)
            return wrapper

        return decorator
