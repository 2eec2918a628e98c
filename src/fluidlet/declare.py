"""
Declaring fluid variables.

Builds DynamicCell instances from a name, an element type and a default,
and keeps named cells together in a FluidRegistry.

    TRACE = fluid_let("TRACE", bool, default=False)

    registry = FluidRegistry()
    registry.declare("INDENT", int, default=0)
    with bind_all({TRACE: True, registry["INDENT"]: 4}):
        ...

Also provides multi-cell binding helpers (bind_all, with_bindings).
"""

from __future__ import annotations

import collections.abc
import copy
import functools
import logging
import threading
import warnings
from contextlib import ExitStack, contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from fluidlet.cell import DynamicCell
from fluidlet.model import NO_DEFAULT, Declaration, value_matches_type

logger = logging.getLogger(__name__)


def _literal_initializer(default: Any) -> Callable[[], Any]:
    # Every thread gets its own copy of a literal default.
    def initializer():
        return copy.deepcopy(default)
    return initializer


def fluid_let(
    name: str,
    type_: Any = None,
    default: Any = NO_DEFAULT,
    initializer: Optional[Callable[[], Any]] = None,
    registry: Optional[FluidRegistry] = None,
    description: Optional[str] = None,
) -> DynamicCell:
    """
    Declare one fluid variable.

    Args:
        name: Variable name
        type_: Optional element type
        default: Literal default (deep-copied per thread)
        initializer: Zero-argument callable producing the default
        registry: If given, the new cell is registered under name
        description: Optional human-readable description

    Returns:
        The new DynamicCell

    Raises:
        ValueError: If both default and initializer are given
        TypeError: If the literal default does not match type_
    """
    if default is not NO_DEFAULT and initializer is not None:
        raise ValueError(f"Fluid variable '{name}': give a default or an initializer, not both")
    if default is not NO_DEFAULT:
        if isinstance(type_, type) and not value_matches_type(default, type_):
            raise TypeError(
                f"Default for fluid variable '{name}' must be {type_.__name__}, "
                f"got {type(default).__name__}"
            )
        initializer = _literal_initializer(default)

    cell = DynamicCell(name, initializer=initializer, type_=type_, description=description)
    if registry is not None:
        registry.register(cell)
    return cell


class FluidRegistry:
    """
    Named collection of fluid variables.

    The registry only maps names to cells. It holds no per-thread state
    of its own; all values live in the cells.
    """

    def __init__(self) -> None:
        self._cells: Dict[str, DynamicCell] = {}
        self._lock = threading.Lock()

    def register(self, cell: DynamicCell) -> DynamicCell:
        with self._lock:
            if cell.name in self._cells:
                logger.warning("Fluid variable %s redeclared", cell.name)
                warnings.warn(f"Fluid variable '{cell.name}' redeclared", UserWarning)
            self._cells[cell.name] = cell
        return cell

    def declare(
        self,
        name: str,
        type_: Any = None,
        default: Any = NO_DEFAULT,
        initializer: Optional[Callable[[], Any]] = None,
        description: Optional[str] = None,
    ) -> DynamicCell:
        return fluid_let(
            name,
            type_,
            default=default,
            initializer=initializer,
            registry=self,
            description=description,
        )

    def declare_from(self, declaration: Declaration) -> DynamicCell:
        return self.declare(
            declaration.name,
            declaration.element_type,
            default=declaration.default,
            description=declaration.description,
        )

    def declare_many(self, declarations: Iterable[Declaration]) -> List[DynamicCell]:
        return [self.declare_from(d) for d in declarations]

    def get(self, name: str) -> Optional[DynamicCell]:
        return self._cells.get(name)

    def names(self) -> List[str]:
        return list(self._cells)

    def __getitem__(self, name: str) -> DynamicCell:
        return self._cells[name]

    def __contains__(self, name: object) -> bool:
        return name in self._cells

    def __iter__(self) -> Iterator[DynamicCell]:
        return iter(list(self._cells.values()))

    def __len__(self) -> int:
        return len(self._cells)


BindingSpec = Union[Mapping[DynamicCell, Any], Iterable[Tuple[DynamicCell, Any]]]


def _pairs(bindings: BindingSpec) -> List[Tuple[DynamicCell, Any]]:
    if isinstance(bindings, collections.abc.Mapping):
        return list(bindings.items())
    return list(bindings)


@contextmanager
def bind_all(bindings: BindingSpec):
    """
    Install several overrides for the duration of a with-block.

    Overrides are installed in the given order and removed in reverse.
    Binding the same cell twice nests like two separate with-blocks.
    """
    with ExitStack() as stack:
        for cell, value in _pairs(bindings):
            stack.enter_context(cell.assign(value))
        yield


def with_bindings(
    bindings: Optional[BindingSpec] = None,
    dynamic: Optional[Mapping[DynamicCell, Callable[[], Any]]] = None,
):
    """
    Decorator form of bind_all.

    Args:
        bindings: Fixed values, bound on every call
        dynamic: Zero-argument callables evaluated on every call;
            their results are bound after the fixed values
    """
    fixed = _pairs(bindings or {})
    computed = list((dynamic or {}).items())

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            pairs = fixed + [(cell, make()) for cell, make in computed]
            with bind_all(pairs):
                return func(*args, **kwargs)
        return wrapper

    return decorator
