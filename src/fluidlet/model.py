"""
Core Fluid Model Objects

Defines the plain data structures shared by the fluidlet package.

These are pure data classes representing:
    - Readings (what an observer sees when it reads a cell)
    - Cell states (per-thread snapshot of a cell's state machine)
    - Declarations (what a declaration supplies to build a cell)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about thread-local storage
        - Are immutable once built
        - Are fully serializable (Declaration)
        - Represent structure, not behavior
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fluidlet.errors import UnboundVariableError


class _NoDefault:
    """Sentinel type for a declaration without a default value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


NO_DEFAULT = _NoDefault()


# Element types a declaration may name. "any" disables the runtime check.
TYPE_NAMES: Dict[str, Optional[type]] = {
    "any": None,
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "list": list,
    "dict": dict,
}


def type_for_name(type_name: str) -> Optional[type]:
    """
    Resolve a declared type name to a Python type.

    Raises:
        KeyError: If the name is not one of TYPE_NAMES
    """
    return TYPE_NAMES[type_name]


def value_matches_type(value: Any, type_: Optional[type]) -> bool:
    """
    Check a value against a declared element type.

    bool is a subclass of int in Python, but a fluid declared as int
    must not silently accept True/False. Floats accept ints.
    """
    if type_ is None:
        return True
    if type_ is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if type_ is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, type_)


@dataclass(frozen=True)
class Reading:
    """
    Read-only view of a cell's current value on the calling thread.

    This is what `DynamicCell.access` hands to its observer.

    Properties:
        name:
            Name of the cell that was read

        overridden:
            True if an override installed by a scoped binding is active

        present:
            True if there is a value to look at: either an override,
            or (no override) a materialized default

    States:
        overridden=True,  present=True   -> innermost override
        overridden=False, present=True   -> no override, default available
        overridden=False, present=False  -> no override, no default

    IMPORTANT:
        The reading does not copy the value. Mutating a mutable value
        through it mutates the installed override or the default.
    """

    name: str
    overridden: bool
    present: bool
    _value: Any = None

    @property
    def value(self) -> Any:
        """
        The current value.

        Raises:
            UnboundVariableError: If nothing is present
        """
        if not self.present:
            raise UnboundVariableError(
                f"Fluid variable '{self.name}' has no override and no default"
            )
        return self._value

    def get(self, fallback: Any = None) -> Any:
        """Return the current value, or fallback if nothing is present."""
        if not self.present:
            return fallback
        return self._value


@dataclass(frozen=True)
class CellState:
    """
    Snapshot of one cell's state machine on the calling thread.

    Properties:
        materialized:
            The default initializer has run on this thread
            (Uninitialized -> DefaultMaterialized happens at most once)

        depth:
            Number of currently active overrides (0, 1, 2, ...)

        initializing:
            The default initializer is running right now on this thread
    """

    materialized: bool = False
    depth: int = 0
    initializing: bool = False


@dataclass(frozen=True)
class Declaration:
    """
    Everything needed to build one fluid variable.

    This is the interface between declaration sources (code, YAML
    manifests) and the core cell.

    Properties:
        name:
            Identifier of the fluid variable (e.g., "HASH_LENGTH")

        type_name:
            Element type name, one of TYPE_NAMES ("any" by default)

        default:
            Literal default value, or NO_DEFAULT.
            Each thread receives its own deep copy.

        description:
            Human-readable description (optional)
    """

    name: str
    type_name: str = "any"
    default: Any = NO_DEFAULT
    description: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def element_type(self) -> Optional[type]:
        return type_for_name(self.type_name)
