"""
fluidlet: dynamically scoped ("fluid") variables

A fluid variable is a named, process-wide slot whose current value is
decided by the live call stack of the executing thread, not by lexical
nesting. A caller installs a value for the duration of a call; everything
that call reaches sees the value; when the call ends, normally or by an
exception, the previous value is back.

ARCHITECTURAL GUARANTEE:
------------------------
    - Every thread has its own, unrelated value for each variable
    - Overrides nest strictly last-in first-out
    - Restoration happens before an exception leaves the scope

Bindings are per thread, not per asyncio task.
"""

from fluidlet.cell import Binding, DynamicCell
from fluidlet.declare import FluidRegistry, bind_all, fluid_let, with_bindings
from fluidlet.errors import (
    BindingOrderError,
    FluidError,
    ManifestParseError,
    ReentrancyError,
    UnboundVariableError,
)
from fluidlet.model import NO_DEFAULT, CellState, Declaration, Reading

__version__ = "0.1.0"

__all__ = [
    "Binding",
    "BindingOrderError",
    "CellState",
    "Declaration",
    "DynamicCell",
    "FluidError",
    "FluidRegistry",
    "ManifestParseError",
    "NO_DEFAULT",
    "Reading",
    "ReentrancyError",
    "UnboundVariableError",
    "bind_all",
    "fluid_let",
    "with_bindings",
]
