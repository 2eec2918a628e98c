"""Exceptions raised by the fluidlet package."""


class FluidError(Exception):
    """Base class for fluidlet errors."""
    pass


class ReentrancyError(FluidError):
    """Raised when a cell is read or bound while its own initializer runs."""
    pass


class BindingOrderError(FluidError):
    """
    Raised when a binding is exited out of LIFO order.

    Also covers exiting on another thread than the one that entered,
    exiting a binding that was never entered, and entering twice.
    The cell's override stack is left untouched.
    """
    pass


class UnboundVariableError(FluidError, LookupError):
    """Raised when a value is requested from a cell that has none."""
    pass


class ManifestParseError(FluidError):
    """Raised when a declaration manifest cannot be parsed."""
    pass
