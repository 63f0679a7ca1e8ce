class AutomatonError(Exception):
    """Base class for every failure raised by the automaton engine."""


class AutomatonValidationError(AutomatonError, ValueError):
    """
    Raised when an automaton cannot be built from the supplied description.

    Subclasses ValueError so callers that already treat bad input as a
    ValueError (the JSON views do) keep working unchanged.
    """


class AutomatonInternalError(AutomatonError, RuntimeError):
    """Raised when an algorithm detects a broken internal invariant."""
