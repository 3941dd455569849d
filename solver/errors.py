# solver/errors.py
"""Failure types raised by the packing core.

``StructuralPrecondition`` describes a puzzle that can never be tiled as given
(board or block out of range, areas that do not add up).  The pre-flight phase
normally reports it as a value; ``PreFlight.require_valid`` raises it for
callers that want an exception.

``LogicViolation`` means the search broke its own commit/undo or
consume/release contract.  It subclasses ``AssertionError`` and is never
caught inside the solver.
"""


class StructuralPrecondition(ValueError):
    pass


class LogicViolation(AssertionError):
    pass


__all__ = ["StructuralPrecondition", "LogicViolation"]
