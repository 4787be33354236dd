# cnf_errors.py
from __future__ import annotations


class EncodingError(Exception):
    """Base class for conditions reported by the encoding layer."""


class ImpossibleConstraint(EncodingError):
    """A constraint has no satisfying combination at all (detected before solving)."""


class UnsupportedConstraint(EncodingError):
    """A constraint was requested with a shape the encoder does not handle."""


class Unsatisfiable(EncodingError):
    """The solver finished normally but found no model."""


class SolverUnavailable(EncodingError):
    """No usable SAT backend could be instantiated."""
