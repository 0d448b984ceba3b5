from __future__ import annotations


class ImpositionError(Exception):
    pass


class InternalLayoutError(ImpositionError, RuntimeError):
    """A variant's arithmetic broke a plan invariant; the run must not produce output."""


class InvalidInputError(ImpositionError, ValueError):
    pass


class OrientationMismatchError(InvalidInputError):
    pass
