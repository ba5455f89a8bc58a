"""Exceptions raised by the alignment engine."""


class AlignmentError(Exception):
    """Base class for alignment failures."""


class ConfigurationError(AlignmentError, ValueError):
    """Raised when an alignment is requested with incomplete or incompatible inputs."""


class NumericRangeError(AlignmentError, OverflowError):
    """Raised when scores could exceed the range of the score accumulator."""


class TracebackError(AlignmentError, AssertionError):
    """Raised when traceback reaches a cell no recurrence can explain.

    This means the score matrices are inconsistent with the recurrence that
    filled them; it is never a user error.
    """
