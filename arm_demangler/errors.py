"""
Exceptions raised when a symbol cannot be demangled.

Every exception derives from `ValueError`, so callers that only care whether
demangling worked can catch that (or `DemangleError`) alone.
"""


class DemangleError(ValueError):
    """
    Base class for all ARM demangling failures.
    """


class MalformedLength(DemangleError):
    """
    A decimal length, index or count could not be read.
    """


class UnexpectedEnd(DemangleError):
    """
    The symbol ended where the grammar required more characters.
    """


class UnknownOperatorCode(DemangleError):
    """
    An operator code has no entry in the operator table.
    """


class BackReferenceOutOfRange(DemangleError):
    """
    A `T` or `N` code referenced an argument which was never decoded.
    """


class UnsupportedTypeCode(DemangleError):
    """
    A character is not one of the alternatives of the type grammar.
    """


class IterationLimitExceeded(DemangleError):
    """
    An argument list grew past the iteration safety bound.
    """
