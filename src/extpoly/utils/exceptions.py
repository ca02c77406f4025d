"""
Custom exceptions for the extpoly package.
"""

class ExtPolyError(Exception):
    """Base exception for extpoly errors.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class IOFailure(ExtPolyError):
    """Raised when the storage backing a term store fails.

    The failure is never retried; the original :class:`OSError` is chained
    as ``__cause__``.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class MalformedTerm(ExtPolyError):
    """Raised when a persisted term line or an input term cannot be parsed.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class MalformedKey(MalformedTerm):
    """Raised when a monomial key has an invalid factor or exponent.
    
    Parameters
    ----------
    message : str
        The error message.
    """
    
    def __init__(self, message: str):
        super().__init__(message)
