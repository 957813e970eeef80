# Exceptions raised by autotls.


class AutoTLSError(Exception):
    """Base class for every error raised by this package."""


class GenerationError(AutoTLSError):
    """Key generation or certificate signing failed.

    The underlying exception is available as ``__cause__``.
    """


class InvalidInputError(AutoTLSError, ValueError):
    """An IP address string is not a valid IPv4 or IPv6 literal."""
