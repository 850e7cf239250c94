"""
Error taxonomy.

All failures are raised synchronously at the call site and abort the run.
"""


class GrammergenError(Exception):
    """Base class for grammergen errors."""


class InvalidArgument(GrammergenError, ValueError):
    """A configuration value or argument is out of range."""


class PreconditionViolation(GrammergenError, RuntimeError):
    """An operation was called on input it cannot work with."""
