# src/combinator/errors.py


class CombinatorError(Exception):
    """Base class for failures that abort a whole run."""


class InputError(CombinatorError):
    """The request blob is empty, malformed, or missing `paths`."""


class ValidationError(CombinatorError):
    """The request is well-formed but leaves nothing to combine."""


class OutputError(CombinatorError):
    """The combined text could not be written to stdout or a temp file."""
