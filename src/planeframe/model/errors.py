"""
Exception hierarchy shared by the model and controller layers.

Expected outcomes of user interaction (no node under the cursor, a rejected
self-loop click) are NOT errors and are returned as ordinary values.
"""


class PlaneFrameError(Exception):
    """Base class for all errors raised by planeframe."""


class InvalidArgumentError(PlaneFrameError, ValueError):
    """A caller passed a value outside the domain of an operation.

    Examples: a non-positive zoom factor, a non-finite coordinate,
    a line element whose endpoints are identical.
    """


class UnresolvedReferenceError(PlaneFrameError, LookupError):
    """An id does not resolve to an entity of the current model."""


class ModelFormatError(PlaneFrameError):
    """A persisted model could not be parsed or failed validation."""
