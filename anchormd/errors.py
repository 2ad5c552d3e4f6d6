"""Exception hierarchy for anchormd."""

from __future__ import annotations


class AnchorMDError(Exception):
    """Base exception for all anchormd errors."""


class ValidationError(AnchorMDError, ValueError):
    """Malformed configuration or empty/undersized input."""


class ParseError(AnchorMDError, ValueError):
    """A structure buffer could not be turned into atoms."""


class ResourceAdmissionError(AnchorMDError, RuntimeError):
    """
    Accelerated-path memory budget was rejected.

    Recoverable: the engine downgrades to the reference path.
    """


class DeviceUnavailableError(AnchorMDError, RuntimeError):
    """
    Accelerated path requested without a usable backend context.

    Recoverable: the engine downgrades to the reference path.
    """


class InternalError(AnchorMDError, RuntimeError):
    """Invariant violation. Fatal for the run and the engine."""


__all__ = [
    "AnchorMDError",
    "ValidationError",
    "ParseError",
    "ResourceAdmissionError",
    "DeviceUnavailableError",
    "InternalError",
]
