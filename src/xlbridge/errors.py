from __future__ import annotations


class XlBridgeError(Exception):
    """Base class for all xlbridge failures."""


class InvalidFormatError(XlBridgeError, ValueError):
    """Malformed cell, range, or colour notation."""


class NotFoundError(XlBridgeError, LookupError):
    """A sheet, defined name, or cell target does not exist."""


class UnsupportedOperationError(XlBridgeError, NotImplementedError):
    """The selected backend cannot provide the requested capability."""


class BackendUnavailableError(XlBridgeError, RuntimeError):
    """The live-automation backend could not attach or launch."""


class IOFailureError(XlBridgeError, OSError):
    """Underlying persistence or file-system error."""


__all__ = [
    "BackendUnavailableError",
    "IOFailureError",
    "InvalidFormatError",
    "NotFoundError",
    "UnsupportedOperationError",
    "XlBridgeError",
]
