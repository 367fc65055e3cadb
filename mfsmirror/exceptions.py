"""Exceptions raised by mfsmirror."""

from __future__ import annotations


class MfsError(Exception):
    """Base exception for errors talking to the IPFS node."""


class MfsConfigError(MfsError):
    """Raised when the client configuration is invalid."""


class MfsNetworkError(MfsError):
    """Raised when the IPFS node cannot be reached."""


class MfsInvalidRequestError(MfsError):
    """Raised when a request cannot be encoded, e.g. a non UTF-8 file name."""


class MfsInvalidResponseError(MfsError):
    """Raised when the IPFS node returns a response that cannot be parsed."""


class MfsAPIError(MfsError):
    """Raised when the IPFS node reports an error for a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MfsNotFoundError(MfsAPIError):
    """Raised when an MFS path does not exist."""


class MfsAuthenticationError(MfsAPIError):
    """Raised when the RPC API rejects the request credentials."""


class MfsPermissionError(MfsAPIError):
    """Raised when the RPC API forbids the request."""


class MirrorError(Exception):
    """A synchronization step failed.

    Carries the name of the failing operation and the path it was applied to.
    The underlying exception is available as ``__cause__``.
    """

    def __init__(self, operation: str, path: str, cause: BaseException | None = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        message = f"{operation} {path!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
