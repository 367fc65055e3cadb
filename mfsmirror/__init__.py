"""mfsmirror - mirror a local directory tree into IPFS MFS."""

from .api import IpfsClient
from .exceptions import (
    MfsAPIError,
    MfsAuthenticationError,
    MfsConfigError,
    MfsError,
    MfsInvalidRequestError,
    MfsInvalidResponseError,
    MfsNetworkError,
    MfsNotFoundError,
    MfsPermissionError,
    MirrorError,
)
from .models import MfsEntry

__all__ = [
    "IpfsClient",
    "MfsEntry",
    "MfsError",
    "MfsAPIError",
    "MfsAuthenticationError",
    "MfsConfigError",
    "MfsInvalidRequestError",
    "MfsInvalidResponseError",
    "MfsNetworkError",
    "MfsNotFoundError",
    "MfsPermissionError",
    "MirrorError",
]
