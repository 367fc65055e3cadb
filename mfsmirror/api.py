"""API client for the IPFS node RPC API (Kubo)."""

from __future__ import annotations

import json
import logging
from typing import IO, Any

import httpx

from .config import config
from .exceptions import (
    MfsAPIError,
    MfsAuthenticationError,
    MfsInvalidRequestError,
    MfsInvalidResponseError,
    MfsNetworkError,
    MfsNotFoundError,
    MfsPermissionError,
)
from .models import MfsEntry

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v0"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class IpfsClient:
    """Client for the MFS and add commands of an IPFS node's RPC API."""

    def __init__(
        self,
        api_url: str | None = None,
        api_auth: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize IPFS API client.

        Args:
            api_url: Optional base URL of the RPC API (uses config if not provided)
            api_auth: Optional Authorization header value (uses config if not
                provided)
            timeout: Request timeout in seconds (uses config if not provided)
        """
        self.api_url = (api_url or config.api_url).rstrip("/")
        self.api_auth = api_auth or config.api_auth
        self.timeout = timeout if timeout is not None else config.timeout

        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            headers = {}
            if self.api_auth:
                headers["Authorization"] = self.api_auth
            self._client = httpx.Client(
                headers=headers,
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def _handle_http_error(self, e: httpx.HTTPStatusError) -> MfsAPIError:
        """Translate an HTTP error response into an exception.

        The RPC API reports command failures as a JSON body with a
        ``Message`` field, usually with status 500.

        Args:
            e: The HTTP error exception

        Returns:
            Exception to raise
        """
        status_code = e.response.status_code

        if status_code == 401:
            return MfsAuthenticationError(
                "Unauthorized - check the API authorization", status_code
            )
        elif status_code == 403:
            return MfsPermissionError(
                "Access forbidden - check the API access control", status_code
            )

        error_msg = f"API request failed with status {status_code}"
        try:
            if e.response.content:
                error_data = e.response.json()
                if isinstance(error_data, dict) and error_data.get("Message"):
                    error_msg = error_data["Message"]
        except ValueError:
            # Plain text body, e.g. "404 page not found"
            text = e.response.text.strip()
            if text:
                error_msg = f"{error_msg}: {text}"

        if "does not exist" in error_msg:
            return MfsNotFoundError(error_msg, status_code)
        return MfsAPIError(error_msg, status_code)

    def _post(self, command: str, params: Any = None, **kwargs: Any) -> httpx.Response:
        """Send an RPC command.

        Args:
            command: Command path (e.g. "files/mkdir")
            params: Query parameters
            **kwargs: Additional arguments passed to httpx

        Returns:
            The successful response

        Raises:
            MfsAPIError: If the node reports an error
            MfsNetworkError: If the node cannot be reached
            MfsInvalidRequestError: If a path or name cannot be encoded
        """
        url = f"{self.api_url}{API_PREFIX}/{command}"
        logger.debug("POST %s %s", command, params)

        try:
            response = self._get_client().post(url, params=params, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._handle_http_error(e) from e
        except httpx.RequestError as e:
            raise MfsNetworkError(f"Network error: {e}") from e
        except UnicodeEncodeError as e:
            # Non UTF-8 file names decoded with surrogateescape
            raise MfsInvalidRequestError(
                f"Cannot encode {command} request: {e}"
            ) from e
        return response

    def _request(self, command: str, params: Any = None, **kwargs: Any) -> Any:
        """Send an RPC command and decode its JSON response.

        Returns:
            Response JSON data, or an empty dict for an empty body
        """
        response = self._post(command, params, **kwargs)
        if not response.content:
            return {}

        content_type = response.headers.get("Content-Type", "")
        if "application/json" not in content_type:
            raise MfsInvalidResponseError(f"Unexpected response type: {content_type}")

        try:
            return response.json()
        except ValueError as e:
            raise MfsInvalidResponseError(f"Invalid JSON response from {command}") from e

    # =========================
    # Content Operations
    # =========================

    def add(self, stream: IO[bytes], name: str = "file", pin: bool = False) -> str:
        """Add file content to the node.

        Args:
            stream: Binary file object to upload
            name: File name sent with the upload
            pin: Whether the node should pin the content

        Returns:
            CID of the added content
        """
        response = self._post(
            "add",
            params={"pin": _flag(pin), "progress": "false"},
            files={"file": (name, stream, "application/octet-stream")},
        )

        # The response is a stream of JSON objects, one per line; the last
        # one describes the added file.
        lines = [line for line in response.text.splitlines() if line.strip()]
        if not lines:
            raise MfsInvalidResponseError("Empty response from add")
        try:
            result = json.loads(lines[-1])
        except ValueError as e:
            raise MfsInvalidResponseError("Invalid JSON response from add") from e

        cid = result.get("Hash") if isinstance(result, dict) else None
        if not cid:
            raise MfsInvalidResponseError(f"No hash in add response: {result}")
        return cid

    # =========================
    # MFS Operations
    # =========================

    def files_mkdir(self, path: str, parents: bool = True, flush: bool = True) -> None:
        """Create a directory in MFS.

        Args:
            path: Absolute MFS path
            parents: Create missing parents, no error if the directory exists
            flush: Whether to flush the change to disk
        """
        self._request(
            "files/mkdir",
            params={"arg": path, "parents": _flag(parents), "flush": _flag(flush)},
        )

    def files_rm(self, path: str, recursive: bool = True, flush: bool = True) -> None:
        """Remove a file or directory from MFS.

        Args:
            path: Absolute MFS path
            recursive: Remove directories recursively
            flush: Whether to flush the change to disk
        """
        self._request(
            "files/rm",
            params={
                "arg": path,
                "recursive": _flag(recursive),
                "flush": _flag(flush),
            },
        )

    def files_cp(self, source: str, dest: str, flush: bool = True) -> None:
        """Copy an IPFS path or MFS path to an MFS path.

        Args:
            source: Source path (e.g. "/ipfs/<cid>")
            dest: Destination MFS path
            flush: Whether to flush the change to disk
        """
        self._request(
            "files/cp",
            params=[("arg", source), ("arg", dest), ("flush", _flag(flush))],
        )

    def files_ls(
        self, path: str, long: bool = True, unsorted: bool = True
    ) -> list[MfsEntry]:
        """List an MFS directory.

        Args:
            path: Absolute MFS path
            long: Include type, size and hash of each entry
            unsorted: Return entries in directory order

        Returns:
            List of entries
        """
        data = self._request(
            "files/ls",
            params={"arg": path, "long": _flag(long), "U": _flag(unsorted)},
        )
        entries = data.get("Entries") or []
        return [MfsEntry.from_dict(entry) for entry in entries]

    def files_flush(self, path: str = "/") -> str:
        """Flush an MFS path to disk.

        Args:
            path: Absolute MFS path

        Returns:
            CID of the flushed node
        """
        data = self._request("files/flush", params={"arg": path})
        return data.get("Cid", "")
