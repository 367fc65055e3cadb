"""Shared fixtures for the mfsmirror test suite."""

import hashlib
import posixpath

import pytest

from mfsmirror.exceptions import MfsAPIError, MfsNotFoundError
from mfsmirror.models import ENTRY_TYPE_DIRECTORY, ENTRY_TYPE_FILE, MfsEntry
from mfsmirror.output import OutputFormatter


class FakeIpfsClient:
    """In-memory stand-in for IpfsClient.

    Directories are dicts, files are CID strings. Every call is recorded in
    ``calls`` as a tuple starting with the command name.
    """

    def __init__(self):
        self.root: dict = {}
        self.blobs: dict[str, bytes] = {}
        self.calls: list[tuple] = []
        self.fail_on: dict[tuple[str, str], Exception] = {}

    # helpers

    def _split(self, path: str) -> list[str]:
        return [part for part in path.split("/") if part]

    def _lookup(self, path: str):
        node = self.root
        for part in self._split(path):
            if not isinstance(node, dict) or part not in node:
                raise MfsNotFoundError("file does not exist", 500)
            node = node[part]
        return node

    def _parent(self, path: str) -> tuple[dict, str]:
        parent = self._lookup(posixpath.dirname(path.rstrip("/")) or "/")
        if not isinstance(parent, dict):
            raise MfsAPIError("not a directory", 500)
        return parent, posixpath.basename(path.rstrip("/"))

    def _check_failure(self, command: str, path: str) -> None:
        error = self.fail_on.get((command, path))
        if error is not None:
            raise error

    def exists(self, path: str) -> bool:
        try:
            self._lookup(path)
        except MfsNotFoundError:
            return False
        return True

    def names(self, path: str) -> set[str]:
        return set(self._lookup(path))

    def commands(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def flushed_paths(self) -> list[str]:
        return [call[1] for call in self.commands("files/flush")]

    # client interface

    def add(self, stream, name="file", pin=False):
        data = stream.read()
        self.calls.append(("add", name, pin))
        self._check_failure("add", name)
        cid = "Qm" + hashlib.sha256(data).hexdigest()[:32]
        self.blobs[cid] = data
        return cid

    def files_mkdir(self, path, parents=True, flush=True):
        self.calls.append(("files/mkdir", path, flush))
        self._check_failure("files/mkdir", path)
        node = self.root
        for part in self._split(path):
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                raise MfsAPIError("file already exists", 500)
            node = child

    def files_rm(self, path, recursive=True, flush=True):
        self.calls.append(("files/rm", path, flush))
        self._check_failure("files/rm", path)
        if path.rstrip("/") == "":
            raise MfsAPIError("cannot remove root", 500)
        parent, name = self._parent(path)
        if name not in parent:
            raise MfsNotFoundError("file does not exist", 500)
        del parent[name]

    def files_cp(self, source, dest, flush=True):
        self.calls.append(("files/cp", source, dest, flush))
        self._check_failure("files/cp", dest)
        parent, name = self._parent(dest)
        if name in parent:
            raise MfsAPIError("directory already has entry by that name", 500)
        parent[name] = source.rsplit("/", 1)[-1]

    def files_ls(self, path, long=True, unsorted=True):
        self.calls.append(("files/ls", path))
        self._check_failure("files/ls", path)
        node = self._lookup(path)
        if not isinstance(node, dict):
            raise MfsAPIError("not a directory", 500)
        entries = []
        for name, child in node.items():
            if isinstance(child, dict):
                entries.append(MfsEntry(name, ENTRY_TYPE_DIRECTORY, 0, ""))
            else:
                size = len(self.blobs.get(child, b""))
                entries.append(MfsEntry(name, ENTRY_TYPE_FILE, size, child))
        return entries

    def files_flush(self, path="/"):
        self.calls.append(("files/flush", path))
        self._check_failure("files/flush", path)
        self._lookup(path)
        return "QmFlushed"

    def close(self):
        pass


@pytest.fixture
def fake_client():
    """Provide an in-memory IPFS node."""
    return FakeIpfsClient()


@pytest.fixture
def quiet_output():
    """Provide an output formatter that prints nothing."""
    return OutputFormatter(quiet=True)
