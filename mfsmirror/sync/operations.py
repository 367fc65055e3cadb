"""Remote tree operations used by the sync engine."""

import logging

from ..api import IpfsClient
from ..exceptions import MfsError, MfsNotFoundError, MirrorError
from ..models import MfsEntry

logger = logging.getLogger(__name__)


class RemoteTreeEditor:
    """Structural operations on the MFS tree.

    Every client failure is raised as a MirrorError naming the operation and
    the path it was applied to.
    """

    def __init__(self, client: IpfsClient):
        """Initialize remote tree editor.

        Args:
            client: IPFS API client
        """
        self.client = client

    def mkdir_all(self, path: str, durable: bool = False) -> None:
        """Create a directory and its missing parents.

        No error if the directory already exists.

        Args:
            path: Absolute MFS path
            durable: Whether the node should flush the change
        """
        try:
            self.client.files_mkdir(path, parents=True, flush=durable)
        except MfsError as e:
            raise MirrorError("mkdir -p", path, e) from e

    def remove_recursive(
        self, path: str, durable: bool = False, missing_ok: bool = False
    ) -> bool:
        """Remove a subtree.

        Args:
            path: Absolute MFS path
            durable: Whether the node should flush the change
            missing_ok: Tolerate a path that does not exist

        Returns:
            True if something was removed, False if the path was missing
        """
        try:
            self.client.files_rm(path, recursive=True, flush=durable)
        except MfsNotFoundError as e:
            if missing_ok:
                logger.debug("Nothing to remove at %s", path)
                return False
            raise MirrorError("rm -r", path, e) from e
        except MfsError as e:
            raise MirrorError("rm -r", path, e) from e
        return True

    def bind_content(self, content_hash: str, path: str, durable: bool = False) -> None:
        """Attach previously added content at a path.

        Args:
            content_hash: CID returned by add
            path: Absolute MFS path
            durable: Whether the node should flush the change
        """
        try:
            self.client.files_cp(f"/ipfs/{content_hash}", path, flush=durable)
        except MfsError as e:
            raise MirrorError("cp", path, e) from e

    def list_children(self, path: str) -> list[MfsEntry]:
        """List the entries of a directory.

        Args:
            path: Absolute MFS path

        Returns:
            Entries in directory order
        """
        try:
            return self.client.files_ls(path, long=True, unsorted=True)
        except MfsError as e:
            raise MirrorError("ls", path, e) from e

    def flush(self, path: str) -> str:
        """Persist the subtree rooted at a path.

        Args:
            path: Absolute MFS path

        Returns:
            CID of the flushed subtree
        """
        try:
            return self.client.files_flush(path)
        except MfsError as e:
            raise MirrorError("flush", path, e) from e
