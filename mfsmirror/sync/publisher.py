"""Publishing of single files into MFS."""

import logging
from enum import Enum
from typing import Optional

from ..api import IpfsClient
from ..exceptions import MfsError, MirrorError
from ..output import OutputFormatter
from ..utils import format_size
from .cache import HashCache, XattrHashCache
from .operations import RemoteTreeEditor
from .scanner import LocalFile

logger = logging.getLogger(__name__)


class PublishResult(str, Enum):
    """Outcome of publishing one file."""

    PUBLISHED = "published"
    UNCHANGED = "unchanged"


class ContentPublisher:
    """Adds a file's content to the node and binds it at a remote path.

    The file content is always added, which yields its CID. The remote tree
    is only touched when that CID differs from the one cached on the file by
    the previous successful publish.
    """

    def __init__(
        self,
        client: IpfsClient,
        editor: Optional[RemoteTreeEditor] = None,
        cache: Optional[HashCache] = None,
        output: Optional[OutputFormatter] = None,
    ):
        """Initialize content publisher.

        Args:
            client: IPFS API client
            editor: Remote tree editor (created from client if not provided)
            cache: Hash cache (extended attributes if not provided)
            output: Output formatter for reporting events
        """
        self.client = client
        self.editor = editor or RemoteTreeEditor(client)
        self.cache = cache if cache is not None else XattrHashCache()
        self.output = output or OutputFormatter()

    def publish(
        self, local_file: LocalFile, remote_path: str, flush_depth: int
    ) -> PublishResult:
        """Publish a local file at a remote path.

        Args:
            local_file: File to publish
            remote_path: Absolute MFS path for the file
            flush_depth: Remaining flush depth; the copy is flushed if >= 0

        Returns:
            PublishResult.UNCHANGED if the cached hash matched, otherwise
            PublishResult.PUBLISHED

        Raises:
            MirrorError: If any step fails
        """
        durable = flush_depth >= 0
        content_hash = self._add(local_file)

        cached = self.cache.get(local_file.path)
        if cached is not None and cached == content_hash.encode():
            self.output.event("SAME", remote_path)
            return PublishResult.UNCHANGED

        self.editor.remove_recursive(remote_path, durable=False, missing_ok=True)
        self.editor.bind_content(content_hash, remote_path, durable=durable)

        self.output.event("FILE", remote_path)
        if durable:
            self.output.event("FLUSH", remote_path)

        try:
            self.cache.set(local_file.path, content_hash.encode())
        except OSError as e:
            raise MirrorError("cache hash", str(local_file.path), e) from e

        logger.debug(
            "Published %s (%s) as %s",
            remote_path,
            format_size(local_file.size),
            content_hash,
        )
        return PublishResult.PUBLISHED

    def _add(self, local_file: LocalFile) -> str:
        """Add the file content to the node and return its CID."""
        try:
            f = open(local_file.path, "rb")
        except OSError as e:
            raise MirrorError("open", str(local_file.path), e) from e

        with f:
            try:
                return self.client.add(f, name=local_file.name, pin=False)
            except (MfsError, OSError) as e:
                raise MirrorError("add", str(local_file.path), e) from e
