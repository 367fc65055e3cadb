"""Core sync engine that mirrors a local tree into MFS."""

import logging
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Optional, Union

from ..api import IpfsClient
from ..exceptions import MirrorError
from ..output import OutputFormatter
from ..utils import DEFAULT_FLUSH_DEPTH, join_remote_path
from .cache import HashCache
from .operations import RemoteTreeEditor
from .publisher import ContentPublisher, PublishResult
from .scanner import LocalDirectory, LocalFile, read_directory

logger = logging.getLogger(__name__)


class SyncEngine:
    """Mirrors a local directory into an MFS path.

    Subdirectories are synchronized first, depth first, then the files of the
    directory, then remote entries with no local counterpart are removed.
    Directories within ``flush_depth`` levels of the source are flushed once
    they are complete.
    """

    def __init__(
        self,
        client: IpfsClient,
        output: Optional[OutputFormatter] = None,
        cache: Optional[HashCache] = None,
        max_workers: int = 1,
    ):
        """Initialize sync engine.

        Args:
            client: IPFS API client
            output: Output formatter for displaying events/status
            cache: Hash cache for change detection (extended attributes
                if not provided)
            max_workers: Number of parallel workers for publishing the files
                of a directory (default: 1)
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.client = client
        self.output = output or OutputFormatter()
        self.editor = RemoteTreeEditor(client)
        self.publisher = ContentPublisher(client, self.editor, cache, self.output)
        self.max_workers = max_workers
        self._stats_lock = threading.Lock()
        self._stats: dict = self._create_empty_stats()

    def sync(
        self,
        source: Union[str, Path],
        destination: str,
        flush_depth: int = DEFAULT_FLUSH_DEPTH,
    ) -> dict:
        """Mirror a local directory into MFS.

        Args:
            source: Local directory to mirror
            destination: Absolute MFS path
            flush_depth: Number of levels below the source that get flushed

        Returns:
            Dictionary with sync statistics

        Raises:
            ValueError: If the arguments are invalid
            MirrorError: If the sync fails

        Examples:
            >>> engine = SyncEngine(client)
            >>> stats = engine.sync("/home/user/site", "/site")
            >>> print(f"Published {stats['published']} files")
        """
        source = Path(source)
        if not source.exists():
            raise ValueError(f"Local directory does not exist: {source}")
        if not source.is_dir():
            raise ValueError(f"Local path is not a directory: {source}")
        if not destination.startswith("/"):
            raise ValueError(f"Destination must begin with a slash: {destination}")

        self._stats = self._create_empty_stats()

        start_time = time.time()
        logger.debug(
            "Syncing %s to %s (flush depth %d, %d workers)",
            source,
            destination,
            flush_depth,
            self.max_workers,
        )

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                self._sync_directory(source, destination, flush_depth, executor)
        else:
            self._sync_directory(source, destination, flush_depth, None)

        logger.debug("Sync finished in %.2fs", time.time() - start_time)

        if not self.output.quiet:
            self._display_summary(self._stats)

        return dict(self._stats)

    def _create_empty_stats(self) -> dict:
        """Create an empty statistics dictionary.

        Returns:
            Dictionary with zero counts for all stat categories
        """
        return {
            "published": 0,
            "unchanged": 0,
            "deleted": 0,
            "flushed": 0,
            "directories": 0,
        }

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self._stats[key] += 1

    def _sync_directory(
        self,
        source: Path,
        destination: str,
        flush_depth: int,
        executor: Optional[ThreadPoolExecutor],
    ) -> None:
        """Synchronize one directory and everything below it.

        Args:
            source: Local directory
            destination: MFS path of the directory
            flush_depth: Remaining flush depth for this directory
            executor: Worker pool for publishing files, or None
        """
        try:
            local = read_directory(source)
        except OSError as e:
            raise MirrorError("readdir", str(source), e) from e

        children: set[str] = set()

        for name in local.dirs:
            self._sync_directory(
                source / name,
                join_remote_path(destination, name),
                flush_depth - 1,
                executor,
            )
            children.add(name)

        # Files need an existing parent; without subdirectories nothing
        # has created it yet.
        if not local.dirs and local.files:
            self.editor.mkdir_all(destination, durable=False)

        self._publish_files(local.files, destination, flush_depth - 1, executor)
        children.update(f.name for f in local.files)

        self._reconcile(local, destination, children)
        self._count("directories")

        if flush_depth >= 0:
            self.editor.flush(destination)
            self.output.event("FLUSH", destination)
            self._count("flushed")

    def _publish_files(
        self,
        files: list[LocalFile],
        destination: str,
        flush_depth: int,
        executor: Optional[ThreadPoolExecutor],
    ) -> None:
        """Publish the files of one directory.

        With an executor, files are published in parallel. The first failure
        cancels the files that have not started and is raised after the
        running ones return.
        """
        if executor is None or len(files) < 2:
            for local_file in files:
                self._publish_file(local_file, destination, flush_depth)
            return

        futures = [
            executor.submit(self._publish_file, local_file, destination, flush_depth)
            for local_file in files
        ]
        _, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()
        wait(pending)

        for future in futures:
            if future.cancelled():
                continue
            error = future.exception()
            if error is not None:
                raise error

    def _publish_file(
        self, local_file: LocalFile, destination: str, flush_depth: int
    ) -> None:
        remote_path = join_remote_path(destination, local_file.name)
        result = self.publisher.publish(local_file, remote_path, flush_depth)
        if result == PublishResult.UNCHANGED:
            self._count("unchanged")
        else:
            self._count("published")
            if flush_depth >= 0:
                self._count("flushed")

    def _reconcile(
        self, local: LocalDirectory, destination: str, children: set[str]
    ) -> None:
        """Make the remote directory's entries match the local ones.

        An empty local directory is recreated empty remotely. Otherwise
        every remote entry not in ``children`` is removed. The MFS root
        cannot be removed, so it is always pruned entry by entry.
        """
        if local.is_empty and destination != "/":
            self.editor.remove_recursive(destination, durable=False, missing_ok=True)
            self.editor.mkdir_all(destination, durable=False)
            return

        for entry in self.editor.list_children(destination):
            if entry.name in children:
                continue
            remote_path = join_remote_path(destination, entry.name)
            logger.debug(
                "Removing %s %s",
                "directory" if entry.is_directory else "file",
                remote_path,
            )
            self.editor.remove_recursive(remote_path, durable=False)
            self.output.event("DELETE", remote_path)
            self._count("deleted")

    def _display_summary(self, stats: dict) -> None:
        """Display sync summary.

        Args:
            stats: Statistics dictionary
        """
        if self.output.json_output:
            self.output.output_json({"summary": stats})
            return

        self.output.print("")
        self.output.success("Sync complete!")
        self.output.info(f"  Directories: {stats['directories']}")
        self.output.info(f"  Published: {stats['published']}")
        self.output.info(f"  Unchanged: {stats['unchanged']}")
        if stats["deleted"] > 0:
            self.output.info(f"  Deleted: {stats['deleted']}")
        self.output.info(f"  Flushed: {stats['flushed']}")
