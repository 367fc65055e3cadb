"""Per-file cache of the last published content hash.

The cache lets a sync skip the remote write for files whose content has not
changed since the previous run. Values are compared byte-for-byte with the
CID returned by the node.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from ..utils import HASH_XATTR

logger = logging.getLogger(__name__)


class HashCache:
    """Interface for storing the last published hash of a file."""

    def get(self, path: Path) -> Optional[bytes]:
        """Return the cached hash for a file, or None if there is none."""
        raise NotImplementedError

    def set(self, path: Path, value: bytes) -> None:
        """Store the hash for a file.

        Raises:
            OSError: If the value cannot be stored
        """
        raise NotImplementedError


class XattrHashCache(HashCache):
    """Stores hashes in an extended attribute of each file.

    The attribute travels with the file across renames on the same
    filesystem and survives process restarts.
    """

    def __init__(self, attribute: str = HASH_XATTR):
        self.attribute = attribute

    def get(self, path: Path) -> Optional[bytes]:
        try:
            return os.getxattr(path, self.attribute)
        except OSError as e:
            # Missing attribute or no xattr support both mean "not cached"
            logger.debug("No cached hash for %s: %s", path, e)
            return None

    def set(self, path: Path, value: bytes) -> None:
        os.setxattr(path, self.attribute, value)


class MemoryHashCache(HashCache):
    """Keeps hashes in memory, keyed by path."""

    def __init__(self) -> None:
        self._values: dict[Path, bytes] = {}
        self._lock = threading.Lock()

    def get(self, path: Path) -> Optional[bytes]:
        with self._lock:
            return self._values.get(Path(path))

    def set(self, path: Path, value: bytes) -> None:
        with self._lock:
            self._values[Path(path)] = value

    def __len__(self) -> int:
        return len(self._values)
