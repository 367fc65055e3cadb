"""Local directory scanning for sync operations."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """Represents a regular local file."""

    path: Path
    """Absolute path to the file"""

    name: str
    """File name within its directory"""

    size: int
    """File size in bytes"""


@dataclass
class LocalDirectory:
    """Immediate children of a local directory, partitioned by kind."""

    path: Path
    """Path to the directory"""

    dirs: list[str] = field(default_factory=list)
    """Names of child directories"""

    files: list[LocalFile] = field(default_factory=list)
    """Regular files in the directory"""

    @property
    def is_empty(self) -> bool:
        """True if the directory has neither subdirectories nor files."""
        return not self.dirs and not self.files


def read_directory(path: Path) -> LocalDirectory:
    """Read the immediate children of a directory.

    Symlinks, devices, sockets and other special files are skipped; symlinks
    are never followed.

    Args:
        path: Directory to read

    Returns:
        LocalDirectory with child directories and regular files, sorted by name

    Raises:
        OSError: If the directory cannot be read
    """
    directory = LocalDirectory(path=path)

    with os.scandir(path) as entries:
        for entry in sorted(entries, key=lambda e: e.name):
            if entry.is_dir(follow_symlinks=False):
                directory.dirs.append(entry.name)
            elif entry.is_file(follow_symlinks=False):
                stat = entry.stat(follow_symlinks=False)
                directory.files.append(
                    LocalFile(path=Path(entry.path), name=entry.name, size=stat.st_size)
                )
            else:
                logger.debug("Skipping special file %s", entry.path)

    return directory
