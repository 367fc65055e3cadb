"""Sync engine for mfsmirror - mirror a local tree into MFS."""

from .cache import HashCache, MemoryHashCache, XattrHashCache
from .engine import SyncEngine
from .operations import RemoteTreeEditor
from .publisher import ContentPublisher, PublishResult
from .scanner import LocalDirectory, LocalFile, read_directory

__all__ = [
    "SyncEngine",
    "ContentPublisher",
    "PublishResult",
    "RemoteTreeEditor",
    "HashCache",
    "MemoryHashCache",
    "XattrHashCache",
    "LocalDirectory",
    "LocalFile",
    "read_directory",
]
