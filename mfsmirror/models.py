"""Data models for IPFS RPC API responses."""

from dataclasses import dataclass
from typing import Any

# UnixFS entry types as reported by files/ls
ENTRY_TYPE_FILE = 0
ENTRY_TYPE_DIRECTORY = 1


@dataclass
class MfsEntry:
    """One entry of an MFS directory listing."""

    name: str
    type: int = ENTRY_TYPE_FILE
    size: int = 0
    hash: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MfsEntry":
        """Create an MfsEntry from a files/ls entry.

        Args:
            data: Entry dictionary with Name, Type, Size and Hash keys

        Returns:
            MfsEntry instance
        """
        return cls(
            name=data.get("Name", ""),
            type=int(data.get("Type") or ENTRY_TYPE_FILE),
            size=int(data.get("Size") or 0),
            hash=data.get("Hash") or "",
        )

    @property
    def is_directory(self) -> bool:
        """Check if this entry is a directory."""
        return self.type == ENTRY_TYPE_DIRECTORY
