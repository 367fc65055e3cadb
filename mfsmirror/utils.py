"""Utility functions for mfsmirror."""

import posixpath

# =============================================================================
# Constants
# =============================================================================

# Directories fewer than this many levels below the source get flushed
DEFAULT_FLUSH_DEPTH: int = 4

# Extended attribute holding the last published CID of a file
HASH_XATTR: str = "user.ipfs-hash"

# Default address of a local IPFS node's RPC API
DEFAULT_API_URL: str = "http://127.0.0.1:5001"

# Request timeout for RPC calls (seconds)
DEFAULT_TIMEOUT: float = 60.0


# =============================================================================
# Path utilities
# =============================================================================


def join_remote_path(parent: str, name: str) -> str:
    """Join an MFS directory path and a child name.

    Args:
        parent: Absolute MFS path (e.g., "/sync")
        name: Child name

    Returns:
        Joined path using forward slashes

    Examples:
        >>> join_remote_path("/sync", "a.txt")
        '/sync/a.txt'
        >>> join_remote_path("/", "a.txt")
        '/a.txt'
    """
    return posixpath.join(parent, name)


def multiaddr_to_url(multiaddr: str) -> str:
    """Convert an IPFS API multiaddr to an HTTP URL.

    Args:
        multiaddr: Multiaddr as written by the node to $IPFS_PATH/api

    Returns:
        Base URL of the RPC API

    Raises:
        ValueError: If the multiaddr is not a TCP address

    Examples:
        >>> multiaddr_to_url("/ip4/127.0.0.1/tcp/5001")
        'http://127.0.0.1:5001'
        >>> multiaddr_to_url("/ip6/::1/tcp/5001")
        'http://[::1]:5001'
        >>> multiaddr_to_url("/dns4/ipfs.local/tcp/443/https")
        'https://ipfs.local:443'
    """
    parts = multiaddr.strip().strip("/").split("/")
    if len(parts) < 4 or parts[2] != "tcp":
        raise ValueError(f"Unsupported API multiaddr: {multiaddr!r}")

    proto, host, _, port = parts[:4]
    if proto == "ip6":
        host = f"[{host}]"
    elif proto not in ("ip4", "dns", "dns4", "dns6"):
        raise ValueError(f"Unsupported API multiaddr: {multiaddr!r}")

    scheme = "https" if "https" in parts[4:] else "http"
    return f"{scheme}://{host}:{port}"


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
